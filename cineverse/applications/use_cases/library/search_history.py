from cineverse.applications.interfaces.dtos.library import SearchHistoryList
from cineverse.domain.exceptions import NotFoundError
from cineverse.domain.ports.repositories.search_history_repository import SearchHistoryRepository

SEARCH_HISTORY_LIMIT = 50


class GetSearchHistoryUseCase:
    def __init__(self, search_history_repository: SearchHistoryRepository):
        self.search_history_repository = search_history_repository

    async def execute(self, user_id: int) -> SearchHistoryList:
        return SearchHistoryList(
            searches=await self.search_history_repository.get_by_user(user_id, SEARCH_HISTORY_LIMIT)
        )


class DeleteSearchEntryUseCase:
    def __init__(self, search_history_repository: SearchHistoryRepository):
        self.search_history_repository = search_history_repository

    async def execute(self, user_id: int, entry_id: int) -> None:
        if not await self.search_history_repository.delete(entry_id, user_id):
            raise NotFoundError("Search entry not found")


class ClearSearchHistoryUseCase:
    def __init__(self, search_history_repository: SearchHistoryRepository):
        self.search_history_repository = search_history_repository

    async def execute(self, user_id: int) -> int:
        return await self.search_history_repository.delete_all_for_user(user_id)
