from cineverse.applications.interfaces.dtos.library import ViewingHistory, ViewingHistoryRequest
from cineverse.domain.clock import utcnow
from cineverse.domain.models.library import ViewingHistoryItem
from cineverse.domain.ports.repositories.library_repository import ViewingHistoryRepository

DEFAULT_HISTORY_LIMIT = 50


class RecordViewingUseCase:
    def __init__(self, viewing_history_repository: ViewingHistoryRepository):
        self.viewing_history_repository = viewing_history_repository

    async def execute(self, user_id: int, request: ViewingHistoryRequest) -> ViewingHistoryItem:
        return await self.viewing_history_repository.upsert(
            ViewingHistoryItem(
                user_id=user_id,
                movie_id=request.movie_id,
                movie_title=request.movie_title,
                movie_poster=request.movie_poster,
                progress=request.progress,
                completed=request.completed or request.progress >= 100,
                watched_at=utcnow(),
            )
        )


class GetViewingHistoryUseCase:
    def __init__(self, viewing_history_repository: ViewingHistoryRepository):
        self.viewing_history_repository = viewing_history_repository

    async def execute(self, user_id: int, limit: int = DEFAULT_HISTORY_LIMIT) -> ViewingHistory:
        return ViewingHistory(history=await self.viewing_history_repository.get_by_user(user_id, limit))


class ClearViewingHistoryUseCase:
    def __init__(self, viewing_history_repository: ViewingHistoryRepository):
        self.viewing_history_repository = viewing_history_repository

    async def execute(self, user_id: int) -> int:
        return await self.viewing_history_repository.clear(user_id)
