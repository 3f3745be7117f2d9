from abc import ABC, abstractmethod
from typing import List, Optional

from cineverse.domain.models.library import SearchHistoryEntry


class SearchHistoryRepository(ABC):
    @abstractmethod
    async def get_by_query(self, query: str, user_id: Optional[int]) -> Optional[SearchHistoryEntry]:
        pass

    @abstractmethod
    async def create(self, entry: SearchHistoryEntry) -> SearchHistoryEntry:
        pass

    @abstractmethod
    async def update(self, entry: SearchHistoryEntry) -> SearchHistoryEntry:
        pass

    @abstractmethod
    async def get_most_searched(self, limit: int) -> List[SearchHistoryEntry]:
        """Ordered by search_count desc, then last_searched desc."""
        pass

    @abstractmethod
    async def get_by_user(self, user_id: int, limit: int) -> List[SearchHistoryEntry]:
        pass

    @abstractmethod
    async def delete(self, entry_id: int, user_id: int) -> bool:
        pass

    @abstractmethod
    async def delete_all_for_user(self, user_id: int) -> int:
        pass
