from abc import ABC, abstractmethod
from typing import List

from cineverse.domain.models.library import ViewingHistoryItem, WatchlistItem


class WatchlistRepository(ABC):
    @abstractmethod
    async def upsert(self, item: WatchlistItem) -> WatchlistItem:
        pass

    @abstractmethod
    async def remove(self, user_id: int, movie_id: int) -> bool:
        pass

    @abstractmethod
    async def get_by_user(self, user_id: int) -> List[WatchlistItem]:
        """Newest first."""
        pass


class ViewingHistoryRepository(ABC):
    @abstractmethod
    async def upsert(self, item: ViewingHistoryItem) -> ViewingHistoryItem:
        pass

    @abstractmethod
    async def get_by_user(self, user_id: int, limit: int) -> List[ViewingHistoryItem]:
        pass

    @abstractmethod
    async def clear(self, user_id: int) -> int:
        pass
