from abc import ABC, abstractmethod
from typing import List, Optional

from cineverse.domain.models.movie import MovieRecord


class MovieRepository(ABC):
    @abstractmethod
    async def find_by_title(self, title: str) -> Optional[MovieRecord]:
        """Case-insensitive substring match on the title."""
        pass

    @abstractmethod
    async def get_all_except(self, movie_id: int) -> List[MovieRecord]:
        pass

    @abstractmethod
    async def get_all(self, offset: int = 0, limit: int = 100) -> List[MovieRecord]:
        pass

    @abstractmethod
    async def upsert_many(self, movies: List[MovieRecord]) -> int:
        pass

    @abstractmethod
    async def count(self) -> int:
        pass
