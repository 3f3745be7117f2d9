from abc import ABC, abstractmethod
from typing import Dict

from cineverse.domain.models.movie import MovieDetails, MoviePage


class MetadataClient(ABC):
    """Read access to the movie metadata provider.

    List methods return normalized ``MoviePage`` values. Implementations raise
    ``UpstreamUnavailableError`` once retries are exhausted,
    ``UpstreamRequestError`` for rejected requests and ``NotFoundError`` for an
    unknown movie id.
    """

    @abstractmethod
    async def get_popular(self, page: int = 1) -> MoviePage:
        pass

    @abstractmethod
    async def get_trending(self, window: str = "week") -> MoviePage:
        pass

    @abstractmethod
    async def get_top_rated(self, page: int = 1) -> MoviePage:
        pass

    @abstractmethod
    async def get_now_playing(self, page: int = 1) -> MoviePage:
        pass

    @abstractmethod
    async def get_upcoming(self, page: int = 1) -> MoviePage:
        pass

    @abstractmethod
    async def get_by_genre(self, genre_id: int, page: int = 1) -> MoviePage:
        pass

    @abstractmethod
    async def get_details(self, movie_id: int) -> MovieDetails:
        pass

    @abstractmethod
    async def search(self, query: str, page: int = 1) -> MoviePage:
        pass

    @abstractmethod
    async def discover_recent(self) -> MoviePage:
        """Released titles, newest first, with at least 50 votes."""
        pass

    @abstractmethod
    async def get_genres(self) -> Dict[int, str]:
        pass
