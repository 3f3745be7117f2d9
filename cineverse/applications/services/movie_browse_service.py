from typing import List

from cineverse.domain.exceptions import NotFoundError, ValidationError
from cineverse.domain.models.genre import genre_id_for
from cineverse.domain.models.movie import MovieDetails, MoviePage, MovieRecord
from cineverse.domain.ports.services.metadata_client import MetadataClient

SUGGESTION_LIMIT = 10
TRENDING_WINDOWS = ("day", "week")


class MovieBrowseService:
    """Thin pass-through to the metadata client for the plain listing endpoints."""

    def __init__(self, metadata_client: MetadataClient):
        self.metadata_client = metadata_client

    async def popular(self, page: int = 1) -> MoviePage:
        return await self.metadata_client.get_popular(page)

    async def trending(self, window: str = "week") -> List[MovieRecord]:
        if window not in TRENDING_WINDOWS:
            raise ValidationError("Invalid time window", detail=f"time must be one of {', '.join(TRENDING_WINDOWS)}")
        page = await self.metadata_client.get_trending(window)
        return page.movies

    async def top_rated(self, page: int = 1) -> MoviePage:
        return await self.metadata_client.get_top_rated(page)

    async def now_playing(self, page: int = 1) -> MoviePage:
        return await self.metadata_client.get_now_playing(page)

    async def upcoming(self, page: int = 1) -> MoviePage:
        return await self.metadata_client.get_upcoming(page)

    async def by_genre(self, genre: str, limit: int = 20) -> List[MovieRecord]:
        genre_id = genre_id_for(genre)
        if genre_id is None:
            raise NotFoundError("Genre not found", detail=f"Unknown genre '{genre}'")
        page = await self.metadata_client.get_by_genre(genre_id)
        return page.movies[:limit]

    async def details(self, movie_id: int) -> MovieDetails:
        return await self.metadata_client.get_details(movie_id)

    async def suggestions(self, query: str) -> List[MovieRecord]:
        query = (query or "").strip()
        if not query:
            return []
        page = await self.metadata_client.search(query, 1)
        return page.movies[:SUGGESTION_LIMIT]
