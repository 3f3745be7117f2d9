from typing import Optional

from cineverse.applications.interfaces.dtos.movie import MoviePageResponse
from cineverse.domain.clock import utcnow
from cineverse.domain.exceptions import ValidationError
from cineverse.domain.models.library import SearchHistoryEntry
from cineverse.domain.ports.repositories.search_history_repository import SearchHistoryRepository
from cineverse.domain.ports.services.metadata_client import MetadataClient
from cineverse.infrastructure.logging.logger import Logger

logger = Logger.get_logger(__name__)

RECORDED_RESULT_IDS = 10


class SearchMoviesUseCase:
    def __init__(self, metadata_client: MetadataClient, search_history_repository: SearchHistoryRepository):
        self.metadata_client = metadata_client
        self.search_history_repository = search_history_repository

    async def execute(self, query: str, page: int = 1, user_id: Optional[int] = None) -> MoviePageResponse:
        if not query or not query.strip():
            raise ValidationError("Query parameter is required")

        result = await self.metadata_client.search(query.strip(), page)
        await self._record(query, [movie.id for movie in result.movies[:RECORDED_RESULT_IDS]], user_id)

        return MoviePageResponse(
            movies=result.movies,
            page=result.page,
            total_pages=result.total_pages,
            total_results=result.total_results,
        )

    async def _record(self, query: str, movie_ids: list, user_id: Optional[int]) -> None:
        normalized = query.strip().lower()
        existing = await self.search_history_repository.get_by_query(normalized, user_id)
        if existing is None:
            await self.search_history_repository.create(
                SearchHistoryEntry(query=normalized, user_id=user_id, movie_ids=movie_ids, last_searched=utcnow())
            )
            return

        merged = list(existing.movie_ids)
        merged.extend(movie_id for movie_id in movie_ids if movie_id not in merged)
        existing.search_count += 1
        existing.last_searched = utcnow()
        existing.movie_ids = merged
        await self.search_history_repository.update(existing)
        logger.debug(f"Search '{normalized}' seen {existing.search_count} times")
