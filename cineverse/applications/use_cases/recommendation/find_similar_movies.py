from typing import Optional

from cineverse.domain.exceptions import NotFoundError, ValidationError
from cineverse.domain.models.recommendation import SimilarMoviesResult
from cineverse.domain.ports.repositories.movie_repository import MovieRepository
from cineverse.domain.services.text_similarity import rank_by_similarity
from cineverse.infrastructure.logging.logger import Logger

logger = Logger.get_logger(__name__)


class FindSimilarMoviesUseCase:
    """Content similarity over the local catalog (title, overview and genres)."""

    def __init__(self, movie_repository: MovieRepository):
        self.movie_repository = movie_repository

    async def execute(self, movie_title: str, top_k: Optional[int] = None) -> SimilarMoviesResult:
        if not movie_title or not movie_title.strip():
            raise ValidationError("Movie title is required")

        target = await self.movie_repository.find_by_title(movie_title.strip())
        if target is None:
            raise NotFoundError("Movie not found", detail=f"No catalog entry matches '{movie_title}'")

        candidates = await self.movie_repository.get_all_except(target.id)
        results = rank_by_similarity(target, candidates, top_k)
        logger.info(f"Found {len(results)} movies similar to '{target.title}' among {len(candidates)} candidates")

        return SimilarMoviesResult(movie=target.title, similar_movies=results)
