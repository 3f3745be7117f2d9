from typing import List

from pydantic import BaseModel, Field

from cineverse.domain.models.movie import MovieRecord


class ScoredCandidate(BaseModel):
    movie_id: int
    score: float


class SimilarityResult(BaseModel):
    movie: MovieRecord
    similarity: int


class SimilarMoviesResult(BaseModel):
    movie: str
    similar_movies: List[SimilarityResult]

    @property
    def count(self) -> int:
        return len(self.similar_movies)


class MovieListResult(BaseModel):
    """Aggregated movie list; degraded_sources names sub-requests that failed on the way."""

    movies: List[MovieRecord] = Field(default_factory=list)
    degraded_sources: List[str] = Field(default_factory=list)

    @property
    def degraded(self) -> bool:
        return bool(self.degraded_sources)
