from typing import List, Optional

from pydantic import BaseModel, Field

from cineverse.domain.models.recommendation import SimilarityResult


class SimilarMoviesRequest(BaseModel):
    movie_title: str = Field(min_length=1)
    top_k: Optional[int] = 10


class SimilarMoviesResponse(BaseModel):
    movie: str
    similar_movies: List[SimilarityResult]
    count: int


class HealthResponse(BaseModel):
    status: str
    catalog_size: int
