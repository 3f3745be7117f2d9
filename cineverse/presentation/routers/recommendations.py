from typing import Annotated

from fastapi import APIRouter, Depends

from cineverse.applications.interfaces.dtos.recommendation import (
    HealthResponse,
    SimilarMoviesRequest,
    SimilarMoviesResponse,
)
from cineverse.applications.use_cases.recommendation.find_similar_movies import FindSimilarMoviesUseCase
from cineverse.domain.ports.repositories.movie_repository import MovieRepository
from cineverse.infrastructure.config.dependencies import get_movie_repository

router = APIRouter(prefix="/recommendations", tags=["recommendations"])

MovieRepositoryDep = Annotated[MovieRepository, Depends(get_movie_repository)]


@router.post("/similar", response_model=SimilarMoviesResponse)
async def similar_movies(request: SimilarMoviesRequest, movie_repository: MovieRepositoryDep):
    """Content-based similar titles from the local catalog"""
    use_case = FindSimilarMoviesUseCase(movie_repository)
    result = await use_case.execute(request.movie_title, request.top_k)
    return SimilarMoviesResponse(movie=result.movie, similar_movies=result.similar_movies, count=result.count)


@router.get("/health", response_model=HealthResponse)
async def health(movie_repository: MovieRepositoryDep):
    return {"status": "ok", "catalog_size": await movie_repository.count()}
