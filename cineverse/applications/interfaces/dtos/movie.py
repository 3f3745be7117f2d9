from typing import List

from pydantic import BaseModel

from cineverse.domain.models.movie import MovieDetails, MovieRecord


class MovieList(BaseModel):
    movies: List[MovieRecord]


class MoviePageResponse(BaseModel):
    movies: List[MovieRecord]
    page: int
    total_pages: int
    total_results: int


class MovieDetailResponse(BaseModel):
    movie: MovieDetails


class SuggestionList(BaseModel):
    suggestions: List[MovieRecord]


class PersonalizedMovieList(BaseModel):
    movies: List[MovieRecord]
    personalized: bool
