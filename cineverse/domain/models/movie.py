from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field


class MovieRecord(BaseModel):
    """Canonical movie record; every provider response is normalized into this shape."""

    id: int
    title: str
    overview: str = ""
    genres: List[str] = Field(default_factory=list)
    genre_ids: List[int] = Field(default_factory=list)
    popularity: float = 0.0
    rating: float = 0.0
    release_date: Optional[date] = None
    poster_url: Optional[str] = None
    backdrop_url: Optional[str] = None


class CastMember(BaseModel):
    id: int
    name: str
    character: Optional[str] = None
    profile_url: Optional[str] = None


class Trailer(BaseModel):
    key: str
    name: Optional[str] = None
    url: str


class MovieDetails(MovieRecord):
    tagline: Optional[str] = None
    runtime: Optional[int] = None
    budget: Optional[int] = None
    revenue: Optional[int] = None
    status: Optional[str] = None
    production_companies: List[str] = Field(default_factory=list)
    trailer: Optional[Trailer] = None
    cast: List[CastMember] = Field(default_factory=list)
    director: Optional[str] = None
    similar_movies: List[MovieRecord] = Field(default_factory=list)

    def to_record(self) -> MovieRecord:
        return MovieRecord(**self.model_dump(include=set(MovieRecord.model_fields)))


class MoviePage(BaseModel):
    movies: List[MovieRecord] = Field(default_factory=list)
    page: int = 1
    total_pages: int = 0
    total_results: int = 0
