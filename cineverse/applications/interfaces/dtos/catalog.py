from typing import List

from pydantic import BaseModel, Field

from cineverse.domain.models.movie import MovieRecord


class CatalogPage(BaseModel):
    movies: List[MovieRecord]
    total: int


class CatalogSyncReport(BaseModel):
    pages_requested: int
    pages_synced: int
    movies_upserted: int
    failed_pages: List[int] = Field(default_factory=list)
