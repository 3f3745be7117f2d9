from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from cineverse.domain.clock import utcnow


class WatchlistItem(BaseModel):
    user_id: int
    movie_id: int
    movie_title: str
    movie_poster: Optional[str] = None
    added_at: datetime = Field(default_factory=utcnow)
    id: Optional[int] = None


class ViewingHistoryItem(BaseModel):
    user_id: int
    movie_id: int
    movie_title: str
    movie_poster: Optional[str] = None
    progress: int = Field(default=0, ge=0, le=100)
    completed: bool = False
    watched_at: datetime = Field(default_factory=utcnow)
    id: Optional[int] = None


class SearchHistoryEntry(BaseModel):
    query: str
    user_id: Optional[int] = None
    search_count: int = 1
    last_searched: datetime = Field(default_factory=utcnow)
    movie_ids: List[int] = Field(default_factory=list)
    id: Optional[int] = None
