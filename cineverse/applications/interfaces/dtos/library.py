from typing import List, Optional

from pydantic import BaseModel, Field

from cineverse.domain.models.library import SearchHistoryEntry, ViewingHistoryItem, WatchlistItem


class WatchlistRequest(BaseModel):
    movie_id: int
    movie_title: str = Field(min_length=1)
    movie_poster: Optional[str] = None


class ViewingHistoryRequest(BaseModel):
    movie_id: int
    movie_title: str = Field(min_length=1)
    movie_poster: Optional[str] = None
    progress: int = Field(default=0, ge=0, le=100)
    completed: bool = False


class Watchlist(BaseModel):
    watchlist: List[WatchlistItem]


class ViewingHistory(BaseModel):
    history: List[ViewingHistoryItem]


class SearchHistoryList(BaseModel):
    searches: List[SearchHistoryEntry]
