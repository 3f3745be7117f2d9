from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from cineverse.domain.clock import utcnow


class ActivityType(str, Enum):
    SEARCH = "search"
    VIEW = "view"
    PLAY = "play"
    LIKE = "like"
    COMMENT = "comment"
    SHARE = "share"
    PURCHASE = "purchase"
    PAGE_VIEW = "page_view"

    @property
    def requires_movie(self) -> bool:
        return self is not ActivityType.PAGE_VIEW


class ActivityEvent(BaseModel):
    user_id: Optional[int] = None
    movie_id: Optional[int] = None
    activity_type: ActivityType
    timestamp: datetime = Field(default_factory=utcnow)
    metadata: Dict[str, Any] = Field(default_factory=dict)
    id: Optional[int] = None
