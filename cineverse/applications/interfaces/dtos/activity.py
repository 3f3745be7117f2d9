from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from cineverse.domain.models.activity import ActivityType


class TrackActivityRequest(BaseModel):
    activity_type: ActivityType
    movie_id: Optional[int] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)


class TrackActivityResponse(BaseModel):
    message: str
    activity_id: int
