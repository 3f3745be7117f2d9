from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class Comment(BaseModel):
    movie_id: int
    user_id: int
    username: str
    comment: str
    user_profile_picture: str = ""
    likes: int = 0
    id: Optional[int] = None
    created_at: Optional[datetime] = None


class EngagementStats(BaseModel):
    likes: int = 0
    shares: int = 0
    has_liked: bool = False
    has_shared: bool = False
