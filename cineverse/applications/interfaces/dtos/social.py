from typing import List

from pydantic import BaseModel, Field

from cineverse.domain.models.social import Comment


class CommentRequest(BaseModel):
    comment: str


class ShareRequest(BaseModel):
    platform: str = Field(default="other", max_length=32)


class LikeResponse(BaseModel):
    liked: bool
    likes: int


class ShareResponse(BaseModel):
    shares: int


class CommentPage(BaseModel):
    comments: List[Comment]
    total: int
    page: int
    pages: int
