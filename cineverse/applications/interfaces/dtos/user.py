from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from cineverse.domain.models.user import User


class UserPublic(BaseModel):
    id: int
    name: str
    username: Optional[str] = None
    email: EmailStr
    profile_picture: str = ""
    is_verified: bool = False
    created_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_domain(cls, user: User) -> "UserPublic":
        return cls.model_validate(user)


class UserUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    username: Optional[str] = Field(default=None, min_length=1, max_length=100)
    profile_picture: Optional[str] = None
