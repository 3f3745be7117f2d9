from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class User(BaseModel):
    name: str
    email: str
    password_hash: str
    username: Optional[str] = None
    profile_picture: str = ""
    is_verified: bool = False
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    @property
    def display_name(self) -> str:
        return self.username or self.name or self.email
