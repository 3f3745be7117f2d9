from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from cineverse.domain.models.social import Comment


class CommentRepository(ABC):
    @abstractmethod
    async def create(self, comment: Comment) -> Comment:
        pass

    @abstractmethod
    async def get_by_id(self, comment_id: int) -> Optional[Comment]:
        pass

    @abstractmethod
    async def get_page(self, movie_id: int, offset: int, limit: int) -> Tuple[List[Comment], int]:
        pass

    @abstractmethod
    async def delete(self, comment_id: int) -> bool:
        pass


class EngagementRepository(ABC):
    @abstractmethod
    async def count_likes(self, movie_id: int) -> int:
        pass

    @abstractmethod
    async def count_shares(self, movie_id: int) -> int:
        pass

    @abstractmethod
    async def has_liked(self, movie_id: int, user_id: int) -> bool:
        pass

    @abstractmethod
    async def has_shared(self, movie_id: int, user_id: int) -> bool:
        pass

    @abstractmethod
    async def add_like(self, movie_id: int, user_id: int) -> None:
        pass

    @abstractmethod
    async def remove_like(self, movie_id: int, user_id: int) -> None:
        pass

    @abstractmethod
    async def add_share(self, movie_id: int, user_id: Optional[int], platform: str) -> None:
        pass
