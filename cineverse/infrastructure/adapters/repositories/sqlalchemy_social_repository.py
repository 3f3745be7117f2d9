from typing import List, Optional, Tuple

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from cineverse.domain.clock import ensure_utc
from cineverse.domain.models.social import Comment
from cineverse.domain.ports.repositories.social_repository import CommentRepository, EngagementRepository
from cineverse.infrastructure.persistence.models import Comment as SQLComment
from cineverse.infrastructure.persistence.models import MovieLike as SQLMovieLike
from cineverse.infrastructure.persistence.models import MovieShare as SQLMovieShare


class SQLAlchemyCommentRepository(CommentRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    def _to_domain(self, row: SQLComment) -> Comment:
        return Comment(
            id=row.id,
            movie_id=row.movie_id,
            user_id=row.user_id,
            username=row.username,
            user_profile_picture=row.user_profile_picture,
            comment=row.comment,
            likes=row.likes,
            created_at=ensure_utc(row.created_at),
        )

    async def create(self, comment: Comment) -> Comment:
        row = SQLComment(
            movie_id=comment.movie_id,
            user_id=comment.user_id,
            username=comment.username,
            comment=comment.comment,
            user_profile_picture=comment.user_profile_picture,
        )
        self.session.add(row)
        await self.session.commit()
        await self.session.refresh(row)
        return self._to_domain(row)

    async def get_by_id(self, comment_id: int) -> Optional[Comment]:
        row = await self.session.get(SQLComment, comment_id)
        return self._to_domain(row) if row else None

    async def get_page(self, movie_id: int, offset: int, limit: int) -> Tuple[List[Comment], int]:
        total = await self.session.scalar(
            select(func.count()).select_from(SQLComment).where(SQLComment.movie_id == movie_id)
        )
        rows = await self.session.scalars(
            select(SQLComment)
            .where(SQLComment.movie_id == movie_id)
            .order_by(SQLComment.created_at.desc(), SQLComment.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return [self._to_domain(row) for row in rows.all()], total or 0

    async def delete(self, comment_id: int) -> bool:
        result = await self.session.execute(delete(SQLComment).where(SQLComment.id == comment_id))
        await self.session.commit()
        return bool(result.rowcount)


class SQLAlchemyEngagementRepository(EngagementRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def count_likes(self, movie_id: int) -> int:
        total = await self.session.scalar(
            select(func.count()).select_from(SQLMovieLike).where(SQLMovieLike.movie_id == movie_id)
        )
        return total or 0

    async def count_shares(self, movie_id: int) -> int:
        total = await self.session.scalar(
            select(func.count()).select_from(SQLMovieShare).where(SQLMovieShare.movie_id == movie_id)
        )
        return total or 0

    async def has_liked(self, movie_id: int, user_id: int) -> bool:
        row = await self.session.scalar(
            select(SQLMovieLike.id).where(SQLMovieLike.movie_id == movie_id, SQLMovieLike.user_id == user_id)
        )
        return row is not None

    async def has_shared(self, movie_id: int, user_id: int) -> bool:
        row = await self.session.scalar(
            select(SQLMovieShare.id)
            .where(SQLMovieShare.movie_id == movie_id, SQLMovieShare.user_id == user_id)
            .limit(1)
        )
        return row is not None

    async def add_like(self, movie_id: int, user_id: int) -> None:
        if await self.has_liked(movie_id, user_id):
            return
        self.session.add(SQLMovieLike(movie_id=movie_id, user_id=user_id))
        await self.session.commit()

    async def remove_like(self, movie_id: int, user_id: int) -> None:
        await self.session.execute(
            delete(SQLMovieLike).where(SQLMovieLike.movie_id == movie_id, SQLMovieLike.user_id == user_id)
        )
        await self.session.commit()

    async def add_share(self, movie_id: int, user_id: Optional[int], platform: str) -> None:
        self.session.add(SQLMovieShare(movie_id=movie_id, user_id=user_id, platform=platform))
        await self.session.commit()
