import math

from cineverse.applications.interfaces.dtos.filter_page import PageQuery
from cineverse.applications.interfaces.dtos.social import CommentPage
from cineverse.domain.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from cineverse.domain.models.activity import ActivityEvent, ActivityType
from cineverse.domain.models.social import Comment
from cineverse.domain.models.user import User
from cineverse.domain.ports.repositories.activity_repository import ActivityRepository
from cineverse.domain.ports.repositories.social_repository import CommentRepository

MAX_COMMENT_LENGTH = 500


class ListCommentsUseCase:
    def __init__(self, comment_repository: CommentRepository):
        self.comment_repository = comment_repository

    async def execute(self, movie_id: int, query: PageQuery) -> CommentPage:
        comments, total = await self.comment_repository.get_page(movie_id, query.offset, query.limit)
        return CommentPage(
            comments=comments,
            total=total,
            page=query.page,
            pages=math.ceil(total / query.limit) if total else 0,
        )


class AddCommentUseCase:
    def __init__(self, comment_repository: CommentRepository, activity_repository: ActivityRepository):
        self.comment_repository = comment_repository
        self.activity_repository = activity_repository

    async def execute(self, movie_id: int, user: User, text: str) -> Comment:
        text = (text or "").strip()
        if not text:
            raise ValidationError("Comment cannot be empty")
        if len(text) > MAX_COMMENT_LENGTH:
            raise ValidationError(f"Comment too long (max {MAX_COMMENT_LENGTH} characters)")

        comment = await self.comment_repository.create(
            Comment(
                movie_id=movie_id,
                user_id=user.id,
                username=user.display_name,
                user_profile_picture=user.profile_picture,
                comment=text,
            )
        )
        await self.activity_repository.record_event(
            ActivityEvent(
                user_id=user.id,
                movie_id=movie_id,
                activity_type=ActivityType.COMMENT,
                metadata={"comment_id": comment.id},
            )
        )
        return comment


class DeleteCommentUseCase:
    def __init__(self, comment_repository: CommentRepository):
        self.comment_repository = comment_repository

    async def execute(self, comment_id: int, user_id: int) -> None:
        comment = await self.comment_repository.get_by_id(comment_id)
        if not comment:
            raise NotFoundError("Comment not found")
        if comment.user_id != user_id:
            raise PermissionDeniedError("Not authorized to delete this comment")
        await self.comment_repository.delete(comment_id)
