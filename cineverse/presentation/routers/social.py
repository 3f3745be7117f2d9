from http import HTTPStatus
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query

from cineverse.applications.interfaces.dtos.filter_page import PageQuery
from cineverse.applications.interfaces.dtos.message import Message
from cineverse.applications.interfaces.dtos.social import (
    CommentPage,
    CommentRequest,
    LikeResponse,
    ShareRequest,
    ShareResponse,
)
from cineverse.applications.use_cases.social.comments import (
    AddCommentUseCase,
    DeleteCommentUseCase,
    ListCommentsUseCase,
)
from cineverse.applications.use_cases.social.engagement import (
    GetEngagementUseCase,
    ShareMovieUseCase,
    ToggleLikeUseCase,
)
from cineverse.domain.models.social import Comment, EngagementStats
from cineverse.domain.models.user import User
from cineverse.domain.ports.repositories.activity_repository import ActivityRepository
from cineverse.domain.ports.repositories.social_repository import CommentRepository, EngagementRepository
from cineverse.infrastructure.config.dependencies import (
    get_activity_repository,
    get_comment_repository,
    get_current_user,
    get_engagement_repository,
    get_optional_user,
)

router = APIRouter(prefix="/social", tags=["social"])

CurrentUserDep = Annotated[User, Depends(get_current_user)]
OptionalUserDep = Annotated[Optional[User], Depends(get_optional_user)]
CommentRepositoryDep = Annotated[CommentRepository, Depends(get_comment_repository)]
EngagementRepositoryDep = Annotated[EngagementRepository, Depends(get_engagement_repository)]
ActivityRepositoryDep = Annotated[ActivityRepository, Depends(get_activity_repository)]


@router.get("/{movie_id}/engagement", response_model=EngagementStats)
async def engagement(movie_id: int, engagement_repository: EngagementRepositoryDep, current_user: OptionalUserDep):
    use_case = GetEngagementUseCase(engagement_repository)
    return await use_case.execute(movie_id, current_user.id if current_user else None)


@router.post("/{movie_id}/like", response_model=LikeResponse)
async def toggle_like(
    movie_id: int,
    current_user: CurrentUserDep,
    engagement_repository: EngagementRepositoryDep,
    activity_repository: ActivityRepositoryDep,
):
    use_case = ToggleLikeUseCase(engagement_repository, activity_repository)
    return await use_case.execute(movie_id, current_user.id)


@router.post("/{movie_id}/share", response_model=ShareResponse)
async def share_movie(
    movie_id: int,
    current_user: OptionalUserDep,
    engagement_repository: EngagementRepositoryDep,
    activity_repository: ActivityRepositoryDep,
    request: Optional[ShareRequest] = None,
):
    use_case = ShareMovieUseCase(engagement_repository, activity_repository)
    platform = request.platform if request else "other"
    return await use_case.execute(movie_id, current_user.id if current_user else None, platform)


@router.get("/{movie_id}/comments", response_model=CommentPage)
async def list_comments(
    movie_id: int, query: Annotated[PageQuery, Query()], comment_repository: CommentRepositoryDep
):
    use_case = ListCommentsUseCase(comment_repository)
    return await use_case.execute(movie_id, query)


@router.post("/{movie_id}/comments", status_code=HTTPStatus.CREATED, response_model=Comment)
async def add_comment(
    movie_id: int,
    request: CommentRequest,
    current_user: CurrentUserDep,
    comment_repository: CommentRepositoryDep,
    activity_repository: ActivityRepositoryDep,
):
    use_case = AddCommentUseCase(comment_repository, activity_repository)
    return await use_case.execute(movie_id, current_user, request.comment)


@router.delete("/comments/{comment_id}", response_model=Message)
async def delete_comment(comment_id: int, current_user: CurrentUserDep, comment_repository: CommentRepositoryDep):
    use_case = DeleteCommentUseCase(comment_repository)
    await use_case.execute(comment_id, current_user.id)
    return {"message": "Comment deleted successfully"}
