from typing import Optional

from cineverse.applications.interfaces.dtos.social import LikeResponse, ShareResponse
from cineverse.domain.models.activity import ActivityEvent, ActivityType
from cineverse.domain.models.social import EngagementStats
from cineverse.domain.ports.repositories.activity_repository import ActivityRepository
from cineverse.domain.ports.repositories.social_repository import EngagementRepository


class GetEngagementUseCase:
    def __init__(self, engagement_repository: EngagementRepository):
        self.engagement_repository = engagement_repository

    async def execute(self, movie_id: int, user_id: Optional[int] = None) -> EngagementStats:
        stats = EngagementStats(
            likes=await self.engagement_repository.count_likes(movie_id),
            shares=await self.engagement_repository.count_shares(movie_id),
        )
        if user_id is not None:
            stats.has_liked = await self.engagement_repository.has_liked(movie_id, user_id)
            stats.has_shared = await self.engagement_repository.has_shared(movie_id, user_id)
        return stats


class ToggleLikeUseCase:
    def __init__(self, engagement_repository: EngagementRepository, activity_repository: ActivityRepository):
        self.engagement_repository = engagement_repository
        self.activity_repository = activity_repository

    async def execute(self, movie_id: int, user_id: int) -> LikeResponse:
        if await self.engagement_repository.has_liked(movie_id, user_id):
            await self.engagement_repository.remove_like(movie_id, user_id)
            liked = False
        else:
            await self.engagement_repository.add_like(movie_id, user_id)
            await self.activity_repository.record_event(
                ActivityEvent(user_id=user_id, movie_id=movie_id, activity_type=ActivityType.LIKE)
            )
            liked = True

        return LikeResponse(liked=liked, likes=await self.engagement_repository.count_likes(movie_id))


class ShareMovieUseCase:
    def __init__(self, engagement_repository: EngagementRepository, activity_repository: ActivityRepository):
        self.engagement_repository = engagement_repository
        self.activity_repository = activity_repository

    async def execute(self, movie_id: int, user_id: Optional[int], platform: str = "other") -> ShareResponse:
        await self.engagement_repository.add_share(movie_id, user_id, platform)
        if user_id is not None:
            await self.activity_repository.record_event(
                ActivityEvent(
                    user_id=user_id,
                    movie_id=movie_id,
                    activity_type=ActivityType.SHARE,
                    metadata={"platform": platform},
                )
            )
        return ShareResponse(shares=await self.engagement_repository.count_shares(movie_id))
