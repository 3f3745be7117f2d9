from cineverse.applications.interfaces.dtos.activity import TrackActivityRequest
from cineverse.domain.exceptions import ValidationError
from cineverse.domain.models.activity import ActivityEvent
from cineverse.domain.ports.repositories.activity_repository import ActivityRepository


class TrackActivityUseCase:
    def __init__(self, activity_repository: ActivityRepository):
        self.activity_repository = activity_repository

    async def execute(self, user_id: int, request: TrackActivityRequest) -> ActivityEvent:
        if request.activity_type.requires_movie and request.movie_id is None:
            raise ValidationError(
                "movie_id is required", detail=f"'{request.activity_type.value}' activity must reference a movie"
            )

        event = ActivityEvent(
            user_id=user_id,
            movie_id=request.movie_id,
            activity_type=request.activity_type,
            metadata=request.metadata,
        )
        return await self.activity_repository.record_event(event)
