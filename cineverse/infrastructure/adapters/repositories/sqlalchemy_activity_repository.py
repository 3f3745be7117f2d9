from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cineverse.domain.clock import ensure_utc
from cineverse.domain.models.activity import ActivityEvent
from cineverse.domain.ports.repositories.activity_repository import ActivityRepository
from cineverse.infrastructure.persistence.models import Activity as SQLActivity


class SQLAlchemyActivityRepository(ActivityRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    def _to_domain(self, sql_activity: SQLActivity) -> ActivityEvent:
        return ActivityEvent(
            id=sql_activity.id,
            user_id=sql_activity.user_id,
            movie_id=sql_activity.movie_id,
            activity_type=sql_activity.activity_type,
            timestamp=ensure_utc(sql_activity.timestamp),
            metadata=sql_activity.details or {},
        )

    async def record_event(self, event: ActivityEvent) -> ActivityEvent:
        sql_activity = SQLActivity(
            activity_type=event.activity_type.value,
            timestamp=event.timestamp,
            user_id=event.user_id,
            movie_id=event.movie_id,
            details=dict(event.metadata),
        )
        self.session.add(sql_activity)
        await self.session.commit()
        await self.session.refresh(sql_activity)
        return self._to_domain(sql_activity)

    async def query_recent(self, user_id: int, limit: int) -> List[ActivityEvent]:
        rows = await self.session.scalars(
            select(SQLActivity)
            .where(SQLActivity.user_id == user_id)
            .order_by(SQLActivity.timestamp.desc(), SQLActivity.id.desc())
            .limit(limit)
        )
        return [self._to_domain(row) for row in rows.all()]
