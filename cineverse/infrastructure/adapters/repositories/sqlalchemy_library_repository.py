from typing import List

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from cineverse.domain.clock import ensure_utc
from cineverse.domain.models.library import ViewingHistoryItem, WatchlistItem
from cineverse.domain.ports.repositories.library_repository import ViewingHistoryRepository, WatchlistRepository
from cineverse.infrastructure.persistence.models import ViewingHistoryEntry as SQLViewingHistoryEntry
from cineverse.infrastructure.persistence.models import WatchlistEntry as SQLWatchlistEntry


class SQLAlchemyWatchlistRepository(WatchlistRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    def _to_domain(self, row: SQLWatchlistEntry) -> WatchlistItem:
        return WatchlistItem(
            id=row.id,
            user_id=row.user_id,
            movie_id=row.movie_id,
            movie_title=row.movie_title,
            movie_poster=row.movie_poster,
            added_at=ensure_utc(row.added_at),
        )

    async def upsert(self, item: WatchlistItem) -> WatchlistItem:
        row = await self.session.scalar(
            select(SQLWatchlistEntry).where(
                SQLWatchlistEntry.user_id == item.user_id, SQLWatchlistEntry.movie_id == item.movie_id
            )
        )
        if row is None:
            row = SQLWatchlistEntry(
                user_id=item.user_id,
                movie_id=item.movie_id,
                movie_title=item.movie_title,
                added_at=item.added_at,
                movie_poster=item.movie_poster,
            )
            self.session.add(row)
        else:
            row.movie_title = item.movie_title
            row.movie_poster = item.movie_poster
            row.added_at = item.added_at
        await self.session.commit()
        await self.session.refresh(row)
        return self._to_domain(row)

    async def remove(self, user_id: int, movie_id: int) -> bool:
        result = await self.session.execute(
            delete(SQLWatchlistEntry).where(
                SQLWatchlistEntry.user_id == user_id, SQLWatchlistEntry.movie_id == movie_id
            )
        )
        await self.session.commit()
        return bool(result.rowcount)

    async def get_by_user(self, user_id: int) -> List[WatchlistItem]:
        rows = await self.session.scalars(
            select(SQLWatchlistEntry)
            .where(SQLWatchlistEntry.user_id == user_id)
            .order_by(SQLWatchlistEntry.added_at.desc(), SQLWatchlistEntry.id.desc())
        )
        return [self._to_domain(row) for row in rows.all()]


class SQLAlchemyViewingHistoryRepository(ViewingHistoryRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    def _to_domain(self, row: SQLViewingHistoryEntry) -> ViewingHistoryItem:
        return ViewingHistoryItem(
            id=row.id,
            user_id=row.user_id,
            movie_id=row.movie_id,
            movie_title=row.movie_title,
            movie_poster=row.movie_poster,
            progress=row.progress,
            completed=row.completed,
            watched_at=ensure_utc(row.watched_at),
        )

    async def upsert(self, item: ViewingHistoryItem) -> ViewingHistoryItem:
        row = await self.session.scalar(
            select(SQLViewingHistoryEntry).where(
                SQLViewingHistoryEntry.user_id == item.user_id, SQLViewingHistoryEntry.movie_id == item.movie_id
            )
        )
        if row is None:
            row = SQLViewingHistoryEntry(
                user_id=item.user_id,
                movie_id=item.movie_id,
                movie_title=item.movie_title,
                watched_at=item.watched_at,
                movie_poster=item.movie_poster,
                progress=item.progress,
                completed=item.completed,
            )
            self.session.add(row)
        else:
            row.movie_title = item.movie_title
            row.movie_poster = item.movie_poster
            row.progress = item.progress
            row.completed = item.completed
            row.watched_at = item.watched_at
        await self.session.commit()
        await self.session.refresh(row)
        return self._to_domain(row)

    async def get_by_user(self, user_id: int, limit: int) -> List[ViewingHistoryItem]:
        rows = await self.session.scalars(
            select(SQLViewingHistoryEntry)
            .where(SQLViewingHistoryEntry.user_id == user_id)
            .order_by(SQLViewingHistoryEntry.watched_at.desc(), SQLViewingHistoryEntry.id.desc())
            .limit(limit)
        )
        return [self._to_domain(row) for row in rows.all()]

    async def clear(self, user_id: int) -> int:
        result = await self.session.execute(
            delete(SQLViewingHistoryEntry).where(SQLViewingHistoryEntry.user_id == user_id)
        )
        await self.session.commit()
        return result.rowcount or 0
