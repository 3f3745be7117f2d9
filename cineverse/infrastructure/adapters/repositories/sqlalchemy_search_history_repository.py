from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from cineverse.domain.clock import ensure_utc
from cineverse.domain.exceptions import NotFoundError
from cineverse.domain.models.library import SearchHistoryEntry
from cineverse.domain.ports.repositories.search_history_repository import SearchHistoryRepository
from cineverse.infrastructure.persistence.models import SearchHistory as SQLSearchHistory


class SQLAlchemySearchHistoryRepository(SearchHistoryRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    def _to_domain(self, row: SQLSearchHistory) -> SearchHistoryEntry:
        return SearchHistoryEntry(
            id=row.id,
            query=row.query,
            user_id=row.user_id,
            search_count=row.search_count,
            last_searched=ensure_utc(row.last_searched),
            movie_ids=list(row.movie_ids or []),
        )

    async def get_by_query(self, query: str, user_id: Optional[int]) -> Optional[SearchHistoryEntry]:
        statement = select(SQLSearchHistory).where(SQLSearchHistory.query == query)
        if user_id is None:
            statement = statement.where(SQLSearchHistory.user_id.is_(None))
        else:
            statement = statement.where(SQLSearchHistory.user_id == user_id)
        row = await self.session.scalar(statement.limit(1))
        return self._to_domain(row) if row else None

    async def create(self, entry: SearchHistoryEntry) -> SearchHistoryEntry:
        row = SQLSearchHistory(
            query=entry.query,
            last_searched=entry.last_searched,
            user_id=entry.user_id,
            search_count=entry.search_count,
            movie_ids=list(entry.movie_ids),
        )
        self.session.add(row)
        await self.session.commit()
        await self.session.refresh(row)
        return self._to_domain(row)

    async def update(self, entry: SearchHistoryEntry) -> SearchHistoryEntry:
        row = await self.session.get(SQLSearchHistory, entry.id)
        if row is None:
            raise NotFoundError("Search history entry not found")
        row.search_count = entry.search_count
        row.last_searched = entry.last_searched
        row.movie_ids = list(entry.movie_ids)
        await self.session.commit()
        await self.session.refresh(row)
        return self._to_domain(row)

    async def get_most_searched(self, limit: int) -> List[SearchHistoryEntry]:
        rows = await self.session.scalars(
            select(SQLSearchHistory)
            .order_by(SQLSearchHistory.search_count.desc(), SQLSearchHistory.last_searched.desc())
            .limit(limit)
        )
        return [self._to_domain(row) for row in rows.all()]

    async def get_by_user(self, user_id: int, limit: int) -> List[SearchHistoryEntry]:
        rows = await self.session.scalars(
            select(SQLSearchHistory)
            .where(SQLSearchHistory.user_id == user_id)
            .order_by(SQLSearchHistory.last_searched.desc(), SQLSearchHistory.id.desc())
            .limit(limit)
        )
        return [self._to_domain(row) for row in rows.all()]

    async def delete(self, entry_id: int, user_id: int) -> bool:
        result = await self.session.execute(
            delete(SQLSearchHistory).where(SQLSearchHistory.id == entry_id, SQLSearchHistory.user_id == user_id)
        )
        await self.session.commit()
        return bool(result.rowcount)

    async def delete_all_for_user(self, user_id: int) -> int:
        result = await self.session.execute(delete(SQLSearchHistory).where(SQLSearchHistory.user_id == user_id))
        await self.session.commit()
        return result.rowcount or 0
