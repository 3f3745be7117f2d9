from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cineverse.domain.clock import ensure_utc
from cineverse.domain.exceptions import NotFoundError
from cineverse.domain.models.user import User as DomainUser
from cineverse.domain.ports.repositories.user_repository import UserRepository
from cineverse.infrastructure.persistence.models import User as SQLUser


class SQLAlchemyUserRepository(UserRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    def _to_domain(self, sql_user: SQLUser) -> DomainUser:
        return DomainUser(
            id=sql_user.id,
            name=sql_user.name,
            username=sql_user.username,
            email=sql_user.email,
            password_hash=sql_user.password,
            profile_picture=sql_user.profile_picture,
            is_verified=sql_user.is_verified,
            created_at=ensure_utc(sql_user.created_at),
        )

    async def create(self, user: DomainUser) -> DomainUser:
        sql_user = SQLUser(
            name=user.name,
            email=user.email,
            password=user.password_hash,
            username=user.username,
            profile_picture=user.profile_picture,
            is_verified=user.is_verified,
        )
        self.session.add(sql_user)
        await self.session.commit()
        await self.session.refresh(sql_user)
        return self._to_domain(sql_user)

    async def get_by_id(self, user_id: int) -> Optional[DomainUser]:
        sql_user = await self.session.scalar(select(SQLUser).where(SQLUser.id == user_id))
        return self._to_domain(sql_user) if sql_user else None

    async def get_by_email(self, email: str) -> Optional[DomainUser]:
        sql_user = await self.session.scalar(select(SQLUser).where(SQLUser.email == email))
        return self._to_domain(sql_user) if sql_user else None

    async def get_by_username(self, username: str) -> Optional[DomainUser]:
        sql_user = await self.session.scalar(select(SQLUser).where(SQLUser.username == username))
        return self._to_domain(sql_user) if sql_user else None

    async def update(self, user: DomainUser) -> DomainUser:
        sql_user = await self.session.scalar(select(SQLUser).where(SQLUser.id == user.id))
        if not sql_user:
            raise NotFoundError("User not found")

        sql_user.name = user.name
        sql_user.username = user.username
        sql_user.email = user.email
        sql_user.password = user.password_hash
        sql_user.profile_picture = user.profile_picture
        sql_user.is_verified = user.is_verified

        await self.session.commit()
        await self.session.refresh(sql_user)
        return self._to_domain(sql_user)
