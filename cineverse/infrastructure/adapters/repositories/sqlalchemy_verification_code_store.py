from typing import Optional

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from cineverse.domain.clock import ensure_utc
from cineverse.domain.models.verification import VerificationCode
from cineverse.domain.ports.repositories.verification_code_store import VerificationCodeStore
from cineverse.infrastructure.persistence.models import VerificationCode as SQLVerificationCode


class SQLAlchemyVerificationCodeStore(VerificationCodeStore):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def put(self, code: VerificationCode) -> None:
        sql_code = await self.session.get(SQLVerificationCode, code.email)
        if sql_code is None:
            self.session.add(
                SQLVerificationCode(
                    email=code.email, code=code.code, purpose=code.purpose.value, expires_at=code.expires_at
                )
            )
        else:
            sql_code.code = code.code
            sql_code.purpose = code.purpose.value
            sql_code.expires_at = code.expires_at
        await self.session.commit()

    async def get(self, email: str) -> Optional[VerificationCode]:
        sql_code = await self.session.get(SQLVerificationCode, email)
        if sql_code is None:
            return None
        return VerificationCode(
            email=sql_code.email,
            code=sql_code.code,
            purpose=sql_code.purpose,
            expires_at=ensure_utc(sql_code.expires_at),
        )

    async def delete(self, email: str) -> None:
        await self.session.execute(delete(SQLVerificationCode).where(SQLVerificationCode.email == email))
        await self.session.commit()
