from abc import ABC, abstractmethod
from typing import Optional

from cineverse.domain.models.verification import VerificationCode


class VerificationCodeStore(ABC):
    """One pending code per email; a new code replaces the previous one."""

    @abstractmethod
    async def put(self, code: VerificationCode) -> None:
        pass

    @abstractmethod
    async def get(self, email: str) -> Optional[VerificationCode]:
        pass

    @abstractmethod
    async def delete(self, email: str) -> None:
        pass
