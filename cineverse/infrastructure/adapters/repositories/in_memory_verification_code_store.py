from typing import Dict, Optional

from cineverse.domain.models.verification import VerificationCode
from cineverse.domain.ports.repositories.verification_code_store import VerificationCodeStore


class InMemoryVerificationCodeStore(VerificationCodeStore):
    """Process-local store for tests and single-worker development."""

    def __init__(self):
        self._codes: Dict[str, VerificationCode] = {}

    async def put(self, code: VerificationCode) -> None:
        self._codes[code.email] = code

    async def get(self, email: str) -> Optional[VerificationCode]:
        return self._codes.get(email)

    async def delete(self, email: str) -> None:
        self._codes.pop(email, None)
