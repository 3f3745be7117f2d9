import hmac
import secrets
from datetime import timedelta
from typing import Optional

from cineverse.domain.clock import utcnow
from cineverse.domain.exceptions import ValidationError
from cineverse.domain.models.verification import VerificationCode, VerificationPurpose
from cineverse.domain.ports.repositories.verification_code_store import VerificationCodeStore
from cineverse.domain.ports.services.email_sender import EmailSender
from cineverse.domain.ports.services.logger import LoggerPort

CODE_TTL = timedelta(minutes=5)
CODE_LENGTH = 6


def generate_code() -> str:
    return f"{secrets.randbelow(10 ** CODE_LENGTH):0{CODE_LENGTH}d}"


class VerificationService:
    """Issues and checks one-time email codes.

    Checks run in a fixed order: missing code, expiry (expired codes are
    deleted), mismatch, purpose. A successful check consumes the code.
    """

    def __init__(self, code_store: VerificationCodeStore, email_sender: EmailSender, logger: LoggerPort):
        self.code_store = code_store
        self.email_sender = email_sender
        self.logger = logger

    async def issue(self, email: str, purpose: VerificationPurpose) -> VerificationCode:
        code = VerificationCode(email=email, code=generate_code(), purpose=purpose, expires_at=utcnow() + CODE_TTL)
        await self.code_store.put(code)
        self.logger.info(f"Issued {purpose.value} code for {email}")
        return code

    async def send(self, email: str, purpose: VerificationPurpose) -> VerificationCode:
        """Issue a code and email it; delivery errors propagate after the code is stored."""
        code = await self.issue(email, purpose)
        await self.email_sender.send_verification_code(email, code.code, purpose)
        return code

    async def verify(self, email: str, submitted: str, purpose: Optional[VerificationPurpose] = None) -> None:
        stored = await self.code_store.get(email)
        if stored is None:
            raise ValidationError("OTP not found or expired")

        if stored.is_expired(utcnow()):
            await self.code_store.delete(email)
            raise ValidationError("OTP has expired")

        if not hmac.compare_digest(stored.code.encode("utf-8"), (submitted or "").strip().encode("utf-8")):
            raise ValidationError("Invalid OTP")

        if purpose is not None and stored.purpose != purpose:
            raise ValidationError("Invalid OTP purpose")

        await self.code_store.delete(email)
