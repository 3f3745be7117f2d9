from datetime import datetime
from enum import Enum

from pydantic import BaseModel


class VerificationPurpose(str, Enum):
    REGISTRATION = "registration"
    PASSWORD_RESET = "password-reset"


class VerificationCode(BaseModel):
    email: str
    code: str
    purpose: VerificationPurpose
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at
