from abc import ABC, abstractmethod

from cineverse.domain.models.verification import VerificationPurpose


class EmailSender(ABC):
    @abstractmethod
    async def send_verification_code(self, email: str, code: str, purpose: VerificationPurpose) -> None:
        pass
