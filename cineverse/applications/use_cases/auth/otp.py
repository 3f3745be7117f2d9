from cineverse.applications.services.verification_service import VerificationService
from cineverse.domain.exceptions import ConflictError, NotFoundError
from cineverse.domain.models.verification import VerificationPurpose
from cineverse.domain.ports.repositories.user_repository import UserRepository


class SendOtpUseCase:
    def __init__(self, user_repository: UserRepository, verification_service: VerificationService):
        self.user_repository = user_repository
        self.verification_service = verification_service

    async def execute(self, email: str, purpose: VerificationPurpose) -> None:
        user = await self.user_repository.get_by_email(email)
        if purpose is VerificationPurpose.PASSWORD_RESET and not user:
            raise NotFoundError("User not found")
        if purpose is VerificationPurpose.REGISTRATION and user and user.is_verified:
            raise ConflictError("User already exists")

        await self.verification_service.send(email, purpose)


class CheckOtpUseCase:
    """Verifies a code for the given purpose; a registration code also marks the account verified."""

    def __init__(self, user_repository: UserRepository, verification_service: VerificationService):
        self.user_repository = user_repository
        self.verification_service = verification_service

    async def execute(self, email: str, otp: str, purpose: VerificationPurpose) -> None:
        await self.verification_service.verify(email, otp, purpose)

        if purpose is VerificationPurpose.REGISTRATION:
            user = await self.user_repository.get_by_email(email)
            if user and not user.is_verified:
                user.is_verified = True
                await self.user_repository.update(user)
