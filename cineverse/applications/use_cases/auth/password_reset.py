from cineverse.applications.services.verification_service import VerificationService
from cineverse.domain.exceptions import NotFoundError
from cineverse.domain.models.verification import VerificationPurpose
from cineverse.domain.ports.repositories.user_repository import UserRepository
from cineverse.domain.ports.services.auth_service import AuthService


class RequestPasswordResetUseCase:
    def __init__(self, user_repository: UserRepository, verification_service: VerificationService):
        self.user_repository = user_repository
        self.verification_service = verification_service

    async def execute(self, email: str) -> None:
        user = await self.user_repository.get_by_email(email)
        if not user:
            raise NotFoundError("User not found")
        await self.verification_service.send(email, VerificationPurpose.PASSWORD_RESET)


class ResetPasswordUseCase:
    def __init__(
        self,
        user_repository: UserRepository,
        auth_service: AuthService,
        verification_service: VerificationService,
    ):
        self.user_repository = user_repository
        self.auth_service = auth_service
        self.verification_service = verification_service

    async def execute(self, email: str, otp: str, new_password: str) -> None:
        await self.verification_service.verify(email, otp, VerificationPurpose.PASSWORD_RESET)

        user = await self.user_repository.get_by_email(email)
        if not user:
            raise NotFoundError("User not found")

        user.password_hash = self.auth_service.hash_password(new_password)
        await self.user_repository.update(user)
