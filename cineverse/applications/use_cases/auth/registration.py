from cineverse.applications.interfaces.dtos.auth import RegisterRequest, RegisterResponse
from cineverse.applications.services.verification_service import VerificationService
from cineverse.domain.exceptions import ConflictError, EmailDeliveryError, NotFoundError
from cineverse.domain.models.user import User
from cineverse.domain.models.verification import VerificationPurpose
from cineverse.domain.ports.repositories.user_repository import UserRepository
from cineverse.domain.ports.services.auth_service import AuthService
from cineverse.infrastructure.logging.logger import Logger

logger = Logger.get_logger(__name__)


class RegisterUserUseCase:
    def __init__(
        self,
        user_repository: UserRepository,
        auth_service: AuthService,
        verification_service: VerificationService,
    ):
        self.user_repository = user_repository
        self.auth_service = auth_service
        self.verification_service = verification_service

    async def execute(self, request: RegisterRequest) -> RegisterResponse:
        existing = await self.user_repository.get_by_email(request.email)
        if existing and existing.is_verified:
            raise ConflictError("User already exists")

        password_hash = self.auth_service.hash_password(request.password)
        if existing:
            existing.name = request.name
            existing.password_hash = password_hash
            existing.is_verified = False
            await self.user_repository.update(existing)
            logger.info(f"Refreshed pending registration for {request.email}")
        else:
            await self.user_repository.create(
                User(name=request.name, email=request.email, password_hash=password_hash, is_verified=False)
            )
            logger.info(f"Registered new user {request.email}")

        try:
            await self.verification_service.send(request.email, VerificationPurpose.REGISTRATION)
        except EmailDeliveryError as exc:
            logger.warning(f"Verification email to {request.email} failed: {exc.detail or exc.message}")
            return RegisterResponse(
                message="Registration successful but the verification email could not be sent.",
                email=request.email,
                warning="Email delivery issue - request a new OTP or check your spam folder",
            )

        return RegisterResponse(
            message="OTP sent to your email. Please check your inbox and spam folder.", email=request.email
        )


class VerifyRegistrationUseCase:
    def __init__(self, user_repository: UserRepository, verification_service: VerificationService):
        self.user_repository = user_repository
        self.verification_service = verification_service

    async def execute(self, email: str, otp: str) -> None:
        await self.verification_service.verify(email, otp, VerificationPurpose.REGISTRATION)

        user = await self.user_repository.get_by_email(email)
        if not user:
            raise NotFoundError("User not found")

        user.is_verified = True
        await self.user_repository.update(user)
        logger.info(f"Email verified for {email}")
