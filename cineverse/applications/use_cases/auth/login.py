import hmac
from typing import Optional

from pydantic import BaseModel

from cineverse.domain.exceptions import AuthenticationError, EmailNotVerifiedError, NotFoundError
from cineverse.domain.models.user import User
from cineverse.domain.ports.repositories.user_repository import UserRepository
from cineverse.domain.ports.services.auth_service import AuthService
from cineverse.infrastructure.config.settings import Settings

ADMIN_ROLE = "admin"
USER_ROLE = "user"


class LoginResult(BaseModel):
    token: str
    role: str
    user: Optional[User] = None


def _matches(candidate: str, expected: Optional[str]) -> bool:
    if not expected:
        return False
    return hmac.compare_digest(candidate.encode("utf-8"), expected.encode("utf-8"))


class LoginUserUseCase:
    def __init__(self, user_repository: UserRepository, auth_service: AuthService, settings: Settings):
        self.user_repository = user_repository
        self.auth_service = auth_service
        self.settings = settings

    def _is_admin(self, email: str, password: str) -> bool:
        email_ok = _matches(email, self.settings.ADMIN_EMAIL)
        password_ok = _matches(password, self.settings.ADMIN_PASSWORD)
        return email_ok and password_ok

    async def execute(self, email: str, password: str) -> LoginResult:
        if self._is_admin(email, password):
            return LoginResult(token=self.auth_service.create_access_token(email, ADMIN_ROLE), role=ADMIN_ROLE)

        user = await self.user_repository.get_by_email(email)
        if not user:
            raise NotFoundError("User not found")

        if not user.is_verified:
            raise EmailNotVerifiedError("Please verify your email before login.")

        if not self.auth_service.verify_password(password, user.password_hash):
            raise AuthenticationError("Invalid credentials")

        token = self.auth_service.create_access_token(user.email, USER_ROLE)
        return LoginResult(token=token, role=USER_ROLE, user=user)
