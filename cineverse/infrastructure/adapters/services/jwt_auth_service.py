from datetime import timedelta
from typing import Any, Dict, Optional

from jwt import DecodeError, ExpiredSignatureError, decode, encode
from pwdlib import PasswordHash

from cineverse.domain.clock import utcnow
from cineverse.domain.ports.services.auth_service import AuthService
from cineverse.infrastructure.config.settings import Settings


class JWTAuthService(AuthService):
    def __init__(self, settings: Settings):
        self.settings = settings
        self.pwd_context = PasswordHash.recommended()

    def hash_password(self, password: str) -> str:
        return self.pwd_context.hash(password)

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        return self.pwd_context.verify(plain_password, hashed_password)

    def create_access_token(self, subject: str, role: str = "user") -> str:
        expire = utcnow() + timedelta(minutes=self.settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        to_encode = {"sub": subject, "role": role, "exp": expire}
        return encode(to_encode, self.settings.SECRET_KEY, algorithm=self.settings.ALGORITHM)

    def decode_token(self, token: str) -> Optional[Dict[str, Any]]:
        try:
            payload = decode(token, self.settings.SECRET_KEY, algorithms=[self.settings.ALGORITHM])
        except (DecodeError, ExpiredSignatureError):
            return None

        if not payload.get("sub"):
            return None
        return payload
