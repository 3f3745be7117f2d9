from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class AuthService(ABC):
    @abstractmethod
    def hash_password(self, password: str) -> str:
        pass

    @abstractmethod
    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        pass

    @abstractmethod
    def create_access_token(self, subject: str, role: str = "user") -> str:
        pass

    @abstractmethod
    def decode_token(self, token: str) -> Optional[Dict[str, Any]]:
        """Claims of a valid token, None when it is malformed or expired."""
        pass
