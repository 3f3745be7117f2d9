from abc import ABC, abstractmethod
from typing import Dict, Optional

from cineverse.domain.models.commerce import PaymentOrder


class PaymentGateway(ABC):
    @abstractmethod
    def is_configured(self) -> bool:
        pass

    @property
    @abstractmethod
    def key_id(self) -> Optional[str]:
        pass

    @abstractmethod
    async def create_order(
        self, amount: int, currency: str, receipt: str, notes: Optional[Dict[str, str]] = None
    ) -> PaymentOrder:
        """``amount`` is in the smallest currency unit."""
        pass

    @abstractmethod
    def verify_signature(self, order_id: str, payment_id: str, signature: str) -> bool:
        pass
