import hashlib
import hmac
from typing import Dict, Optional

import httpx

from cineverse.domain.exceptions import PaymentGatewayError, PaymentServiceUnavailableError
from cineverse.domain.models.commerce import PaymentOrder
from cineverse.domain.ports.services.logger import LoggerPort
from cineverse.domain.ports.services.payment_gateway import PaymentGateway
from cineverse.infrastructure.config.settings import PaymentSettings
from cineverse.infrastructure.logging.std_logger_adapter import StdLoggerAdapter


def compute_signature(secret: str, order_id: str, payment_id: str) -> str:
    return hmac.new(secret.encode("utf-8"), f"{order_id}|{payment_id}".encode("utf-8"), hashlib.sha256).hexdigest()


class RazorpayPaymentGateway(PaymentGateway):
    def __init__(
        self,
        settings: PaymentSettings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        logger: Optional[LoggerPort] = None,
    ):
        self.settings = settings
        self.logger = logger or StdLoggerAdapter(__name__)
        self._client = httpx.AsyncClient(
            base_url=settings.base_url, timeout=httpx.Timeout(settings.timeout_seconds), transport=transport
        )

    def is_configured(self) -> bool:
        return bool(self.settings.key_id and self.settings.key_secret)

    @property
    def key_id(self) -> Optional[str]:
        return self.settings.key_id

    async def aclose(self) -> None:
        await self._client.aclose()

    async def create_order(
        self, amount: int, currency: str, receipt: str, notes: Optional[Dict[str, str]] = None
    ) -> PaymentOrder:
        if not self.is_configured():
            raise PaymentServiceUnavailableError(
                "Payment service not configured", detail="Razorpay credentials are not set"
            )

        payload = {"amount": amount, "currency": currency, "receipt": receipt[:40], "notes": notes or {}}
        try:
            response = await self._client.post(
                "/orders", json=payload, auth=(self.settings.key_id, self.settings.key_secret)
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self.logger.error(f"Razorpay order creation rejected with status {exc.response.status_code}")
            raise PaymentGatewayError(
                "Failed to create payment order", detail=f"Razorpay returned {exc.response.status_code}"
            ) from exc
        except httpx.RequestError as exc:
            self.logger.error(f"Razorpay unreachable: {type(exc).__name__}")
            raise PaymentServiceUnavailableError(
                "Payment service unavailable", detail=f"{type(exc).__name__} while creating order"
            ) from exc

        data = response.json()
        self.logger.info(f"Razorpay order created: {data.get('id')}")
        return PaymentOrder(
            id=data["id"],
            amount=data.get("amount", amount),
            currency=data.get("currency", currency),
            receipt=data.get("receipt"),
        )

    def verify_signature(self, order_id: str, payment_id: str, signature: str) -> bool:
        if not self.settings.key_secret or not signature:
            return False
        expected = compute_signature(self.settings.key_secret, order_id, payment_id)
        return hmac.compare_digest(expected, signature)
