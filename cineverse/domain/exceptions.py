from typing import Optional


class DomainError(Exception):
    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail


class ValidationError(DomainError):
    pass


class NotFoundError(DomainError):
    pass


class ConflictError(DomainError):
    pass


class AuthenticationError(DomainError):
    pass


class EmailNotVerifiedError(AuthenticationError):
    pass


class PermissionDeniedError(DomainError):
    pass


class UpstreamUnavailableError(DomainError):
    """The metadata provider could not be reached after all retries."""


class UpstreamRequestError(DomainError):
    """The metadata provider rejected the request (4xx other than 404)."""


class PaymentGatewayError(DomainError):
    pass


class PaymentServiceUnavailableError(PaymentGatewayError):
    pass


class EmailDeliveryError(DomainError):
    pass
