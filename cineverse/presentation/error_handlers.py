from http import HTTPStatus

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from cineverse.domain.exceptions import (
    AuthenticationError,
    ConflictError,
    DomainError,
    EmailDeliveryError,
    EmailNotVerifiedError,
    NotFoundError,
    PaymentGatewayError,
    PaymentServiceUnavailableError,
    PermissionDeniedError,
    UpstreamRequestError,
    UpstreamUnavailableError,
    ValidationError,
)
from cineverse.infrastructure.logging.logger import Logger

logger = Logger.get_logger(__name__)

STATUS_BY_ERROR = {
    ValidationError: HTTPStatus.BAD_REQUEST,
    NotFoundError: HTTPStatus.NOT_FOUND,
    ConflictError: HTTPStatus.CONFLICT,
    AuthenticationError: HTTPStatus.UNAUTHORIZED,
    PermissionDeniedError: HTTPStatus.FORBIDDEN,
    UpstreamUnavailableError: HTTPStatus.SERVICE_UNAVAILABLE,
    UpstreamRequestError: HTTPStatus.BAD_GATEWAY,
    PaymentServiceUnavailableError: HTTPStatus.SERVICE_UNAVAILABLE,
    PaymentGatewayError: HTTPStatus.BAD_GATEWAY,
    EmailDeliveryError: HTTPStatus.BAD_GATEWAY,
}


def status_for(exc: DomainError) -> HTTPStatus:
    for cls in type(exc).__mro__:
        if cls in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[cls]
    return HTTPStatus.INTERNAL_SERVER_ERROR


def error_body(message: str, error: str) -> dict:
    return {"message": message, "error": error}


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= HTTPStatus.INTERNAL_SERVER_ERROR:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message} ({exc.detail})")
    else:
        logger.info(f"{request.method} {request.url.path} rejected with {int(status_code)}: {exc.message}")

    body = error_body(exc.message, exc.detail or exc.message)
    if isinstance(exc, EmailNotVerifiedError):
        body["requires_verification"] = True
    return JSONResponse(status_code=status_code, content=body)


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    detail = exc.detail if isinstance(exc.detail, str) else HTTPStatus(exc.status_code).phrase
    return JSONResponse(status_code=exc.status_code, content=error_body(detail, detail), headers=exc.headers)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
    error = f"{field}: {first.get('msg', 'invalid value')}" if field else first.get("msg", "invalid value")
    return JSONResponse(status_code=HTTPStatus.BAD_REQUEST, content=error_body("Invalid request", error))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        f"{request.method} {request.url.path} failed with an unhandled {type(exc).__name__}", exc_info=exc
    )
    return JSONResponse(
        status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
        content=error_body("Internal server error", type(exc).__name__),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
