from __future__ import annotations

"""
Global exception handlers for the FastAPI application.

This module contains centralized handlers for custom application exceptions,
translating them into appropriate HTTP responses.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette import status
from structlog import get_logger

from src.core.exceptions import (
    AuthProviderError,
    InvalidTransitionError,
    RateLimitError,
    RecoveryError,
    ResendCooldownError,
    ValidationError,
)
from src.utils.i18n import get_request_language, get_translated_message

__all__ = [
    "validation_error_handler",
    "auth_provider_error_handler",
    "resend_cooldown_error_handler",
    "rate_limit_error_handler",
    "rate_limit_exception_handler",
    "invalid_transition_error_handler",
    "recovery_error_handler",
    "register_exception_handlers",
]

logger = get_logger(__name__)


def _client_ip(request: Request) -> str | None:
    return request.client.host if request.client else None


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Handles `ValidationError`, returning a `400 Bad Request`.

    Raised for input rejected before any provider call, such as an incomplete
    code or a password that is too short.

    Args:
        request: The incoming `Request` object.
        exc: The `ValidationError` instance.

    Returns:
        A `JSONResponse` with a 400 status code and error detail.
    """
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": exc.message},
    )


async def auth_provider_error_handler(request: Request, exc: AuthProviderError) -> JSONResponse:
    """Handles `AuthProviderError`, returning a `400 Bad Request`.

    The detail is the provider's own message, shown to the user unchanged.

    Args:
        request: The incoming `Request` object.
        exc: The `AuthProviderError` instance.

    Returns:
        A `JSONResponse` with a 400 status code and error detail.
    """
    logger.warning(
        "Auth provider error",
        error=exc.code,
        client_ip=_client_ip(request),
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": exc.message},
    )


async def resend_cooldown_error_handler(request: Request, exc: ResendCooldownError) -> JSONResponse:
    """Handles `ResendCooldownError`, returning a `429` with a `Retry-After` header.

    Args:
        request: The incoming `Request` object.
        exc: The `ResendCooldownError` instance.

    Returns:
        A `JSONResponse` with a 429 status code, the error detail and the
        seconds left on the cooldown.
    """
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={"detail": exc.message, "resend_cooldown_seconds": exc.remaining_seconds},
        headers={"Retry-After": str(exc.remaining_seconds)},
    )


async def rate_limit_error_handler(request: Request, exc: RateLimitError) -> JSONResponse:
    """Handles domain-specific `RateLimitError`, returning a `429`.

    This catches rate limit exceptions originating from within the domain logic,
    as opposed to the middleware-level handler.

    Args:
        request: The incoming `Request` object.
        exc: The `RateLimitError` instance.

    Returns:
        A `JSONResponse` with a 429 status code and error detail.
    """
    logger.warning(
        "domain_rate_limit_exceeded",
        client_ip=_client_ip(request),
        path=request.url.path,
        error_message=str(exc),
    )
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={"detail": exc.message},
    )


async def rate_limit_exception_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Handles exceptions raised by slowapi when a rate limit is exceeded.

    This handler logs the event for security monitoring and returns a
    standardized 429 Too Many Requests response to the client.

    Args:
        request: The incoming FastAPI request.
        exc: The RateLimitExceeded exception instance.

    Returns:
        A JSONResponse with status code 429.
    """
    locale = get_request_language(request)
    logger.warning(
        "rate_limit_exceeded",
        client_ip=_client_ip(request),
        path=request.url.path,
        limit=str(exc.limit.limit),
    )
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={"detail": get_translated_message("too_many_requests", locale)},
    )


async def invalid_transition_error_handler(
    request: Request, exc: InvalidTransitionError
) -> JSONResponse:
    """Handles `InvalidTransitionError`, returning a `409 Conflict`.

    The request asked for a recovery step the flow is not at.

    Args:
        request: The incoming `Request` object.
        exc: The `InvalidTransitionError` instance.

    Returns:
        A `JSONResponse` with a 409 status code and error detail.
    """
    logger.warning("Invalid recovery step", error_message=exc.message, path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={
            "detail": get_translated_message("invalid_flow_step", get_request_language(request))
        },
    )


async def recovery_error_handler(request: Request, exc: RecoveryError) -> JSONResponse:
    """Handles the base `RecoveryError`, returning a `500 Internal Server Error`.

    This serves as a fallback for any custom application errors that do not
    have a more specific handler.

    Args:
        request: The incoming `Request` object.
        exc: The `RecoveryError` instance.

    Returns:
        A `JSONResponse` with a 500 status code and error detail.
    """
    logger.error(
        "An unhandled application error occurred",
        error_code=exc.code,
        error_message=exc.message,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": get_translated_message("unexpected_error", get_request_language(request))
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Registers all custom exception handlers with the FastAPI application.

    Starlette resolves handlers along the exception's MRO, so a subclass
    handler wins over its base class handler.

    Args:
        app: The `FastAPI` application instance.
    """
    app.add_exception_handler(RateLimitExceeded, rate_limit_exception_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(AuthProviderError, auth_provider_error_handler)
    app.add_exception_handler(ResendCooldownError, resend_cooldown_error_handler)
    app.add_exception_handler(RateLimitError, rate_limit_error_handler)
    app.add_exception_handler(InvalidTransitionError, invalid_transition_error_handler)
    app.add_exception_handler(RecoveryError, recovery_error_handler)
