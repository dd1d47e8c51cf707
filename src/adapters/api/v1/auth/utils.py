from __future__ import annotations

"""Utility functions for the password recovery routes.

Shared helpers for the verification grant cookie, the per-request logger and
turning a recovery flow outcome into an HTTP error.
"""

import uuid
from typing import Optional

import structlog
from fastapi import Request, Response

from src.core.config.settings import settings
from src.domain.security.logging_service import secure_logging_service
from src.domain.services.password_recovery.flow import PasswordResetFlow
from src.domain.value_objects.verification_grant import VerificationGrant

GRANT_HEADER = "X-Recovery-Token"

logger = structlog.get_logger(__name__)


def bind_request_logger(request: Request, endpoint: str) -> tuple[structlog.BoundLogger, str]:
    """Create a logger bound to a fresh correlation ID and the masked client context.

    Returns:
        The bound logger and the correlation ID.
    """
    correlation_id = str(uuid.uuid4())
    client_ip = request.client.host if request.client else None
    request_logger = logger.bind(
        correlation_id=correlation_id,
        client_ip=secure_logging_service.mask_ip_address(client_ip),
        user_agent=secure_logging_service.sanitize_user_agent(request.headers.get("user-agent")),
        endpoint=endpoint,
    )
    return request_logger, correlation_id


def read_grant_token(request: Request) -> Optional[str]:
    """Verification grant presented by the client, from cookie or header."""
    return request.cookies.get(settings.RECOVERY_COOKIE_NAME) or request.headers.get(GRANT_HEADER)


def set_grant_cookie(response: Response, grant: VerificationGrant) -> None:
    """Store the grant in an HttpOnly cookie that expires with it."""
    response.set_cookie(
        key=settings.RECOVERY_COOKIE_NAME,
        value=grant.token or "",
        max_age=settings.RECOVERY_GRANT_TTL_MINUTES * 60,
        httponly=True,
        secure=settings.RECOVERY_COOKIE_SECURE,
        samesite="lax",
        path="/",
    )


def clear_grant_cookie(response: Response) -> None:
    response.delete_cookie(
        key=settings.RECOVERY_COOKIE_NAME,
        httponly=True,
        secure=settings.RECOVERY_COOKIE_SECURE,
        samesite="lax",
        path="/",
    )


def raise_if_failed(flow: PasswordResetFlow, request_logger: structlog.BoundLogger) -> None:
    """Raise the error of the last flow step, if it failed.

    The exception handlers render it with the matching status code.
    """
    error = flow.last_error
    if error is None:
        return
    request_logger.warning(
        "Recovery step rejected",
        error_type=type(error).__name__,
        error_code=error.code,
    )
    raise error
