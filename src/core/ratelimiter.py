import structlog
from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

from src.core.config.settings import settings

# Public routes that should not be rate-limited.
PUBLIC_ROUTES = {"/api/v1/health", "/api/v1/health/"}

# Per-route limits of the recovery endpoints, keyed by client IP.
FORGOT_PASSWORD_LIMIT = settings.RATE_LIMIT_FORGOT_PASSWORD
VERIFY_CODE_LIMIT = settings.RATE_LIMIT_VERIFY_CODE
RESEND_CODE_LIMIT = settings.RATE_LIMIT_RESEND_CODE

logger = structlog.get_logger("rate_limiter.security")


def key_func(request: Request) -> str | None:
    """Determines the rate-limiting key for a given request.

    Recovery endpoints are limited per client IP address. The provider applies
    its own per-email limits on top, and the resend cooldown throttles repeat
    sends for one address.

    Args:
        request (Request): The incoming Starlette request object.

    Returns:
        Optional[str]: The client's remote address, or None for public routes.
    """
    if request.url.path in PUBLIC_ROUTES:
        return None
    return get_remote_address(request)


def get_limiter() -> Limiter:
    """Factory function for the rate limiter.

    This function creates and returns a Limiter instance based on the application
    settings. This factory pattern allows for late initialization, making it
    compatible with testing environments where settings might be monkey-patched.

    Returns:
        Limiter: A configured slowapi.Limiter instance.
    """
    if not settings.RATE_LIMIT_ENABLED:
        logger.info("Rate limiting disabled by configuration")

    return Limiter(
        key_func=key_func,
        enabled=settings.RATE_LIMIT_ENABLED,
        default_limits=[],
        storage_uri="memory://",
    )


limiter = get_limiter()
