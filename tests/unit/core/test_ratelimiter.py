from unittest.mock import MagicMock

from slowapi import Limiter

from src.core.config.settings import settings
from src.core.ratelimiter import (
    FORGOT_PASSWORD_LIMIT,
    RESEND_CODE_LIMIT,
    VERIFY_CODE_LIMIT,
    key_func,
    limiter,
)


def _request(path: str, host: str = "203.0.113.7"):
    request = MagicMock()
    request.url.path = path
    request.client.host = host
    return request


def test_recovery_routes_keyed_by_client_address():
    """Test that recovery endpoints are limited per client IP."""
    assert key_func(_request("/api/v1/auth/forgot-password")) == "203.0.113.7"


def test_health_is_not_limited():
    """Test that the health check has no rate limit key."""
    assert key_func(_request("/api/v1/health")) is None


def test_limiter_disabled_in_tests():
    """Test that the shared limiter honours RATE_LIMIT_ENABLED."""
    assert isinstance(limiter, Limiter)
    assert limiter.enabled is False


def test_step_limits_come_from_settings():
    """Test that every step endpoint uses its configured limit string."""
    assert FORGOT_PASSWORD_LIMIT == settings.RATE_LIMIT_FORGOT_PASSWORD == "5/hour"
    assert VERIFY_CODE_LIMIT == settings.RATE_LIMIT_VERIFY_CODE == "20/hour"
    assert RESEND_CODE_LIMIT == settings.RATE_LIMIT_RESEND_CODE == "10/hour"
