import os

# The settings singleton reads the environment on import
os.environ["APP_ENV"] = "test"
os.environ["AUTH_PROVIDER"] = "memory"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["LOG_JSON"] = "false"
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-verification-grants-0123456789")

import pytest
import pytest_asyncio
from faker import Faker
from httpx import ASGITransport, AsyncClient

from src.core.config.settings import settings
from src.domain.services.password_recovery.policy import RecoveryPolicy
from src.infrastructure.dependency_injection.recovery_dependencies import (
    get_event_publisher,
    get_in_memory_auth_backend,
    get_resend_cooldown_registry,
)
from src.infrastructure.services.in_memory_auth_provider import InMemoryAuthBackend
from src.infrastructure.services.verification_token_service import VerificationTokenService
from src.main import app

fake = Faker()


@pytest.fixture
def auth_backend() -> InMemoryAuthBackend:
    """The in-memory provider store used by the app, emptied after each test."""
    backend = get_in_memory_auth_backend()
    backend.reset()
    yield backend
    backend.reset()


@pytest.fixture(autouse=True)
def reset_process_state():
    """Clear cooldowns and published events between tests."""
    yield
    get_resend_cooldown_registry().clear()
    get_event_publisher().clear_events()


@pytest.fixture
def account(auth_backend):
    """A registered account with a known password."""
    email = fake.unique.email().lower()
    auth_backend.add_account(email, "OldPassword1")
    return email


@pytest.fixture
def token_service() -> VerificationTokenService:
    return VerificationTokenService(secret_key=settings.SECRET_KEY, ttl_minutes=10)


@pytest.fixture
def fast_policy() -> RecoveryPolicy:
    """Recovery policy with delays short enough for timer tests."""
    return RecoveryPolicy(
        resend_cooldown_seconds=3,
        verified_redirect_delay=0.05,
        success_redirect_delay=0.05,
        tick_interval=0.01,
    )


@pytest_asyncio.fixture(scope="function")
async def async_client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
