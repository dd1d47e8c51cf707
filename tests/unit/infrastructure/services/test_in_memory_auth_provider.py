"""Tests for the in-memory auth provider."""

from datetime import datetime, timedelta, timezone

import pytest

from src.core.exceptions import AuthProviderError
from src.infrastructure.services.in_memory_auth_provider import (
    InMemoryAuthBackend,
    InMemoryAuthRecoveryProvider,
)

EMAIL = "user@example.com"


@pytest.fixture
def backend():
    backend = InMemoryAuthBackend()
    backend.add_account(EMAIL, "OldPassword1")
    return backend


@pytest.fixture
def provider(backend):
    return InMemoryAuthRecoveryProvider(backend)


class TestCodes:
    """Code delivery and consumption."""

    @pytest.mark.asyncio
    async def test_request_places_six_digit_code_in_outbox(self, provider, backend):
        """Test that a request sends a six-digit code."""
        # Act
        await provider.request_password_reset("User@Example.com")

        # Assert
        code = backend.last_code(EMAIL)
        assert len(code) == 6 and code.isdigit()

    @pytest.mark.asyncio
    async def test_new_code_replaces_previous(self, provider, backend):
        """Test that only the most recent code verifies."""
        # Arrange
        await provider.request_password_reset(EMAIL)
        first = backend.last_code(EMAIL)
        await provider.resend_recovery_code(EMAIL)
        second = backend.last_code(EMAIL)

        # Act / Assert
        if first != second:
            with pytest.raises(AuthProviderError):
                await provider.verify_recovery_code(EMAIL, first)
        session = await provider.verify_recovery_code(EMAIL, second)
        assert session.email == EMAIL

    @pytest.mark.asyncio
    async def test_expired_code_rejected(self, backend, provider):
        """Test that a code past its lifetime is refused."""
        # Arrange
        await provider.request_password_reset(EMAIL)
        backend.outbox[-1].expires_at = datetime.now(timezone.utc) - timedelta(seconds=1)

        # Act
        with pytest.raises(AuthProviderError) as exc_info:
            await provider.verify_recovery_code(EMAIL, backend.last_code(EMAIL))

        # Assert
        assert exc_info.value.status_code == 403

    @pytest.mark.asyncio
    async def test_unknown_account_gets_no_code(self, provider, backend):
        """Test that unknown addresses are accepted without sending anything."""
        await provider.request_password_reset("nobody@example.com")

        assert backend.outbox == []


class TestSessions:
    """Sessions opened by verification."""

    @pytest.mark.asyncio
    async def test_verification_opens_session_for_update(self, provider, backend):
        """Test that the verified session can change the password."""
        # Arrange
        await provider.request_password_reset(EMAIL)
        await provider.verify_recovery_code(None, backend.last_code(EMAIL))

        # Act
        await provider.update_password("NewPassword1")

        # Assert
        assert backend.password_of(EMAIL) == "NewPassword1"
        assert (await provider.get_active_session()).email == EMAIL

    @pytest.mark.asyncio
    async def test_update_without_session(self, provider):
        """Test that a password update needs a session."""
        with pytest.raises(AuthProviderError) as exc_info:
            await provider.update_password("NewPassword1")

        assert exc_info.value.message == "Auth session missing!"

    @pytest.mark.asyncio
    async def test_same_password_rejected(self, backend):
        """Test that the old password cannot be set again."""
        # Arrange
        provider = InMemoryAuthRecoveryProvider(backend, backend.open_session(EMAIL))

        # Act
        with pytest.raises(AuthProviderError) as exc_info:
            await provider.update_password("OldPassword1")

        # Assert
        assert exc_info.value.status_code == 422

    @pytest.mark.asyncio
    async def test_no_session_without_token(self, provider):
        """Test that an anonymous client has no active session."""
        assert await provider.get_active_session() is None


class TestFailureInjection:
    """Scripted provider failures."""

    @pytest.mark.asyncio
    async def test_fail_next_fails_once(self, provider, backend):
        """Test that an injected failure applies to one call only."""
        # Arrange
        backend.fail_next("request_password_reset", "Email rate limit exceeded")

        # Act
        with pytest.raises(AuthProviderError) as exc_info:
            await provider.request_password_reset(EMAIL)
        await provider.request_password_reset(EMAIL)

        # Assert
        assert exc_info.value.message == "Email rate limit exceeded"
        assert len(backend.outbox) == 1

    def test_reset_clears_everything(self, backend):
        """Test that reset empties accounts, codes and failures."""
        backend.fail_next("update_password", "boom")

        backend.reset()

        assert backend.password_of(EMAIL) is None
        backend.raise_if_failing("update_password")
