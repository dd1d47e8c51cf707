"""Tests for the verification grant token service."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from src.infrastructure.services.verification_token_service import (
    GRANT_TOKEN_TYPE,
    VerificationTokenService,
)

SECRET = "unit-test-secret-key-0123456789abcdef"


@pytest.fixture
def service():
    return VerificationTokenService(secret_key=SECRET, ttl_minutes=10)


class TestIssue:
    """Grant issuance."""

    def test_issue_returns_signed_grant(self, service):
        """Test that an issued grant carries a token that validates back to it."""
        # Act
        grant = service.issue("user@example.com")

        # Assert
        assert grant.token
        validated = service.validate(grant.token)
        assert validated == grant

    def test_expiry_matches_ttl(self, service):
        """Test that the grant expires after the configured lifetime."""
        # Act
        grant = service.issue("user@example.com")

        # Assert
        delta = grant.expires_at - datetime.now(timezone.utc)
        assert timedelta(minutes=9) < delta <= timedelta(minutes=10)

    def test_grant_ids_are_unique(self, service):
        """Test that two grants for one email are distinguishable."""
        assert service.issue("a@example.com").grant_id != service.issue("a@example.com").grant_id

    def test_secret_required(self):
        """Test that an empty signing key is refused."""
        with pytest.raises(ValueError):
            VerificationTokenService(secret_key="")


class TestValidate:
    """Grant validation."""

    @pytest.mark.parametrize("token", [None, "", "not-a-jwt"])
    def test_unusable_tokens(self, service, token):
        """Test that missing and malformed tokens yield no grant."""
        assert service.validate(token) is None

    def test_wrong_signature(self, service):
        """Test that a grant signed with another key is rejected."""
        # Arrange
        other = VerificationTokenService(secret_key="another-secret-key-0123456789abcdef")
        grant = other.issue("user@example.com")

        # Act / Assert
        assert service.validate(grant.token) is None

    def test_expired_token(self, service):
        """Test that an expired grant is rejected."""
        # Arrange
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {
                "typ": GRANT_TOKEN_TYPE,
                "sub": "user@example.com",
                "jti": "grant-1",
                "iat": now - timedelta(minutes=20),
                "exp": now - timedelta(minutes=10),
            },
            SECRET,
            algorithm="HS256",
        )

        # Act / Assert
        assert service.validate(token) is None

    def test_wrong_token_type(self, service):
        """Test that another kind of token signed with the same key is rejected."""
        # Arrange
        token = jwt.encode(
            {
                "typ": "access",
                "sub": "user@example.com",
                "jti": "grant-1",
                "exp": datetime.now(timezone.utc) + timedelta(minutes=5),
            },
            SECRET,
            algorithm="HS256",
        )

        # Act / Assert
        assert service.validate(token) is None

    def test_missing_claims(self, service):
        """Test that a token without a grant identifier is rejected."""
        # Arrange
        token = jwt.encode(
            {
                "typ": GRANT_TOKEN_TYPE,
                "sub": "user@example.com",
                "exp": datetime.now(timezone.utc) + timedelta(minutes=5),
            },
            SECRET,
            algorithm="HS256",
        )

        # Act / Assert
        assert service.validate(token) is None


class TestRevoke:
    """Single-use grants."""

    def test_revoked_grant_rejected(self, service):
        """Test that a revoked grant no longer validates."""
        # Arrange
        grant = service.issue("user@example.com")

        # Act
        service.revoke(grant)

        # Assert
        assert service.is_revoked(grant.grant_id)
        assert service.validate(grant.token) is None

    def test_revocation_is_per_grant(self, service):
        """Test that revoking one grant leaves others valid."""
        # Arrange
        first = service.issue("user@example.com")
        second = service.issue("user@example.com")

        # Act
        service.revoke(first)

        # Assert
        assert service.validate(second.token) is not None
