"""Tests for the per-email resend cooldown registry."""

import pytest

from src.infrastructure.services.resend_cooldown_registry import ResendCooldownRegistry


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def registry(clock):
    return ResendCooldownRegistry(duration=60, clock=clock)


class TestResendCooldownRegistry:
    """Cooldown bookkeeping between requests."""

    def test_unknown_email_has_no_cooldown(self, registry):
        """Test that an email never resent may resend at once."""
        assert registry.remaining("user@example.com") == 0

    def test_remaining_counts_down(self, registry, clock):
        """Test that the remaining time follows the clock in whole seconds."""
        # Arrange
        registry.start("user@example.com")

        # Act
        clock.now += 10.7

        # Assert
        assert registry.remaining("user@example.com") == 50

    def test_cooldown_expires(self, registry, clock):
        """Test that the cooldown ends after its duration."""
        # Arrange
        registry.start("user@example.com")

        # Act
        clock.now += 60

        # Assert
        assert registry.remaining("user@example.com") == 0

    def test_keys_ignore_case(self, registry):
        """Test that the same address in another case shares the cooldown."""
        registry.start("User@Example.com")

        assert registry.remaining("user@example.com") == 60

    def test_snapshot_positions_countdown(self, registry, clock):
        """Test that a snapshot continues from the current remaining time."""
        # Arrange
        registry.start("user@example.com")
        clock.now += 15

        # Act
        cooldown = registry.snapshot("user@example.com")

        # Assert
        assert cooldown.duration == 60
        assert cooldown.remaining == 45
        assert cooldown.active

    def test_clear(self, registry):
        """Test that clear drops every cooldown."""
        registry.start("user@example.com")

        registry.clear()

        assert registry.remaining("user@example.com") == 0

    def test_claim_starts_cooldown_once(self, registry, clock):
        """Test that only the first of two claims for one email succeeds."""
        # Act
        first = registry.claim("user@example.com")
        clock.now += 5
        second = registry.claim("User@Example.com")

        # Assert
        assert first == 0
        assert second == 55
        assert registry.remaining("user@example.com") == 55

    def test_claim_after_expiry_succeeds(self, registry, clock):
        """Test that a finished cooldown can be claimed again."""
        # Arrange
        registry.claim("user@example.com")
        clock.now += 60

        # Act
        left = registry.claim("user@example.com")

        # Assert
        assert left == 0
        assert registry.remaining("user@example.com") == 60

    def test_release_drops_claim(self, registry):
        """Test that releasing a claim leaves the email free to resend."""
        # Arrange
        registry.claim("user@example.com")

        # Act
        registry.release("user@example.com")

        # Assert
        assert registry.remaining("user@example.com") == 0
