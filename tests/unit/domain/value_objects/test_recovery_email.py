"""Tests for the Email value object."""

import pytest

from src.domain.value_objects.email import Email


class TestEmail:
    """Email normalization and format checks."""

    def test_normalizes_case_and_whitespace(self):
        """Test that addresses are stored trimmed and lowercased."""
        email = Email("  User@Example.COM ")

        assert email.value == "user@example.com"
        assert email.domain == "example.com"

    @pytest.mark.parametrize(
        "value", ["o'brien@example.com", "first.last+tag@example.co.uk", "user@localhost"]
    )
    def test_accepts_addresses_an_email_field_accepts(self, value):
        """Test that the local part and domain are not further constrained."""
        assert Email(value).value == value

    @pytest.mark.parametrize("value", ["", "   ", "user", "user@", "@example.com", "a@b@c.com", "a b@c.com"])
    def test_invalid_formats(self, value):
        """Test that values which cannot be addresses are refused."""
        with pytest.raises(ValueError):
            Email(value)

    def test_too_long(self):
        """Test the maximum length."""
        with pytest.raises(ValueError):
            Email("a" * 250 + "@example.com")

    def test_equality_after_normalization(self):
        """Test that equality ignores case."""
        assert Email("USER@example.com") == Email("user@example.com")
