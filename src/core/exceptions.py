from __future__ import annotations

"""Centralized, structured exception hierarchy for the recovery service.

This module defines the custom exceptions raised by the password recovery
flow and its collaborators. They carry a machine-readable `code` for
programmatic error handling and a human-readable `message` that is shown
inline to the user.

The hierarchy is designed to:
- Separate local validation failures (caught before any provider call) from
  failures reported by the external auth provider.
- Map cleanly to HTTP status codes in the API layer.
- Offer a consistent structure for logging and monitoring.
"""

from typing import Final

from src.utils.i18n import get_translated_message

__all__: Final = [
    "RecoveryError",
    "ValidationError",
    "CodeIncompleteError",
    "PasswordPolicyError",
    "PasswordMismatchError",
    "EmailRequiredError",
    "AuthProviderError",
    "DeliveryError",
    "VerificationError",
    "ResendError",
    "PasswordUpdateError",
    "RateLimitError",
    "ResendCooldownError",
    "InvalidTransitionError",
]


class RecoveryError(Exception):
    """Base exception class for all custom errors in the recovery service.

    Attributes:
        message (str): A human-readable error message, suitable for display.
        code (str): A unique, machine-readable error code.
    """

    message: str
    code: str = "generic_error"

    def __init__(self, message: str, code: str = "generic_error"):
        self.message = message
        self.code = code
        Exception.__init__(self, self.message)

    # A concise, structured representation used by loggers & FastAPI handlers.
    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Local validation errors (typically map to 400 Bad Request)
# ---------------------------------------------------------------------------


class ValidationError(RecoveryError):
    """Raised for input that is rejected before any provider call is made."""

    def __init__(self, message: str, code: str = "validation_error"):
        super().__init__(message, code)


class CodeIncompleteError(ValidationError):
    """Raised when a recovery code is submitted with empty or non-digit slots."""

    def __init__(self, message: str, code: str = "code_incomplete"):
        super().__init__(message, code)


class PasswordPolicyError(ValidationError):
    """Raised when a new password is shorter than the configured minimum."""

    def __init__(self, message: str, code: str = "password_too_short"):
        super().__init__(message, code)


class PasswordMismatchError(ValidationError):
    """Raised when the password confirmation differs from the new password."""

    def __init__(self, message: str, code: str = "password_mismatch"):
        super().__init__(message, code)


class EmailRequiredError(ValidationError):
    """Raised when an operation needs the recovery email and none is known."""

    def __init__(self, message: str, code: str = "email_required"):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Provider errors (400 Bad Request, message comes from the provider)
# ---------------------------------------------------------------------------


class AuthProviderError(RecoveryError):
    """Raised when the external auth provider rejects or fails a request.

    Adapters raise this with the provider's own message. The flow converts it
    into the step-specific subclass below so the API layer can log and map it.

    Attributes:
        status_code (int | None): HTTP status returned by the provider, if any.
    """

    def __init__(
        self,
        message: str,
        code: str = "auth_provider_error",
        status_code: int | None = None,
    ):
        super().__init__(message, code)
        self.status_code = status_code


class DeliveryError(AuthProviderError):
    """The provider could not send the recovery email (step 1)."""

    def __init__(self, message: str, code: str = "delivery_error"):
        super().__init__(message, code)


class VerificationError(AuthProviderError):
    """The recovery code is invalid, expired or already consumed (step 2)."""

    def __init__(self, message: str, code: str = "verification_error"):
        super().__init__(message, code)


class ResendError(AuthProviderError):
    """The provider could not resend the recovery code (step 2)."""

    def __init__(self, message: str, code: str = "resend_error"):
        super().__init__(message, code)


class PasswordUpdateError(AuthProviderError):
    """The provider rejected the password update (step 3)."""

    def __init__(self, message: str, code: str = "password_update_error"):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Operational errors (typically map to 429 Too Many Requests)
# ---------------------------------------------------------------------------


class RateLimitError(RecoveryError):
    """Base class for rate limiting related errors."""

    def __init__(self, message: str | None = None, code: str = "rate_limit_exceeded"):
        if message is None:
            message = get_translated_message("rate_limit_exceeded", "en")
        super().__init__(message, code)


class ResendCooldownError(RateLimitError):
    """Raised when a resend is attempted while the cooldown is still running.

    Attributes:
        remaining_seconds (int): Seconds left before a resend is allowed.
    """

    def __init__(self, remaining_seconds: int, message: str | None = None):
        self.remaining_seconds = remaining_seconds
        super().__init__(message, "resend_cooldown_active")


# ---------------------------------------------------------------------------
# Programming errors
# ---------------------------------------------------------------------------


class InvalidTransitionError(RecoveryError):
    """Raised when an event is applied to a flow state that cannot accept it.

    Maps to `409 Conflict` when it escapes to the API layer.
    """

    def __init__(self, message: str, code: str = "invalid_transition"):
        super().__init__(message, code)
