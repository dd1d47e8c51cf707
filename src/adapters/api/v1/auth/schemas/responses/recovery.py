from __future__ import annotations

"""Response Pydantic models for the password recovery endpoints."""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field


class NextStepResponse(BaseModel):
    """A confirmation message and where the client goes next.

    The client shows ``message`` and navigates to ``redirect_to`` after
    ``redirect_after_seconds``.
    """

    message: str
    redirect_to: str
    redirect_after_seconds: float = 0.0
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class CodeVerifiedResponse(NextStepResponse):
    """Response of a successful code verification.

    ``access_token`` is the provider session token; the client sends it as a
    bearer token for the password update.
    """

    access_token: Optional[str] = None


class ConfirmPageResponse(BaseModel):
    """Initial state of the confirmation page."""

    email: Optional[str] = None
    message: Optional[str] = None
    error: Optional[str] = None
    code_length: int = 6
    resend_cooldown_seconds: int = 0


class ResendCodeResponse(BaseModel):
    """Response of a successful resend."""

    message: str
    resend_cooldown_seconds: int


class PasswordStepResponse(BaseModel):
    """Response of the password-set page guard."""

    verified: bool
    email: Optional[str] = None
