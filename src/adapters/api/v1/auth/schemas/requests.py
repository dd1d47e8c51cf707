from __future__ import annotations

"""Request-payload Pydantic models for the password recovery endpoints."""

from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class ForgotPasswordRequest(BaseModel):
    """Payload expected by ``POST /auth/forgot-password``."""

    email: EmailStr = Field(..., examples=["john@example.com"])


class VerifyCodeRequest(BaseModel):
    """Payload expected by ``POST /auth/reset-password/confirm``.

    ``code`` is taken as typed or pasted; non-digits are dropped and at most
    six digits are kept, like the six input boxes do.
    """

    email: Optional[EmailStr] = Field(
        None,
        examples=["john@example.com"],
        description="Address the code was sent to; improves match precision",
    )
    code: str = Field(..., max_length=32, examples=["123456"])


class ResendCodeRequest(BaseModel):
    """Payload expected by ``POST /auth/reset-password/confirm/resend``."""

    email: Optional[EmailStr] = Field(None, examples=["john@example.com"])


class ResetPasswordRequest(BaseModel):
    """Payload expected by ``POST /auth/reset-password``.

    Length and equality are checked by the recovery flow so the user sees the
    same messages as on the form.
    """

    password: str = Field(..., max_length=128, examples=["NewPass456"])
    confirm_password: str = Field(..., max_length=128, examples=["NewPass456"])
