from __future__ import annotations

"""Re-export response models for the password recovery endpoints."""

# flake8: noqa: F401 – re-export

from .recovery import (
    CodeVerifiedResponse,
    ConfirmPageResponse,
    PasswordStepResponse,
    NextStepResponse,
    ResendCodeResponse,
)

__all__ = [
    "CodeVerifiedResponse",
    "ConfirmPageResponse",
    "PasswordStepResponse",
    "NextStepResponse",
    "ResendCodeResponse",
]
