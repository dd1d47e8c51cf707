from __future__ import annotations

"""Password recovery API schemas package.

Request and response models live in focused modules; all public symbols are
re-exported so routes and tests import from
``src.adapters.api.v1.auth.schemas``.
"""

# flake8: noqa: F401 – re-export

from .requests import (
    ForgotPasswordRequest,
    ResendCodeRequest,
    ResetPasswordRequest,
    VerifyCodeRequest,
)
from .responses import (
    CodeVerifiedResponse,
    ConfirmPageResponse,
    PasswordStepResponse,
    NextStepResponse,
    ResendCodeResponse,
)

__all__ = [
    "ForgotPasswordRequest",
    "VerifyCodeRequest",
    "ResendCodeRequest",
    "ResetPasswordRequest",
    "NextStepResponse",
    "CodeVerifiedResponse",
    "ConfirmPageResponse",
    "ResendCodeResponse",
    "PasswordStepResponse",
]
