"""Authentication interfaces for the password recovery bounded context."""

from .password_recovery import IAuthRecoveryPort, IVerificationTokenService

__all__ = [
    "IAuthRecoveryPort",
    "IVerificationTokenService",
]
