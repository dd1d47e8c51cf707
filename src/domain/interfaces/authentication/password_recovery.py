"""Password recovery service interfaces.

This module defines the contracts the password recovery flow depends on.
The flow never talks to the hosted auth provider directly; it goes through
:class:`IAuthRecoveryPort`, so it can be driven by the Supabase adapter in
production and by the in-memory provider in development and tests.
"""

from abc import ABC, abstractmethod
from typing import Optional

from src.domain.value_objects.provider_session import ProviderSession
from src.domain.value_objects.verification_grant import VerificationGrant


class IAuthRecoveryPort(ABC):
    """The five auth provider operations used by the recovery flow.

    Implementations are bound to one client: verification establishes a
    session on the port instance, and :meth:`update_password` and
    :meth:`get_active_session` operate on that session.

    Every method raises :class:`~src.core.exceptions.AuthProviderError`
    carrying the provider's message when the provider rejects the call.
    """

    @abstractmethod
    async def request_password_reset(self, email: str) -> None:
        """Ask the provider to email a six-digit recovery code to ``email``."""
        raise NotImplementedError

    @abstractmethod
    async def verify_recovery_code(self, email: Optional[str], code: str) -> ProviderSession:
        """Validate a recovery code and establish an authenticated session.

        Args:
            email: Address the code was sent to. Optional, but improves
                match precision.
            code: The six-digit code.

        Returns:
            ProviderSession: The session the provider established.
        """
        raise NotImplementedError

    @abstractmethod
    async def resend_recovery_code(self, email: str) -> None:
        """Ask the provider to send a fresh recovery code to ``email``."""
        raise NotImplementedError

    @abstractmethod
    async def update_password(self, new_password: str) -> None:
        """Set a new password for the account of the active session."""
        raise NotImplementedError

    @abstractmethod
    async def get_active_session(self) -> Optional[ProviderSession]:
        """Return the active session, or ``None`` when there is none."""
        raise NotImplementedError


class IVerificationTokenService(ABC):
    """Issues and checks the grants that unlock the password-set step."""

    @abstractmethod
    def issue(self, email: str) -> VerificationGrant:
        """Issue a signed, short-lived grant for a verified ``email``."""
        raise NotImplementedError

    @abstractmethod
    def validate(self, token: Optional[str]) -> Optional[VerificationGrant]:
        """Decode a grant token.

        Returns:
            The grant, or ``None`` if the token is missing, malformed, forged,
            expired or revoked.
        """
        raise NotImplementedError

    @abstractmethod
    def revoke(self, grant: VerificationGrant) -> None:
        """Invalidate a grant so it cannot unlock the password-set step again."""
        raise NotImplementedError
