"""Verification grant value object.

A grant is the capability handed from the code verification step to the
password-set step. It replaces an ambient "verified" flag: whoever presents
a valid grant has proven control of ``email`` within the grant lifetime.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class GrantSource(str, Enum):
    """How the password-set step was unlocked."""

    CODE = "code"
    SESSION = "session"


@dataclass(frozen=True)
class VerificationGrant:
    """Proof of a completed code verification.

    Attributes:
        email: The verified address
        grant_id: Unique identifier, used for single-use revocation
        expires_at: Timezone-aware expiry
        token: Signed, encoded form handed to the client (excluded from ``repr``)
        source: ``code`` for a signed grant, ``session`` when an active provider
            session was accepted instead
    """

    email: str
    grant_id: str
    expires_at: datetime
    token: Optional[str] = field(default=None, repr=False)
    source: GrantSource = GrantSource.CODE

    def __post_init__(self) -> None:
        if not self.email:
            raise ValueError("A verification grant requires an email.")
        if not self.grant_id:
            raise ValueError("A verification grant requires an identifier.")
        if self.expires_at.tzinfo is None:
            raise ValueError("Grant expiry must be timezone-aware.")

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """Returns True once ``expires_at`` has passed."""
        return (now or datetime.now(timezone.utc)) >= self.expires_at
