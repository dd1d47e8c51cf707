"""Password Recovery Domain Events.

These events represent significant business occurrences in the password
recovery flow that other parts of the system may react to (audit logging,
monitoring, security notifications).
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional


@dataclass(frozen=True)
class BaseDomainEvent:
    """Base class for all domain events.

    Attributes:
        occurred_at: When the event occurred
        email: Address of the account the recovery concerns
        correlation_id: Optional correlation ID for tracking
    """

    occurred_at: datetime
    email: Optional[str]
    correlation_id: Optional[str]

    def __post_init__(self):
        """Ensure occurred_at is timezone-aware."""
        if not self.occurred_at.tzinfo:
            object.__setattr__(self, 'occurred_at',
                             self.occurred_at.replace(tzinfo=timezone.utc))


@dataclass(frozen=True)
class RecoveryCodeRequestedEvent(BaseDomainEvent):
    """Emitted when the provider accepted a request to email a recovery code."""

    language: str = "en"


@dataclass(frozen=True)
class RecoveryCodeResentEvent(BaseDomainEvent):
    """Emitted when a new recovery code was sent from the confirmation step.

    Attributes:
        cooldown_seconds: Cooldown started by this resend
    """

    cooldown_seconds: int = 60


@dataclass(frozen=True)
class RecoveryCodeVerifiedEvent(BaseDomainEvent):
    """Emitted when a recovery code was accepted and a grant issued.

    Attributes:
        grant_id: Identifier of the issued verification grant
    """

    grant_id: str = ""


@dataclass(frozen=True)
class PasswordRecoveryCompletedEvent(BaseDomainEvent):
    """Emitted when the new password was stored by the provider.

    Attributes:
        grant_source: ``code`` or ``session``, how the step was unlocked
    """

    grant_source: str = "code"


@dataclass(frozen=True)
class PasswordRecoveryFailedEvent(BaseDomainEvent):
    """Emitted when a recovery step failed.

    Attributes:
        step: ``request``, ``verify``, ``resend`` or ``update``
        failure_reason: Error code of the failure
    """

    step: str = ""
    failure_reason: str = ""
