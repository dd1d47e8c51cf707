"""Domain Events.

All events are immutable and represent significant business occurrences in
the password recovery flow.
"""

from .password_recovery_events import (
    BaseDomainEvent,
    PasswordRecoveryCompletedEvent,
    PasswordRecoveryFailedEvent,
    RecoveryCodeRequestedEvent,
    RecoveryCodeResentEvent,
    RecoveryCodeVerifiedEvent,
)

__all__ = [
    "BaseDomainEvent",
    "PasswordRecoveryCompletedEvent",
    "PasswordRecoveryFailedEvent",
    "RecoveryCodeRequestedEvent",
    "RecoveryCodeResentEvent",
    "RecoveryCodeVerifiedEvent",
]
