"""Domain Services for the Password Recovery Bounded Context.

Password Recovery:
- Recovery Flow: the three recovery steps driven as one state machine
- Code Entry: the six-box code input with its focus rules
- Resend Cooldown: the countdown between resent codes
"""

from .password_recovery import (
    CodeEntry,
    PasswordResetFlow,
    RecoveryPaths,
    RecoveryPolicy,
    ResendCooldown,
)

__all__ = [
    "CodeEntry",
    "PasswordResetFlow",
    "RecoveryPaths",
    "RecoveryPolicy",
    "ResendCooldown",
]
