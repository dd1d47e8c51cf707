"""Password recovery domain services.

- :class:`PasswordResetFlow`: the three-step recovery controller
- :class:`CodeEntry`: six-box code input model
- :class:`ResendCooldown`: resend countdown
- :class:`RecoveryPolicy`: timing, validation and routing constants
"""

from .code_entry import CodeEntry
from .cooldown import ResendCooldown
from .flow import Navigation, PasswordResetFlow
from .policy import RecoveryPaths, RecoveryPolicy

__all__ = [
    "CodeEntry",
    "Navigation",
    "PasswordResetFlow",
    "RecoveryPaths",
    "RecoveryPolicy",
    "ResendCooldown",
]
