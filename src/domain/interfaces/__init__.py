"""Domain Interfaces for dependency inversion.

These interfaces define contracts that infrastructure and adapter layers
must implement, so the recovery flow depends on abstractions only.
"""

from .authentication import IAuthRecoveryPort, IVerificationTokenService
from .services import IEventPublisher, INavigator

__all__ = [
    "IAuthRecoveryPort",
    "IEventPublisher",
    "INavigator",
    "IVerificationTokenService",
]
