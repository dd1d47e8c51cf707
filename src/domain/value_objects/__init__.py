"""Domain Value Objects for the password recovery domain.

Value objects are immutable objects that describe domain concepts by their attributes
rather than their identity.
"""

from .email import Email
from .new_password import NewPassword
from .provider_session import ProviderSession
from .recovery_code import RecoveryCode
from .verification_grant import GrantSource, VerificationGrant

__all__ = [
    "Email",
    "GrantSource",
    "NewPassword",
    "ProviderSession",
    "RecoveryCode",
    "VerificationGrant",
]
