"""Infrastructure Services.

Concrete implementations of the domain interfaces used by password recovery:

- Auth providers: Supabase (GoTrue over httpx) and an in-memory provider
- Verification grants: signed JWTs with single-use revocation
- Resend cooldowns: per-email countdowns shared across requests
- Events: domain event publishing
"""

from .event_publisher import InMemoryEventPublisher
from .in_memory_auth_provider import InMemoryAuthBackend, InMemoryAuthRecoveryProvider
from .resend_cooldown_registry import ResendCooldownRegistry
from .supabase_auth_adapter import SupabaseAuthRecoveryAdapter
from .verification_token_service import VerificationTokenService

__all__ = [
    "InMemoryAuthBackend",
    "InMemoryAuthRecoveryProvider",
    "InMemoryEventPublisher",
    "ResendCooldownRegistry",
    "SupabaseAuthRecoveryAdapter",
    "VerificationTokenService",
]
