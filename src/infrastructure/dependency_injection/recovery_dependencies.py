"""Dependencies for the password recovery API.

Process-wide collaborators (grant signer, cooldown registry, event publisher,
in-memory provider store) are created once. The auth provider port is built
per request because it is bound to the client's session token.
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Annotated, Optional

import httpx
from fastapi import Depends, Request

from src.core.config.settings import settings
from src.domain.interfaces.authentication.password_recovery import (
    IAuthRecoveryPort,
    IVerificationTokenService,
)
from src.domain.interfaces.services import IEventPublisher
from src.domain.services.password_recovery.cooldown import ResendCooldown
from src.domain.services.password_recovery.flow import PasswordResetFlow
from src.domain.services.password_recovery.policy import RecoveryPolicy
from src.domain.services.password_recovery.state import FlowState
from src.infrastructure.services.event_publisher import InMemoryEventPublisher
from src.infrastructure.services.in_memory_auth_provider import (
    InMemoryAuthBackend,
    InMemoryAuthRecoveryProvider,
)
from src.infrastructure.services.resend_cooldown_registry import ResendCooldownRegistry
from src.infrastructure.services.supabase_auth_adapter import SupabaseAuthRecoveryAdapter
from src.infrastructure.services.verification_token_service import VerificationTokenService

# ---------------------------------------------------------------------------
# Process-wide services
# ---------------------------------------------------------------------------


@lru_cache
def get_verification_token_service() -> IVerificationTokenService:
    """Grant signer keyed with ``SECRET_KEY``."""
    return VerificationTokenService(
        secret_key=settings.SECRET_KEY,
        ttl_minutes=settings.RECOVERY_GRANT_TTL_MINUTES,
    )


@lru_cache
def get_resend_cooldown_registry() -> ResendCooldownRegistry:
    return ResendCooldownRegistry(duration=settings.RESEND_COOLDOWN_SECONDS)


@lru_cache
def get_event_publisher() -> IEventPublisher:
    """Event publisher for recovery audit events.

    Returns the in-memory implementation; a broker-backed publisher can be
    returned here without touching the flow.
    """
    return InMemoryEventPublisher()


@lru_cache
def get_in_memory_auth_backend() -> InMemoryAuthBackend:
    """Store behind the ``memory`` provider; codes are logged outside tests."""
    return InMemoryAuthBackend(log_codes=settings.APP_ENV == "development")


@lru_cache
def get_recovery_policy() -> RecoveryPolicy:
    return RecoveryPolicy.from_settings(settings)


def create_auth_http_client() -> httpx.AsyncClient:
    """httpx client for the Supabase project, owned by the application lifespan."""
    return httpx.AsyncClient(
        base_url=settings.SUPABASE_URL or "",
        timeout=settings.AUTH_PROVIDER_TIMEOUT_SECONDS,
        headers={"Content-Type": "application/json"},
    )


# ---------------------------------------------------------------------------
# Per-request dependencies
# ---------------------------------------------------------------------------


def get_bearer_token(request: Request) -> Optional[str]:
    """Provider session token from the ``Authorization: Bearer`` header."""
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_auth_recovery_port(
    request: Request,
    access_token: Annotated[Optional[str], Depends(get_bearer_token)],
) -> IAuthRecoveryPort:
    """Recovery port for the configured provider, bound to the caller's session."""
    if settings.AUTH_PROVIDER == "supabase":
        client = getattr(request.app.state, "auth_http_client", None)
        if client is None:
            raise RuntimeError("Auth provider HTTP client is not initialized")
        return SupabaseAuthRecoveryAdapter(
            client=client,
            anon_key=settings.SUPABASE_ANON_KEY.get_secret_value(),
            access_token=access_token,
        )
    return InMemoryAuthRecoveryProvider(get_in_memory_auth_backend(), access_token=access_token)


@dataclass
class RecoveryFlowFactory:
    """Builds one :class:`PasswordResetFlow` per request.

    HTTP flows run without timers: delayed navigations are returned to the
    client, which performs them after the stated delay.
    """

    port: IAuthRecoveryPort
    token_service: IVerificationTokenService
    event_publisher: IEventPublisher
    policy: RecoveryPolicy

    def build(
        self,
        state: FlowState,
        language: str,
        correlation_id: Optional[str] = None,
        cooldown: Optional[ResendCooldown] = None,
    ) -> PasswordResetFlow:
        return PasswordResetFlow(
            port=self.port,
            token_service=self.token_service,
            state=state,
            event_publisher=self.event_publisher,
            policy=self.policy,
            cooldown=cooldown,
            language=language,
            correlation_id=correlation_id,
            timers=False,
        )


def get_recovery_flow_factory(
    port: Annotated[IAuthRecoveryPort, Depends(get_auth_recovery_port)],
    token_service: Annotated[IVerificationTokenService, Depends(get_verification_token_service)],
    event_publisher: Annotated[IEventPublisher, Depends(get_event_publisher)],
    policy: Annotated[RecoveryPolicy, Depends(get_recovery_policy)],
) -> RecoveryFlowFactory:
    return RecoveryFlowFactory(
        port=port,
        token_service=token_service,
        event_publisher=event_publisher,
        policy=policy,
    )


FlowFactory = Annotated[RecoveryFlowFactory, Depends(get_recovery_flow_factory)]
CooldownRegistry = Annotated[ResendCooldownRegistry, Depends(get_resend_cooldown_registry)]
