"""Password Recovery Flow.

This domain service coordinates the three-step password recovery:

1. Request a six-digit code for an email address.
2. Verify the code (with resend and cooldown), which issues a verification
   grant and opens a provider session.
3. Set a new password, gated by the grant.

The flow owns one state machine (see :mod:`.state`), one auth provider port
and the timers of the screen it backs. Provider failures never escape: they
are turned into an inline message on the state and recorded as
:attr:`PasswordResetFlow.last_error` for callers that map them to HTTP.
"""

import asyncio
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Optional, Set

import structlog

from src.core.exceptions import (
    AuthProviderError,
    CodeIncompleteError,
    DeliveryError,
    EmailRequiredError,
    InvalidTransitionError,
    PasswordUpdateError,
    RecoveryError,
    ResendCooldownError,
    ResendError,
    ValidationError,
    VerificationError,
)
from src.domain.events.password_recovery_events import (
    BaseDomainEvent,
    PasswordRecoveryCompletedEvent,
    PasswordRecoveryFailedEvent,
    RecoveryCodeRequestedEvent,
    RecoveryCodeResentEvent,
    RecoveryCodeVerifiedEvent,
)
from src.domain.interfaces.authentication.password_recovery import (
    IAuthRecoveryPort,
    IVerificationTokenService,
)
from src.domain.interfaces.services import IEventPublisher, INavigator
from src.domain.security.logging_service import secure_logging_service
from src.domain.services.password_recovery.code_entry import CodeEntry
from src.domain.services.password_recovery.cooldown import ResendCooldown
from src.domain.services.password_recovery.policy import RecoveryPolicy
from src.domain.services.password_recovery.state import (
    AwaitingCode,
    CheckingAccess,
    CodeAccepted,
    CodeResent,
    CodeSent,
    CodeSubmitted,
    EmailSubmitted,
    FlowEvent,
    FlowState,
    InputRejected,
    PasswordStepEntered,
    PasswordSubmitted,
    PasswordUpdated,
    ProviderFailed,
    Requesting,
    SettingPassword,
    Verified,
    transition,
)
from src.domain.value_objects.email import Email
from src.domain.value_objects.new_password import NewPassword
from src.domain.value_objects.provider_session import ProviderSession
from src.domain.value_objects.verification_grant import GrantSource, VerificationGrant
from src.utils.i18n import get_translated_message

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Navigation:
    """A navigation decided by the flow.

    Attributes:
        target: Client route with query string
        delay: Seconds to wait before navigating
    """

    target: str
    delay: float = 0.0


class PasswordResetFlow:
    """Drives one recovery screen from user input to provider calls.

    Args:
        port: Auth provider port, bound to the current client
        token_service: Issues and checks verification grants
        state: Starting state; ``Requesting()`` for the forgot-password page,
            ``AwaitingCode(...)`` for the confirmation page and
            ``CheckingAccess()`` for the password-set page
        navigator: Performs navigations; optional when the caller reads
            :attr:`pending_navigation` instead
        event_publisher: Receives domain events
        policy: Timing, validation and routing constants
        cooldown: Resend countdown to start from
        language: Language of user-facing messages
        correlation_id: Request correlation ID for logs and events
        timers: When False no timer is started; delayed navigations are only
            recorded and the cooldown does not tick on its own
    """

    def __init__(
        self,
        port: IAuthRecoveryPort,
        token_service: IVerificationTokenService,
        state: Optional[FlowState] = None,
        navigator: Optional[INavigator] = None,
        event_publisher: Optional[IEventPublisher] = None,
        policy: Optional[RecoveryPolicy] = None,
        cooldown: Optional[ResendCooldown] = None,
        language: str = "en",
        correlation_id: Optional[str] = None,
        timers: bool = True,
    ):
        self._port = port
        self._token_service = token_service
        self._navigator = navigator
        self._event_publisher = event_publisher
        self.policy = policy or RecoveryPolicy()
        self.state: FlowState = state if state is not None else Requesting()
        self.cooldown = cooldown or ResendCooldown(self.policy.resend_cooldown_seconds)
        self.code_entry = CodeEntry()
        self.language = language
        self.correlation_id = correlation_id or str(uuid.uuid4())
        self.session: Optional[ProviderSession] = None
        self.pending_navigation: Optional[Navigation] = None
        self.last_error: Optional[RecoveryError] = None

        self._timers = timers
        self._tasks: Set[asyncio.Task] = set()
        self._ticker: Optional[asyncio.Task] = None
        self._resending = False
        self._closed = False

    # ------------------------------------------------------------------
    # Step 1: request a code
    # ------------------------------------------------------------------

    async def request_code(self, email: str) -> FlowState:
        """Ask the provider to email a recovery code to ``email``.

        On success the user is sent to the confirmation page with the email
        and a confirmation message in the query string. A value without the
        shape of an address is rejected without a provider call.
        """
        self._require(Requesting)
        self.last_error = None
        try:
            email = Email(email).value
        except (TypeError, ValueError):
            error = ValidationError(self._t("invalid_email"), "invalid_email")
            self.last_error = error
            self._apply(InputRejected(error.message))
            return self.state

        self._apply(EmailSubmitted(email))
        logger.info(
            "Recovery code requested",
            email_masked=secure_logging_service.mask_email(email),
            correlation_id=self.correlation_id,
        )

        try:
            await self._port.request_password_reset(email)
        except AuthProviderError as exc:
            error = DeliveryError(exc.message or self._t("reset_email_failed"))
            await self._fail(error, "request", email)
            return self.state

        message = self._t("reset_code_sent")
        self._apply(CodeSent(message))
        await self._publish(
            RecoveryCodeRequestedEvent(
                occurred_at=datetime.now(timezone.utc),
                email=email,
                correlation_id=self.correlation_id,
                language=self.language,
            )
        )
        secure_logging_service.log_recovery_event(
            "recovery_code_requested", email=email, correlation_id=self.correlation_id
        )
        self._navigate(self.policy.paths.confirm_url(email, message))
        return self.state

    # ------------------------------------------------------------------
    # Step 2: verify the code
    # ------------------------------------------------------------------

    def load_confirm_page(
        self,
        email: Optional[str] = None,
        message: Optional[str] = None,
        error: Optional[str] = None,
    ) -> FlowState:
        """Open the confirmation page from its query parameters.

        The code boxes start empty and focus is on the first one.
        """
        self.state = AwaitingCode(email=email or None, message=message or None, error=error or None)
        self.code_entry.clear()
        self.last_error = None
        return self.state

    async def submit_code(self, code: Optional[str] = None) -> FlowState:
        """Verify a recovery code.

        Args:
            code: Typed or pasted text, distributed over the code boxes as a
                paste would. When omitted, the current :attr:`code_entry` is used.

        An incomplete code is rejected locally. A rejected code keeps the
        entered digits so the user can correct them.
        """
        state = self._require(AwaitingCode)
        self.last_error = None
        if code is not None:
            self.code_entry.paste(code)

        if not self.code_entry.is_complete:
            error = CodeIncompleteError(self._t("code_incomplete"))
            self.last_error = error
            self._apply(InputRejected(error.message))
            return self.state

        self._apply(CodeSubmitted(self.code_entry.to_code()))
        email = state.email or None

        try:
            session = await self._port.verify_recovery_code(email, self.code_entry.value)
        except AuthProviderError as exc:
            error = VerificationError(exc.message or self._t("invalid_reset_code"))
            await self._fail(error, "verify", email)
            return self.state

        verified_email = email or session.email
        if not verified_email:
            await self._fail(EmailRequiredError(self._t("email_required")), "verify", None)
            return self.state

        grant = self._token_service.issue(verified_email)
        self.session = session
        self._apply(CodeAccepted(grant))
        await self._publish(
            RecoveryCodeVerifiedEvent(
                occurred_at=datetime.now(timezone.utc),
                email=verified_email,
                correlation_id=self.correlation_id,
                grant_id=grant.grant_id,
            )
        )
        secure_logging_service.log_recovery_event(
            "recovery_code_verified",
            email=verified_email,
            correlation_id=self.correlation_id,
            grant_id=secure_logging_service.mask_token(grant.grant_id),
        )
        self._navigate(self.policy.paths.password, delay=self.policy.verified_redirect_delay)
        return self.state

    async def resend_code(self) -> bool:
        """Send a fresh code to the email of the confirmation page.

        Returns:
            bool: True when the provider sent a new code. False while the
            cooldown runs (no provider call), while another resend is
            outstanding, without an email, or when the provider failed.
        """
        state = self._require(AwaitingCode)
        self.last_error = None

        if not state.email:
            error = EmailRequiredError(self._t("email_required"))
            self.last_error = error
            self._apply(InputRejected(error.message))
            return False

        if self.cooldown.active:
            self.last_error = ResendCooldownError(
                self.cooldown.remaining,
                self._t("resend_cooldown_active", seconds=self.cooldown.remaining),
            )
            logger.debug("Resend ignored during cooldown", remaining=self.cooldown.remaining)
            return False

        if self._resending:
            return False

        self._resending = True
        try:
            await self._port.resend_recovery_code(state.email)
        except AuthProviderError as exc:
            error = ResendError(exc.message or self._t("resend_failed"))
            await self._fail(error, "resend", state.email)
            return False
        finally:
            self._resending = False

        self.cooldown.start()
        self._start_ticker()
        if isinstance(self.state, AwaitingCode):
            self._apply(CodeResent(self._t("code_resent")))
        await self._publish(
            RecoveryCodeResentEvent(
                occurred_at=datetime.now(timezone.utc),
                email=state.email,
                correlation_id=self.correlation_id,
                cooldown_seconds=self.cooldown.duration,
            )
        )
        secure_logging_service.log_recovery_event(
            "recovery_code_resent", email=state.email, correlation_id=self.correlation_id
        )
        return True

    # ------------------------------------------------------------------
    # Step 3: set the new password
    # ------------------------------------------------------------------

    async def enter_password_step(self, grant_token: Optional[str] = None) -> bool:
        """Check proof of verification before showing the password form.

        The proof is a valid grant: ``grant_token`` or, when the flow itself
        verified the code, the grant it holds. If the policy accepts active
        sessions, a provider session is accepted instead. Without proof the
        user is sent back to the confirmation page.

        Returns:
            bool: True when the password form may be shown.
        """
        state = self._require(CheckingAccess, Verified)
        if grant_token is None and isinstance(state, Verified):
            grant_token = state.grant.token

        grant = self._token_service.validate(grant_token)
        if grant is None and self.policy.accept_active_session:
            grant = await self._grant_from_session()

        if grant is None:
            logger.info(
                "Password step opened without verification, redirecting",
                correlation_id=self.correlation_id,
            )
            self._navigate(self.policy.paths.confirm)
            return False

        self._apply(PasswordStepEntered(grant))
        return True

    async def set_password(self, password: str, confirm_password: str) -> FlowState:
        """Validate and store the new password.

        Length is checked before equality, and the first failing check aborts
        without a provider call. On success the grant is revoked and the user
        is sent to the login page after the success delay.
        A code grant is only honoured in a provider session of the same
        account.
        """
        state = self._require(SettingPassword)
        self.last_error = None

        try:
            new_password = NewPassword.from_form(
                password,
                confirm_password,
                min_length=self.policy.password_min_length,
                language=self.language,
            )
        except ValidationError as exc:
            self.last_error = exc
            self._apply(InputRejected(exc.message))
            return self.state

        self._apply(PasswordSubmitted())

        try:
            if state.grant.source is GrantSource.CODE:
                await self._require_grant_session(state.grant)
            await self._port.update_password(new_password.value)
        except AuthProviderError as exc:
            error = PasswordUpdateError(exc.message or self._t("password_reset_failed"))
            await self._fail(error, "update", state.grant.email)
            return self.state

        if state.grant.source is GrantSource.CODE:
            self._token_service.revoke(state.grant)

        message = self._t("password_reset_success")
        self._apply(PasswordUpdated(message))
        await self._publish(
            PasswordRecoveryCompletedEvent(
                occurred_at=datetime.now(timezone.utc),
                email=state.grant.email,
                correlation_id=self.correlation_id,
                grant_source=state.grant.source.value,
            )
        )
        secure_logging_service.log_recovery_event(
            "password_recovery_completed",
            email=state.grant.email,
            correlation_id=self.correlation_id,
        )
        self._navigate(
            self.policy.paths.login_url(message), delay=self.policy.success_redirect_delay
        )
        return self.state

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Cancel every timer. A closed flow performs no further navigation."""
        self._closed = True
        for task in list(self._tasks):
            task.cancel()
        self._tasks.clear()
        self._ticker = None

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _t(self, key: str, **params) -> str:
        return get_translated_message(key, self.language, **params)

    def _apply(self, event: FlowEvent) -> None:
        previous = self.state
        self.state = transition(previous, event)
        logger.debug(
            "Recovery flow transition",
            from_state=type(previous).__name__,
            flow_event=type(event).__name__,
            to_state=type(self.state).__name__,
        )

    def _require(self, *allowed: type) -> FlowState:
        if not isinstance(self.state, allowed):
            expected = " or ".join(cls.__name__ for cls in allowed)
            raise InvalidTransitionError(
                f"Expected state {expected}, flow is in {type(self.state).__name__}"
            )
        return self.state

    async def _require_grant_session(self, grant: VerificationGrant) -> None:
        """Refuse an update in a provider session of another account than the grant's."""
        session = await self._port.get_active_session()
        if session is None or not session.email:
            return
        if session.email.strip().lower() != grant.email.strip().lower():
            logger.warning(
                "Provider session does not match the verified email",
                correlation_id=self.correlation_id,
            )
            raise AuthProviderError(self._t("session_mismatch"), "session_mismatch", 403)

    async def _fail(self, error: RecoveryError, step: str, email: Optional[str]) -> None:
        self.last_error = error
        self._apply(ProviderFailed(error.message))
        logger.warning(
            "Recovery step failed",
            step=step,
            error_code=error.code,
            error_message=error.message,
            correlation_id=self.correlation_id,
        )
        secure_logging_service.log_recovery_event(
            f"recovery_{step}_failed",
            email=email,
            success=False,
            correlation_id=self.correlation_id,
            error_code=error.code,
        )
        await self._publish(
            PasswordRecoveryFailedEvent(
                occurred_at=datetime.now(timezone.utc),
                email=email,
                correlation_id=self.correlation_id,
                step=step,
                failure_reason=error.code,
            )
        )

    async def _grant_from_session(self) -> Optional[VerificationGrant]:
        try:
            session = await self._port.get_active_session()
        except AuthProviderError as exc:
            logger.info("Active session lookup failed", error_message=exc.message)
            return None
        if session is None or not session.email:
            return None

        self.session = session
        return VerificationGrant(
            email=session.email,
            grant_id=f"session-{uuid.uuid4().hex}",
            expires_at=datetime.now(timezone.utc)
            + timedelta(minutes=self.policy.session_grant_ttl_minutes),
            source=GrantSource.SESSION,
        )

    async def _publish(self, event: BaseDomainEvent) -> None:
        if self._event_publisher is not None:
            await self._event_publisher.publish(event)

    def _navigate(self, target: str, delay: float = 0.0) -> None:
        if self._closed:
            return
        self.pending_navigation = Navigation(target=target, delay=delay)
        if self._navigator is None or (delay > 0 and not self._timers):
            return
        if delay > 0:
            self._spawn(self._navigate_later(target, delay))
        else:
            self._navigator.navigate(target)

    async def _navigate_later(self, target: str, delay: float) -> None:
        await asyncio.sleep(delay)
        if not self._closed and self._navigator is not None:
            self._navigator.navigate(target)

    def _start_ticker(self) -> None:
        if not self._timers or self._closed:
            return
        if self._ticker is not None:
            self._ticker.cancel()
        self._ticker = self._spawn(self.cooldown.run(self.policy.tick_interval))

    def _spawn(self, coro: Awaitable) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task
