"""Timing, validation and routing rules of the recovery flow."""

from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import quote, urlencode


@dataclass(frozen=True)
class RecoveryPaths:
    """Client routes the flow sends the user to."""

    confirm: str = "/reset-password/confirm"
    password: str = "/reset-password"
    login: str = "/login"

    def confirm_url(self, email: Optional[str] = None, message: Optional[str] = None) -> str:
        """Confirmation page URL carrying ``email`` and ``message`` as query parameters."""
        params = {key: value for key, value in (("email", email), ("message", message)) if value}
        return _with_query(self.confirm, params)

    def login_url(self, message: Optional[str] = None) -> str:
        """Login page URL carrying a confirmation ``message``."""
        return _with_query(self.login, {"message": message} if message else {})


def _with_query(path: str, params: dict) -> str:
    if not params:
        return path
    return f"{path}?{urlencode(params, quote_via=quote)}"


@dataclass(frozen=True)
class RecoveryPolicy:
    """Constants the flow applies.

    Attributes:
        resend_cooldown_seconds: Countdown started by a successful resend
        verified_redirect_delay: Seconds the "code verified" screen stays up
        success_redirect_delay: Seconds the "password reset" screen stays up
        password_min_length: Minimum accepted new password length
        accept_active_session: Whether an active provider session unlocks the
            password-set step without a grant
        session_grant_ttl_minutes: Lifetime of a grant derived from a session
        tick_interval: Seconds between cooldown ticks
    """

    resend_cooldown_seconds: int = 60
    verified_redirect_delay: float = 1.5
    success_redirect_delay: float = 2.0
    password_min_length: int = 6
    accept_active_session: bool = False
    session_grant_ttl_minutes: int = 10
    tick_interval: float = 1.0
    paths: RecoveryPaths = field(default_factory=RecoveryPaths)

    @classmethod
    def from_settings(cls, settings) -> "RecoveryPolicy":
        return cls(
            resend_cooldown_seconds=settings.RESEND_COOLDOWN_SECONDS,
            verified_redirect_delay=settings.VERIFIED_REDIRECT_DELAY_SECONDS,
            success_redirect_delay=settings.SUCCESS_REDIRECT_DELAY_SECONDS,
            password_min_length=settings.PASSWORD_MIN_LENGTH,
            accept_active_session=settings.RECOVERY_ACCEPT_ACTIVE_SESSION,
            session_grant_ttl_minutes=settings.RECOVERY_GRANT_TTL_MINUTES,
            paths=RecoveryPaths(
                confirm=settings.RECOVERY_CONFIRM_PATH,
                password=settings.RECOVERY_PASSWORD_PATH,
                login=settings.LOGIN_PATH,
            ),
        )
