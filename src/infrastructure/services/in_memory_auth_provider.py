"""In-memory auth provider for development and testing.

Behaves like the hosted provider for the recovery operations: six-digit
codes valid for one hour, each code usable once, a new request replacing the
previous code, sessions opened by verification. Sent codes are kept in an
outbox instead of being emailed.
"""

import secrets
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import structlog

from src.core.exceptions import AuthProviderError
from src.domain.interfaces.authentication.password_recovery import IAuthRecoveryPort
from src.domain.security.logging_service import secure_logging_service
from src.domain.value_objects.provider_session import ProviderSession

logger = structlog.get_logger(__name__)


@dataclass
class SentCode:
    """A recovery code placed in the outbox."""

    email: str
    code: str
    expires_at: datetime
    used: bool = False


class InMemoryAuthBackend:
    """Shared account, code and session store.

    Args:
        code_ttl_minutes: Lifetime of a recovery code
        log_codes: Write sent codes to the log, for local development
    """

    def __init__(self, code_ttl_minutes: int = 60, log_codes: bool = False):
        self.code_ttl_minutes = code_ttl_minutes
        self.log_codes = log_codes
        self._passwords: Dict[str, str] = {}
        self._codes: Dict[str, SentCode] = {}
        self._sessions: Dict[str, str] = {}
        self._failures: Dict[str, str] = {}
        self.outbox: List[SentCode] = []
        self._lock = threading.Lock()

    @staticmethod
    def _key(email: str) -> str:
        return email.strip().lower()

    def add_account(self, email: str, password: str) -> None:
        with self._lock:
            self._passwords[self._key(email)] = password

    def password_of(self, email: str) -> Optional[str]:
        return self._passwords.get(self._key(email))

    def last_code(self, email: str) -> Optional[str]:
        """The most recent code sent to ``email``."""
        for sent in reversed(self.outbox):
            if sent.email == self._key(email):
                return sent.code
        return None

    def fail_next(self, operation: str, message: str) -> None:
        """Make the next call of ``operation`` fail with ``message``.

        ``operation`` is a port method name, e.g. ``"verify_recovery_code"``.
        """
        self._failures[operation] = message

    def reset(self) -> None:
        with self._lock:
            self._passwords.clear()
            self._codes.clear()
            self._sessions.clear()
            self._failures.clear()
            self.outbox.clear()

    def raise_if_failing(self, operation: str) -> None:
        message = self._failures.pop(operation, None)
        if message is not None:
            raise AuthProviderError(message, "provider_rejected", 400)

    def send_code(self, email: str) -> None:
        key = self._key(email)
        with self._lock:
            if key not in self._passwords:
                # Unknown addresses get the same answer as known ones
                return
            sent = SentCode(
                email=key,
                code=f"{secrets.randbelow(1_000_000):06d}",
                expires_at=datetime.now(timezone.utc) + timedelta(minutes=self.code_ttl_minutes),
            )
            self._codes[key] = sent
            self.outbox.append(sent)

        if self.log_codes:
            logger.info(
                "Recovery code issued by in-memory provider",
                email_masked=secure_logging_service.mask_email(email),
                code=sent.code,
            )

    def consume_code(self, email: Optional[str], code: str) -> str:
        """Mark a matching code used and return the email it was sent to."""
        now = datetime.now(timezone.utc)
        with self._lock:
            if email:
                candidates = [self._codes.get(self._key(email))]
            else:
                candidates = list(self._codes.values())
            for sent in candidates:
                if sent is None or sent.used or sent.code != code:
                    continue
                if sent.expires_at <= now:
                    break
                sent.used = True
                return sent.email
        raise AuthProviderError("Token has expired or is invalid", "provider_rejected", 403)

    def open_session(self, email: str) -> str:
        token = secrets.token_urlsafe(32)
        with self._lock:
            self._sessions[token] = self._key(email)
        return token

    def session_email(self, token: Optional[str]) -> Optional[str]:
        if not token:
            return None
        return self._sessions.get(token)

    def set_password(self, email: str, password: str) -> None:
        with self._lock:
            if self._passwords.get(email) == password:
                raise AuthProviderError(
                    "New password should be different from the old password.",
                    "provider_rejected",
                    422,
                )
            self._passwords[email] = password


class InMemoryAuthRecoveryProvider(IAuthRecoveryPort):
    """Recovery port over :class:`InMemoryAuthBackend`, bound to one client.

    Args:
        backend: The shared store
        access_token: Session token the client presents, if any
    """

    def __init__(self, backend: InMemoryAuthBackend, access_token: Optional[str] = None):
        self._backend = backend
        self._access_token = access_token

    @property
    def access_token(self) -> Optional[str]:
        return self._access_token

    async def request_password_reset(self, email: str) -> None:
        self._backend.raise_if_failing("request_password_reset")
        self._backend.send_code(email)

    async def verify_recovery_code(self, email: Optional[str], code: str) -> ProviderSession:
        self._backend.raise_if_failing("verify_recovery_code")
        verified_email = self._backend.consume_code(email, code)
        self._access_token = self._backend.open_session(verified_email)
        return ProviderSession(access_token=self._access_token, email=verified_email)

    async def resend_recovery_code(self, email: str) -> None:
        self._backend.raise_if_failing("resend_recovery_code")
        self._backend.send_code(email)

    async def update_password(self, new_password: str) -> None:
        self._backend.raise_if_failing("update_password")
        email = self._backend.session_email(self._access_token)
        if email is None:
            raise AuthProviderError("Auth session missing!", "provider_no_session", 401)
        self._backend.set_password(email, new_password)

    async def get_active_session(self) -> Optional[ProviderSession]:
        self._backend.raise_if_failing("get_active_session")
        email = self._backend.session_email(self._access_token)
        if email is None:
            return None
        return ProviderSession(access_token=self._access_token, email=email)
