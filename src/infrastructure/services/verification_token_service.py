"""Verification grant tokens.

Signed HS256 JWTs that carry proof of a completed code verification from the
confirmation step to the password-set step. A grant is single use: the flow
revokes it after the password update succeeds.
"""

import secrets
import threading
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

import structlog
from jwt import PyJWTError, decode as jwt_decode, encode as jwt_encode

from src.domain.interfaces.authentication.password_recovery import IVerificationTokenService
from src.domain.security.logging_service import secure_logging_service
from src.domain.value_objects.verification_grant import GrantSource, VerificationGrant

logger = structlog.get_logger(__name__)

GRANT_TOKEN_TYPE = "password_recovery"


class VerificationTokenService(IVerificationTokenService):
    """Issues, validates and revokes verification grants.

    Revoked grant IDs are kept in process memory until the grant would have
    expired anyway. The revocation list is not shared between workers.

    Attributes:
        ttl_minutes (int): Lifetime of an issued grant.
    """

    ALGORITHM = "HS256"

    def __init__(self, secret_key: str, ttl_minutes: int = 10):
        if not secret_key:
            raise ValueError("A secret key is required to sign verification grants")
        self._secret_key = secret_key
        self.ttl_minutes = ttl_minutes
        self._revoked: Dict[str, datetime] = {}
        self._lock = threading.Lock()

    def issue(self, email: str) -> VerificationGrant:
        """Issue a signed grant for a verified ``email``."""
        now = datetime.now(timezone.utc)
        expires_at = now + timedelta(minutes=self.ttl_minutes)
        grant_id = secrets.token_urlsafe(24)
        payload = {
            "typ": GRANT_TOKEN_TYPE,
            "sub": email,
            "jti": grant_id,
            "iat": now,
            "exp": expires_at,
        }
        token = jwt_encode(payload, self._secret_key, algorithm=self.ALGORITHM)
        logger.debug(
            "Verification grant issued",
            email_masked=secure_logging_service.mask_email(email),
            grant_id=secure_logging_service.mask_token(grant_id),
            expires_at=expires_at.isoformat(),
        )
        # JWT exp has second precision
        return VerificationGrant(
            email=email,
            grant_id=grant_id,
            expires_at=expires_at.replace(microsecond=0),
            token=token,
            source=GrantSource.CODE,
        )

    def validate(self, token: Optional[str]) -> Optional[VerificationGrant]:
        """Decode ``token`` and return its grant, or ``None`` when unusable."""
        if not token:
            return None

        try:
            payload = jwt_decode(
                token,
                self._secret_key,
                algorithms=[self.ALGORITHM],
                options={"require": ["exp", "sub", "jti", "typ"]},
            )
        except PyJWTError as e:
            logger.info("Verification grant rejected", reason=type(e).__name__)
            return None

        if payload.get("typ") != GRANT_TOKEN_TYPE:
            logger.info("Verification grant rejected", reason="wrong_token_type")
            return None

        grant_id = payload["jti"]
        if self.is_revoked(grant_id):
            logger.info(
                "Verification grant rejected",
                reason="revoked",
                grant_id=secure_logging_service.mask_token(grant_id),
            )
            return None

        return VerificationGrant(
            email=payload["sub"],
            grant_id=grant_id,
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            token=token,
            source=GrantSource.CODE,
        )

    def revoke(self, grant: VerificationGrant) -> None:
        """Invalidate ``grant`` for the rest of its lifetime."""
        with self._lock:
            self._purge_expired()
            self._revoked[grant.grant_id] = grant.expires_at
        logger.debug(
            "Verification grant revoked",
            grant_id=secure_logging_service.mask_token(grant.grant_id),
        )

    def is_revoked(self, grant_id: str) -> bool:
        with self._lock:
            return grant_id in self._revoked

    def _purge_expired(self) -> None:
        now = datetime.now(timezone.utc)
        for grant_id in [g for g, expiry in self._revoked.items() if expiry <= now]:
            del self._revoked[grant_id]
