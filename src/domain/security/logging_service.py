"""Secure Logging Service for recovery audit trails.

This service masks personal data before it reaches the logs while keeping
enough structure for a support engineer to correlate a user's recovery
attempt across steps.

Key Features:
- Stable per-process masking of emails, so one address always maps to the same mask
- IP and user agent reduction for privacy compliance
- Token masking for grant identifiers
- A dedicated ``security.audit`` logger for recovery milestones
"""

import hashlib
import time
from typing import Any, Optional

import structlog

logger = structlog.get_logger(__name__)


class SecureLoggingService:
    """Masks sensitive values and records recovery milestones.

    Recovery codes and passwords are never passed to this service; callers
    log only whether such a value was present.
    """

    LOCAL_PART_MASK_LENGTH = 2  # Show only first 2 characters
    IP_MASK_LAST_OCTET = True   # Mask last octet of IP addresses

    def __init__(self):
        """Initialize secure logging service with a per-process masking salt."""
        self._logger = structlog.get_logger("security.audit")
        self._session_start = time.time()

    def _mask_local_part(self, local: str) -> str:
        if len(local) <= self.LOCAL_PART_MASK_LENGTH:
            return "*" * len(local)

        # SHA256 hash keeps the mask stable for the lifetime of the process
        hash_input = f"{local.lower()}:{self._session_start}"
        hash_value = hashlib.sha256(hash_input.encode()).hexdigest()[:8]
        return f"{local[:self.LOCAL_PART_MASK_LENGTH]}***{hash_value}"

    def mask_email(self, email: Optional[str]) -> str:
        """Mask an email address while preserving its shape.

        Args:
            email: Raw email to mask

        Returns:
            str: Consistently masked email, e.g. ``ja***1f2e3d4c@ex***.com``
        """
        if not email:
            return "[empty]"

        if "@" not in email:
            return self._mask_local_part(email)

        local, domain = email.split("@", 1)
        masked_local = self._mask_local_part(local)

        domain_parts = domain.split(".")
        if len(domain_parts) > 1:
            masked_domain = f"{domain_parts[0][:2]}***.{domain_parts[-1]}"
        else:
            masked_domain = f"{domain[:2]}***"

        return f"{masked_local}@{masked_domain}"

    def mask_ip_address(self, ip_address: Optional[str]) -> str:
        """Apply IP address masking for privacy compliance.

        Args:
            ip_address: Raw IP address to mask

        Returns:
            str: Privacy-compliant masked IP address
        """
        if not ip_address:
            return "[unknown]"

        if "." in ip_address and self.IP_MASK_LAST_OCTET:
            parts = ip_address.split(".")
            if len(parts) == 4:
                return f"{parts[0]}.{parts[1]}.{parts[2]}.***"

        return ip_address.rsplit(":", 1)[0] + ":***" if ":" in ip_address else ip_address[:8] + "***"

    def mask_token(self, token: Optional[str]) -> str:
        """Show the first and last four characters of a token identifier."""
        if not token:
            return "[empty]"

        if len(token) <= 8:
            return "*" * len(token)

        return f"{token[:4]}***{token[-4:]}"

    def sanitize_user_agent(self, user_agent: Optional[str]) -> str:
        """Reduce a user agent string to its browser family."""
        if not user_agent:
            return "[unknown]"

        if "Edg" in user_agent:
            return "Edge/***"
        elif "Chrome" in user_agent:
            return "Chrome/***"
        elif "Firefox" in user_agent:
            return "Firefox/***"
        elif "Safari" in user_agent:
            return "Safari/***"
        else:
            return "Unknown/***"

    def log_recovery_event(
        self,
        event_type: str,
        email: Optional[str] = None,
        success: bool = True,
        correlation_id: Optional[str] = None,
        **details: Any,
    ) -> None:
        """Write one recovery milestone to the audit logger.

        Args:
            event_type: Short machine name, e.g. ``recovery_code_verified``
            email: Address the event concerns; masked before logging
            success: Whether the step succeeded
            correlation_id: Request correlation ID
            **details: Extra non-sensitive fields
        """
        log = self._logger.info if success else self._logger.warning
        log(
            event_type,
            email_masked=self.mask_email(email) if email else None,
            success=success,
            correlation_id=correlation_id,
            **details,
        )


secure_logging_service = SecureLoggingService()
