"""Per-email resend cooldowns for the HTTP API.

Each request gets a fresh recovery flow, so the countdown of the confirmation
page lives here between requests. The registry is process local.
"""

import threading
import time
from typing import Callable, Dict

import structlog

from src.domain.services.password_recovery.cooldown import ResendCooldown

logger = structlog.get_logger(__name__)


class ResendCooldownRegistry:
    """Remembers when each email last received a resent code.

    Args:
        duration: Cooldown length in seconds
        clock: Monotonic clock returning seconds
    """

    def __init__(self, duration: int = 60, clock: Callable[[], float] = time.monotonic):
        self.duration = duration
        self._clock = clock
        self._started: Dict[str, float] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _key(email: str) -> str:
        return email.strip().lower()

    def _remaining(self, key: str) -> int:
        started = self._started.get(key)
        if started is None:
            return 0
        left = self.duration - int(self._clock() - started)
        if left <= 0:
            del self._started[key]
            return 0
        return left

    def remaining(self, email: str) -> int:
        """Whole seconds left before ``email`` may receive another code."""
        with self._lock:
            return self._remaining(self._key(email))

    def snapshot(self, email: str) -> ResendCooldown:
        """A countdown positioned where ``email``'s cooldown currently is."""
        return ResendCooldown(self.duration, self.remaining(email))

    def start(self, email: str) -> None:
        """Start the cooldown for ``email`` now."""
        with self._lock:
            self._started[self._key(email)] = self._clock()
        logger.debug("Resend cooldown started", duration=self.duration)

    def claim(self, email: str) -> int:
        """Start the cooldown for ``email`` unless one is already running.

        Checking and starting happen under one lock, so of several
        concurrent resends for the same email only one may go ahead.

        Returns:
            int: 0 when the cooldown was claimed, otherwise the seconds left
            of the running one.
        """
        key = self._key(email)
        with self._lock:
            left = self._remaining(key)
            if left == 0:
                self._started[key] = self._clock()
        return left

    def release(self, email: str) -> None:
        """Drop a claimed cooldown whose resend did not go out."""
        with self._lock:
            self._started.pop(self._key(email), None)
        logger.debug("Resend cooldown released")

    def clear(self) -> None:
        with self._lock:
            self._started.clear()
