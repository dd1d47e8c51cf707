"""Resend cooldown countdown."""

import asyncio

import structlog

logger = structlog.get_logger(__name__)


class ResendCooldown:
    """Seconds left before another recovery code may be requested.

    The countdown is driven by ticks: each :meth:`tick` removes one second.
    :meth:`run` produces those ticks from a repeating timer.

    Attributes:
        duration: Value the countdown restarts from after a resend.
    """

    def __init__(self, duration: int = 60, remaining: int = 0):
        if duration < 0 or remaining < 0:
            raise ValueError("Cooldown values cannot be negative")
        self.duration = duration
        self._remaining = remaining

    @property
    def remaining(self) -> int:
        return self._remaining

    @property
    def active(self) -> bool:
        return self._remaining > 0

    def start(self) -> None:
        """Restart the countdown at ``duration``."""
        self._remaining = self.duration

    def tick(self) -> int:
        """Count one second down, stopping at zero."""
        if self._remaining > 0:
            self._remaining -= 1
        return self._remaining

    async def run(self, interval: float = 1.0) -> None:
        """Tick once per ``interval`` seconds until the countdown reaches zero.

        Cancelling the task stops the countdown where it is.
        """
        while self._remaining > 0:
            await asyncio.sleep(interval)
            self.tick()
        logger.debug("Resend cooldown finished")
