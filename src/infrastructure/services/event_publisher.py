"""Event Publisher Infrastructure Service.

This service provides the concrete implementation of the domain event
publishing interface, so the recovery flow can publish events without
coupling to infrastructure concerns.
"""

import asyncio
import inspect
from typing import Callable, List, Optional, Set

import structlog

from src.domain.events.password_recovery_events import BaseDomainEvent
from src.domain.interfaces.services import IEventPublisher
from src.domain.security.logging_service import secure_logging_service

logger = structlog.get_logger(__name__)


class InMemoryEventPublisher(IEventPublisher):
    """In-memory event publisher.

    Stores every published event for inspection and replay, and forwards it
    to registered subscribers. Publishing never fails the recovery step that
    produced the event.
    """

    def __init__(self):
        """Initialize event publisher with in-memory storage."""
        self._published_events: List[BaseDomainEvent] = []
        self._event_filters: Set[str] = set()
        self._subscribers: List[Callable] = []

        logger.info("InMemoryEventPublisher initialized")

    async def publish(self, event: BaseDomainEvent) -> None:
        """Publish a single domain event.

        Args:
            event: Domain event to publish
        """
        try:
            self._published_events.append(event)

            event_type = type(event).__name__
            if self._event_filters and event_type not in self._event_filters:
                logger.debug(
                    "Event filtered out",
                    event_type=event_type,
                    correlation_id=event.correlation_id,
                )
                return

            if self._subscribers:
                await self._notify_subscribers(event)

            logger.info(
                "Domain event published",
                event_type=event_type,
                email_masked=secure_logging_service.mask_email(event.email),
                correlation_id=event.correlation_id,
                occurred_at=event.occurred_at.isoformat(),
            )

        except Exception as e:
            logger.error(
                "Failed to publish domain event",
                event_type=type(event).__name__,
                error=str(e),
            )
            # Publishing issues must not fail the recovery step

    async def publish_many(self, events: List[BaseDomainEvent]) -> None:
        """Publish multiple domain events in order.

        Args:
            events: List of domain events to publish
        """
        if not events:
            return

        for event in events:
            await self.publish(event)

        logger.info(
            "Multiple domain events published",
            event_count=len(events),
            event_types=[type(e).__name__ for e in events],
        )

    def add_event_filter(self, event_type: str) -> None:
        """Only forward events whose type name is in the filter set."""
        self._event_filters.add(event_type)
        logger.debug("Event filter added", event_type=event_type)

    def clear_event_filters(self) -> None:
        self._event_filters.clear()

    def add_subscriber(self, callback: Callable) -> None:
        """Add an event subscriber; sync and async callables are accepted."""
        self._subscribers.append(callback)
        logger.debug("Event subscriber added")

    def get_published_events(
        self,
        event_type: Optional[str] = None,
        email: Optional[str] = None,
        correlation_id: Optional[str] = None,
    ) -> List[BaseDomainEvent]:
        """Get published events with optional filtering.

        Args:
            event_type: Filter by event type name
            email: Filter by account email
            correlation_id: Filter by correlation ID

        Returns:
            List[BaseDomainEvent]: Filtered list of published events
        """
        events = self._published_events

        if event_type:
            events = [e for e in events if type(e).__name__ == event_type]

        if email is not None:
            events = [e for e in events if e.email == email]

        if correlation_id:
            events = [e for e in events if e.correlation_id == correlation_id]

        return events

    def get_events_by_type(self, event_type: type) -> List[BaseDomainEvent]:
        return [e for e in self._published_events if isinstance(e, event_type)]

    def get_event_count(self) -> int:
        return len(self._published_events)

    def clear_events(self) -> None:
        event_count = len(self._published_events)
        self._published_events.clear()
        logger.debug("Published events cleared", event_count=event_count)

    async def _notify_subscribers(self, event: BaseDomainEvent) -> None:
        tasks = []
        for subscriber in self._subscribers:
            if inspect.iscoroutinefunction(subscriber):
                tasks.append(subscriber(event))
            else:
                tasks.append(
                    asyncio.get_running_loop().run_in_executor(None, subscriber, event)
                )

        results = await asyncio.gather(*tasks, return_exceptions=True)
        for result in results:
            if isinstance(result, Exception):
                logger.error("Event subscriber failed", error=str(result))
