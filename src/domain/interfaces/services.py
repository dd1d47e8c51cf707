"""Cross-cutting service interfaces used by the recovery flow."""

from abc import ABC, abstractmethod
from typing import List

from src.domain.events.password_recovery_events import BaseDomainEvent


class IEventPublisher(ABC):
    """Interface for domain event publishing."""

    @abstractmethod
    async def publish(self, event: BaseDomainEvent) -> None:
        """Publish a domain event.

        Args:
            event: Domain event to publish
        """
        pass

    @abstractmethod
    async def publish_many(self, events: List[BaseDomainEvent]) -> None:
        """Publish multiple domain events.

        Args:
            events: List of domain events to publish
        """
        pass


class INavigator(ABC):
    """Client-side navigation seen from the flow.

    The flow decides where the user goes next; the navigator performs it
    (a browser router, a test recorder, an HTTP response).
    """

    @abstractmethod
    def navigate(self, target: str) -> None:
        """Move the client to ``target``, a path with an optional query string."""
        pass
