"""
Domain event contracts.

Client flows publish events after a state change has been committed;
subscribers only produce side effects (the audit trail) and never decide
the outcome of the flow that raised the event.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Type
from uuid import UUID, uuid4

from django.utils import timezone


@dataclass(frozen=True, kw_only=True)
class DomainEvent(ABC):
    """
    Immutable record of something that happened.

    ``aggregate_id`` identifies what the event is about; client events use
    the authorization code value so rejected requests for unknown codes
    can still be traced.
    """

    aggregate_id: str
    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=timezone.now)

    @property
    def event_type(self) -> str:
        return self.__class__.__name__

    def to_dict(self) -> Dict[str, Any]:
        """Identity fields, suitable as structured logging context."""
        return {
            "event_id": str(self.event_id),
            "event_type": self.event_type,
            "aggregate_id": self.aggregate_id,
            "occurred_at": self.occurred_at.isoformat(),
        }


class EventHandler(ABC):
    """Subscriber side of the event bus."""

    @abstractmethod
    async def handle(self, event: DomainEvent) -> None:
        """
        Handle a domain event.

        Args:
            event: The published event
        """
        pass


class EventBus(ABC):
    """Publish/subscribe port keyed by concrete event class."""

    @abstractmethod
    async def publish(self, event: DomainEvent) -> None:
        """
        Deliver an event to every handler subscribed to its class.

        Args:
            event: The domain event to publish
        """
        pass

    @abstractmethod
    def subscribe(self, event_type: Type[DomainEvent], handler: EventHandler) -> None:
        """
        Subscribe a handler to an event class. Subscribing twice is a no-op.

        Args:
            event_type: Concrete event class
            handler: Handler to call on publish
        """
        pass

    @abstractmethod
    def handlers_for(self, event_type: Type[DomainEvent]) -> List[EventHandler]:
        """Return the handlers subscribed to an event class."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Drop every subscription."""
        pass
