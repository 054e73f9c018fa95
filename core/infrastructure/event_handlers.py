"""
Event handlers for domain events.

These handlers process domain events for side effects such as the
client audit trail.
"""

import logging
from typing import Optional

from activations.domain.events import (
    AuthorizationActivated,
    ClientActionEvent,
    ClientActionRejected,
    DeviceRebound,
    LicenseVerified,
    PointsDeducted,
)
from core.domain.events import DomainEvent, EventHandler
from core.infrastructure.repositories.django_auth_log_repository import DjangoAuthLogRepository

logger = logging.getLogger(__name__)

CLIENT_EVENTS = (
    AuthorizationActivated,
    DeviceRebound,
    LicenseVerified,
    PointsDeducted,
    ClientActionRejected,
)


class AuthLogEventHandler(EventHandler):
    """
    Event handler for the client audit trail.

    Writes one AuthLog row per client action event.
    """

    def __init__(self, repository: Optional[DjangoAuthLogRepository] = None):
        """Initialize handler with the audit log repository."""
        self.repository = repository or DjangoAuthLogRepository()

    async def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event for audit logging.

        Args:
            event: Domain event to log
        """
        if not isinstance(event, ClientActionEvent):
            return
        await self.repository.append(
            action=event.action,
            success=event.success,
            code=event.aggregate_id,
            message=event.message,
            tenant_id=event.tenant_id,
            code_id=event.code_id,
            device_id=event.device_id,
            fingerprint=event.fingerprint,
            ip=event.ip,
        )
        logger.debug("Audit log: %s - %s", event.action, event.aggregate_id, extra=event.to_dict())


auth_log_handler = AuthLogEventHandler()


def register_event_handlers():
    """Register all event handlers with the event bus. Safe to call repeatedly."""
    from core.infrastructure.events import event_bus

    for event_type in CLIENT_EVENTS:
        event_bus.subscribe(event_type, auth_log_handler)

    logger.info("Event handlers registered")
