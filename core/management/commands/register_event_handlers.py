"""
Django management command to register event handlers.

Handlers are registered at application startup as well; this command is
useful for checking the wiring from a shell.
"""
import logging

from django.core.management.base import BaseCommand

from core.infrastructure.event_handlers import CLIENT_EVENTS, register_event_handlers
from core.infrastructure.events import event_bus

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Command to register event handlers."""

    help = "Register event handlers with the event bus"

    def handle(self, *args, **options):
        """Execute the command."""
        register_event_handlers()
        for event_type in CLIENT_EVENTS:
            handlers = event_bus.handlers_for(event_type)
            self.stdout.write(f"  {event_type.__name__}: {len(handlers)} handler(s)")
        self.stdout.write(
            # pylint: disable=no-member
            self.style.SUCCESS("Event handlers registered successfully")
        )
