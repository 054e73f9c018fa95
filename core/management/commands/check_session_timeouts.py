"""
Django management command to invalidate timed-out sessions.

Same sweep as the periodic Celery task, for cron-driven deployments.
"""

import logging

from asgiref.sync import async_to_sync
from django.core.management.base import BaseCommand

from core.config import LicensingConfig
from presence.domain.services import SessionManager
from presence.infrastructure.repositories.django_session_repository import (
    DjangoSessionRepository,
)

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Command to invalidate sessions without a recent heartbeat."""

    help = "Invalidate online sessions whose heartbeat timed out"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Dry run mode - only count the sessions that would be invalidated",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        config = LicensingConfig.from_settings()
        sessions = SessionManager(DjangoSessionRepository(), config=config)

        if options["dry_run"]:
            count = async_to_sync(sessions.count_timed_out)().unwrap()
            # pylint: disable=no-member
            self.stdout.write(self.style.WARNING("DRY RUN - No changes will be made"))
            self.stdout.write(
                f"Found {count} session(s) without a heartbeat in the last "
                f"{config.heartbeat_timeout_seconds}s"
            )
            return

        count = async_to_sync(sessions.check_timeout)().unwrap()
        self.stdout.write(
            # pylint: disable=no-member
            self.style.SUCCESS(f"Invalidated {count} timed-out session(s)")
        )
