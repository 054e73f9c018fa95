"""
Celery tasks for background processing.

The heartbeat sweep runs on the beat schedule defined in settings.
"""
import logging

from asgiref.sync import async_to_sync
from AuthorizationCodeService.celery import app

from core.config import LicensingConfig
from presence.domain.services import SessionManager
from presence.infrastructure.repositories.django_session_repository import (
    DjangoSessionRepository,
)

logger = logging.getLogger(__name__)


@app.task(ignore_result=True)
def sweep_stale_sessions() -> int:
    """
    Invalidate sessions that stopped sending heartbeats.

    Returns:
        Number of sessions invalidated
    """
    sessions = SessionManager(DjangoSessionRepository(), config=LicensingConfig.from_settings())
    count = async_to_sync(sessions.check_timeout)().unwrap()
    logger.debug("Session sweep finished", extra={"count": count})
    return count
