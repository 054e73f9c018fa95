"""
Presence domain services.

SessionManager maintains heartbeat-driven online sessions: creation,
heartbeats, the stale-session sweep and single-login enforcement.
"""

import logging
import secrets
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from django.utils import timezone

from core.config import LicensingConfig
from core.domain.exceptions import (
    SessionExpiredError,
    SessionForcedOfflineError,
    SessionNotFoundError,
)
from core.domain.results import returns_outcome
from core.metrics import (
    heartbeats_total,
    sessions_created_total,
    sessions_forced_offline_total,
    sessions_swept_total,
)
from presence.domain.session import OnlineSession, hash_token
from presence.ports.session_repository import SessionRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OnlineDevice:
    """Read model of a live session for presence listings."""

    session_id: uuid.UUID
    device_id: uuid.UUID
    code_id: uuid.UUID
    tenant_id: uuid.UUID
    ip: Optional[str]
    login_time: datetime
    last_heartbeat: datetime
    online_seconds: int
    heartbeat_age_seconds: int


class SessionManager:
    """Domain service for online sessions."""

    def __init__(
        self,
        session_repository: SessionRepository,
        config: Optional[LicensingConfig] = None,
        clock: Callable[[], datetime] = timezone.now,
    ):
        """Initialize manager with repository, config and a clock."""
        self.session_repository = session_repository
        self.config = config or LicensingConfig()
        self.clock = clock

    @staticmethod
    def issue_token() -> str:
        """Return a fresh opaque session token."""
        return secrets.token_urlsafe(32)

    @returns_outcome
    async def create_session(
        self,
        device_id: uuid.UUID,
        code_id: uuid.UUID,
        tenant_id: uuid.UUID,
        token: str,
        ip: Optional[str] = None,
        user_agent: str = "",
        token_ttl_hours: Optional[int] = None,
    ) -> OnlineSession:
        """
        Open a session, or refresh the existing one for the same device and code.

        Args:
            device_id: Device UUID
            code_id: Authorization code UUID
            tenant_id: Tenant UUID
            token: Raw client token (only its hash is stored)
            ip: Client IP
            user_agent: Client user agent
            token_ttl_hours: Token lifetime (defaults to the configured TTL)

        Returns:
            Outcome with the stored OnlineSession
        """
        ttl = token_ttl_hours if token_ttl_hours is not None else self.config.token_ttl_hours
        now = self.clock()
        existing = await self.session_repository.find_valid_by_pair(device_id, code_id)
        if existing is not None:
            session = existing.refreshed(token, now, ttl, ip=ip, user_agent=user_agent)
            kind = "refreshed"
        else:
            session = OnlineSession.create(
                device_id, code_id, tenant_id, token, now, ttl, ip=ip, user_agent=user_agent
            )
            kind = "new"
        saved = await self.session_repository.save(session)

        sessions_created_total.labels(kind=kind).inc()
        logger.info(
            "Session %s",
            kind,
            extra={"session_id": str(saved.id), "device_id": str(device_id), "code_id": str(code_id)},
        )
        return saved

    async def _live_by_token(self, token: str, now: datetime) -> OnlineSession:
        session = await self.session_repository.find_by_token_hash(hash_token(token or ""))
        if session is None:
            raise SessionNotFoundError()
        if session.force_offline:
            raise SessionForcedOfflineError()
        if session.is_token_expired(now):
            await self.session_repository.invalidate(session.id)
            raise SessionExpiredError()
        return session

    @returns_outcome
    async def update_heartbeat(self, token: str) -> OnlineSession:
        """
        Record a heartbeat for the session holding a token.

        One lookup and one write. A discovered token expiry invalidates the
        session.

        Args:
            token: Raw client token

        Returns:
            Outcome with the session (heartbeat bumped)
        """
        now = self.clock()
        try:
            session = await self._live_by_token(token, now)
        except (SessionNotFoundError, SessionForcedOfflineError, SessionExpiredError) as exc:
            heartbeats_total.labels(result=exc.code.lower()).inc()
            raise
        await self.session_repository.touch(session.id, now)

        heartbeats_total.labels(result="success").inc()
        logger.debug("Heartbeat", extra={"session_id": str(session.id)})
        return replace(session, last_heartbeat=now)

    @returns_outcome
    async def verify_session(self, token: str) -> OnlineSession:
        """
        Check that a token belongs to a live session.

        Args:
            token: Raw client token

        Returns:
            Outcome with the live session
        """
        return await self._live_by_token(token, self.clock())

    @returns_outcome
    async def check_timeout(self) -> int:
        """
        Invalidate sessions whose last heartbeat is older than the timeout.

        Forced-offline and already invalid sessions are left alone.

        Returns:
            Outcome with the number of sessions invalidated
        """
        cutoff = self.clock() - timedelta(seconds=self.config.heartbeat_timeout_seconds)
        count = await self.session_repository.invalidate_stale(cutoff)
        if count:
            sessions_swept_total.inc(count)
            logger.info("Stale sessions invalidated", extra={"count": count})
        else:
            logger.debug("No stale sessions")
        return count

    @returns_outcome
    async def count_timed_out(self) -> int:
        """Count the sessions the next ``check_timeout`` would invalidate."""
        cutoff = self.clock() - timedelta(seconds=self.config.heartbeat_timeout_seconds)
        return await self.session_repository.count_stale(cutoff)

    @returns_outcome
    async def force_offline(self, session_id: uuid.UUID) -> bool:
        """
        Kick a session offline. Repeating the call is harmless.

        Args:
            session_id: Session UUID

        Returns:
            Outcome with True, or a not-found failure
        """
        if not await self.session_repository.mark_force_offline(session_id):
            raise SessionNotFoundError("Session not found")
        sessions_forced_offline_total.labels(reason="admin").inc()
        logger.info("Session forced offline", extra={"session_id": str(session_id)})
        return True

    @returns_outcome
    async def enforce_single_login(self, code_id: uuid.UUID, current_session_id: uuid.UUID) -> int:
        """
        Force offline every other valid session of a code in one update.

        Kicked devices find out on their next heartbeat.

        Args:
            code_id: Authorization code UUID
            current_session_id: Session to keep

        Returns:
            Outcome with the number of sessions forced offline
        """
        count = await self.session_repository.force_offline_others(code_id, current_session_id)
        if count:
            sessions_forced_offline_total.labels(reason="single_login").inc(count)
            logger.info(
                "Single login enforced",
                extra={"code_id": str(code_id), "kept_session_id": str(current_session_id), "count": count},
            )
        return count

    @returns_outcome
    async def list_online(
        self,
        tenant_id: Optional[uuid.UUID] = None,
        code_id: Optional[uuid.UUID] = None,
    ) -> List[OnlineDevice]:
        """
        List live sessions with online duration and heartbeat age.

        Args:
            tenant_id: Optional tenant filter
            code_id: Optional code filter

        Returns:
            Outcome with OnlineDevice rows
        """
        now = self.clock()
        sessions = await self.session_repository.list_live(now, tenant_id=tenant_id, code_id=code_id)
        return [
            OnlineDevice(
                session_id=session.id,
                device_id=session.device_id,
                code_id=session.code_id,
                tenant_id=session.tenant_id,
                ip=session.ip,
                login_time=session.login_time,
                last_heartbeat=session.last_heartbeat,
                online_seconds=session.online_seconds(now),
                heartbeat_age_seconds=session.heartbeat_age_seconds(now),
            )
            for session in sessions
        ]
