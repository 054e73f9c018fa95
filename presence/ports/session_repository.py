"""
Online session repository port (interface).

This defines the contract for session persistence operations.
Implementations are in the infrastructure layer.
"""
import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from presence.domain.session import OnlineSession


class SessionRepository(ABC):
    """
    Abstract repository for OnlineSession entities.

    Bulk operations are single conditional UPDATE statements and return the
    number of affected rows.
    """

    @abstractmethod
    async def find_by_id(self, session_id: uuid.UUID) -> Optional[OnlineSession]:
        pass

    @abstractmethod
    async def find_valid_by_pair(
        self, device_id: uuid.UUID, code_id: uuid.UUID
    ) -> Optional[OnlineSession]:
        """
        Find the newest valid, not forced-offline session for a device and code.

        Args:
            device_id: Device UUID
            code_id: Authorization code UUID

        Returns:
            OnlineSession or None
        """
        pass

    @abstractmethod
    async def find_by_token_hash(self, token_hash: str) -> Optional[OnlineSession]:
        """
        Find the session holding a token hash that is valid or forced offline.

        Sessions invalidated by timeout or token expiry are not returned.

        Args:
            token_hash: SHA-256 hex digest of the token

        Returns:
            OnlineSession or None
        """
        pass

    @abstractmethod
    async def save(self, session: OnlineSession) -> OnlineSession:
        """Insert or update a session."""
        pass

    @abstractmethod
    async def touch(self, session_id: uuid.UUID, now: datetime) -> None:
        """Set last_heartbeat of one session."""
        pass

    @abstractmethod
    async def invalidate(self, session_id: uuid.UUID) -> None:
        """Mark one session invalid."""
        pass

    @abstractmethod
    async def mark_force_offline(self, session_id: uuid.UUID) -> bool:
        """
        Force one session offline.

        Returns:
            True if the session exists
        """
        pass

    @abstractmethod
    async def invalidate_stale(self, cutoff: datetime) -> int:
        """
        Invalidate valid, not forced-offline sessions with a heartbeat before cutoff.

        Returns:
            Number of invalidated sessions
        """
        pass

    @abstractmethod
    async def count_stale(self, cutoff: datetime) -> int:
        """Count the sessions ``invalidate_stale`` would touch."""
        pass

    @abstractmethod
    async def force_offline_others(self, code_id: uuid.UUID, keep_session_id: uuid.UUID) -> int:
        """
        Force offline every other valid session of a code.

        Returns:
            Number of sessions forced offline
        """
        pass

    @abstractmethod
    async def list_live(
        self,
        now: datetime,
        tenant_id: Optional[uuid.UUID] = None,
        code_id: Optional[uuid.UUID] = None,
    ) -> List[OnlineSession]:
        """List live sessions, most recent heartbeat first."""
        pass
