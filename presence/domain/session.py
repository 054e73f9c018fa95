"""
Online session domain entity.
"""

import hashlib
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Optional


def hash_token(token: str) -> str:
    """Return the SHA-256 hex digest stored in place of a raw token."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class OnlineSession:
    """
    A heartbeat-maintained record of one device being online for one code.

    Only the hash of the client token is kept.
    """

    id: uuid.UUID
    device_id: uuid.UUID
    tenant_id: uuid.UUID
    code_id: uuid.UUID
    token_hash: str
    ip: Optional[str]
    user_agent: str
    is_valid: bool
    force_offline: bool
    login_time: datetime
    last_heartbeat: datetime
    token_expire_time: Optional[datetime]

    @classmethod
    def create(
        cls,
        device_id: uuid.UUID,
        code_id: uuid.UUID,
        tenant_id: uuid.UUID,
        token: str,
        now: datetime,
        token_ttl_hours: Optional[int] = None,
        ip: Optional[str] = None,
        user_agent: str = "",
    ) -> "OnlineSession":
        """
        Factory method to open a new session.

        Args:
            device_id: Device UUID
            code_id: Authorization code UUID
            tenant_id: Tenant UUID
            token: Raw client token (hashed before storage)
            now: Login time
            token_ttl_hours: Token lifetime (None for no expiry)
            ip: Client IP
            user_agent: Client user agent

        Returns:
            New OnlineSession instance
        """
        return cls(
            id=uuid.uuid4(),
            device_id=device_id,
            tenant_id=tenant_id,
            code_id=code_id,
            token_hash=hash_token(token),
            ip=ip,
            user_agent=user_agent or "",
            is_valid=True,
            force_offline=False,
            login_time=now,
            last_heartbeat=now,
            token_expire_time=now + timedelta(hours=token_ttl_hours) if token_ttl_hours else None,
        )

    def is_token_expired(self, now: datetime) -> bool:
        return self.token_expire_time is not None and now > self.token_expire_time

    def is_live(self, now: datetime) -> bool:
        """Valid, not forced offline and with an unexpired token."""
        return self.is_valid and not self.force_offline and not self.is_token_expired(now)

    def refreshed(
        self,
        token: str,
        now: datetime,
        token_ttl_hours: Optional[int] = None,
        ip: Optional[str] = None,
        user_agent: str = "",
    ) -> "OnlineSession":
        """
        Create a new OnlineSession instance carrying a fresh token.

        Returns:
            Session with new hash, reset timestamps and the offline flag cleared
        """
        return replace(
            self,
            token_hash=hash_token(token),
            ip=ip,
            user_agent=user_agent or "",
            is_valid=True,
            force_offline=False,
            login_time=now,
            last_heartbeat=now,
            token_expire_time=now + timedelta(hours=token_ttl_hours) if token_ttl_hours else None,
        )

    def online_seconds(self, now: datetime) -> int:
        return max(0, int((now - self.login_time).total_seconds()))

    def heartbeat_age_seconds(self, now: datetime) -> int:
        return max(0, int((now - self.last_heartbeat).total_seconds()))
