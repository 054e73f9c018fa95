"""
Blacklist entry domain entity.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from django.utils import timezone

DEFAULT_DEVICE_REASON = "Device is blacklisted"
DEFAULT_IP_REASON = "IP is blacklisted"


class BlacklistKind(Enum):
    """What a blacklist entry matches on."""

    DEVICE = "device"
    IP = "ip"

    def __str__(self) -> str:
        return self.value

    @property
    def default_reason(self) -> str:
        return DEFAULT_DEVICE_REASON if self == BlacklistKind.DEVICE else DEFAULT_IP_REASON


@dataclass(frozen=True)
class BlacklistEntry:
    """
    A ban on a fingerprint or an IP.

    ``tenant_id`` of None makes the entry global.
    """

    id: uuid.UUID
    kind: BlacklistKind
    value: str
    tenant_id: Optional[uuid.UUID]
    reason: str
    created_at: datetime

    def __post_init__(self):
        if not self.value or not self.value.strip():
            raise ValueError("Blacklisted value cannot be empty")

    @classmethod
    def create(
        cls,
        kind: BlacklistKind,
        value: str,
        reason: Optional[str] = None,
        tenant_id: Optional[uuid.UUID] = None,
    ) -> "BlacklistEntry":
        return cls(
            id=uuid.uuid4(),
            kind=kind,
            value=value.strip(),
            tenant_id=tenant_id,
            reason=(reason or "").strip(),
            created_at=timezone.now(),
        )

    @property
    def is_global(self) -> bool:
        return self.tenant_id is None

    @property
    def effective_reason(self) -> str:
        """Stored reason, or the default message when it is blank."""
        return self.reason or self.kind.default_reason


@dataclass(frozen=True)
class BlacklistCheck:
    """Result of a blacklist lookup."""

    blacklisted: bool
    reason: Optional[str] = None

    @classmethod
    def clear(cls) -> "BlacklistCheck":
        return cls(blacklisted=False)

    @classmethod
    def hit(cls, entry: BlacklistEntry) -> "BlacklistCheck":
        return cls(blacklisted=True, reason=entry.effective_reason)
