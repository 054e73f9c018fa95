"""
Device domain entity.

A device is identified by its fingerprint and persists across unbind and
rebind; only its binding to an authorization code changes.
"""

import uuid
from dataclasses import asdict, dataclass, fields, replace
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from core.domain.value_objects import DeviceStatus


@dataclass(frozen=True)
class DeviceInfo:
    """Hardware descriptors reported by a client."""

    platform: str = ""
    os_version: str = ""
    cpu_id: str = ""
    board_serial: str = ""
    disk_serial: str = ""
    mac_address: str = ""
    region: str = ""

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "DeviceInfo":
        """
        Build from a mapping, ignoring unknown keys.

        Args:
            data: Raw descriptor mapping (None yields an empty DeviceInfo)

        Returns:
            DeviceInfo instance
        """
        if isinstance(data, DeviceInfo):
            return data
        data = data or {}
        known = {f.name for f in fields(cls)}
        return cls(
            **{
                key: "" if value is None else str(value)
                for key, value in data.items()
                if key in known
            }
        )

    def merged_over(self, previous: "DeviceInfo") -> "DeviceInfo":
        """Take each non-blank field from self, else keep the previous value."""
        return DeviceInfo(
            **{
                f.name: getattr(self, f.name) or getattr(previous, f.name)
                for f in fields(self)
            }
        )

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


@dataclass(frozen=True)
class Device:
    """
    Device domain entity.

    This is an immutable value object with business logic.
    """

    id: uuid.UUID
    tenant_id: uuid.UUID
    fingerprint: str
    bound_code_id: Optional[uuid.UUID]
    info: DeviceInfo
    status: DeviceStatus
    last_heartbeat: Optional[datetime]
    last_ip: Optional[str]
    created_at: datetime
    updated_at: datetime

    def __post_init__(self):
        """Validate device entity."""
        if not self.fingerprint:
            raise ValueError("Fingerprint is required")

    @property
    def is_active(self) -> bool:
        return self.status == DeviceStatus.ACTIVE

    @property
    def is_blacklisted(self) -> bool:
        return self.status == DeviceStatus.BLACKLISTED

    def is_bound_to(self, code_id: uuid.UUID) -> bool:
        return self.bound_code_id is not None and self.bound_code_id == code_id

    def unbind(self, now: datetime) -> "Device":
        """
        Create a new Device instance without a binding.

        Returns:
            New Device instance with inactive status
        """
        return replace(self, bound_code_id=None, status=DeviceStatus.INACTIVE, updated_at=now)
