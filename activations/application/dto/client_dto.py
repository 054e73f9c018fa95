"""
Client flow DTOs.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from licenses.domain.authorization_code import AuthorizationCode


@dataclass
class LicenseStateDTO:
    """Billing state reported back to a client."""

    code: str
    status: str
    billing_model: str
    expire_time: Optional[datetime] = None
    remaining_points: Optional[int] = None
    total_points: Optional[int] = None

    @classmethod
    def from_code(cls, code: AuthorizationCode) -> "LicenseStateDTO":
        return cls(
            code=code.code,
            status=code.status.value,
            billing_model=code.billing_model.value,
            expire_time=code.expire_time,
            remaining_points=code.remaining_points,
            total_points=code.billing.total_points if code.is_points else None,
        )


@dataclass
class ActivateLicenseResponseDTO:
    """DTO for a successful activation."""

    license: LicenseStateDTO
    device_id: uuid.UUID
    session_id: uuid.UUID
    token: str
    is_new_activation: bool
    sessions_kicked: int = 0


@dataclass
class RebindDeviceResponseDTO:
    """DTO for a successful rebind."""

    license: LicenseStateDTO
    device_id: uuid.UUID
    session_id: uuid.UUID
    token: str
    rebind_count: int
    rebinds_remaining: int
    sessions_kicked: int = 0


@dataclass
class VerifyLicenseResponseDTO:
    """DTO for a successful verification."""

    license: LicenseStateDTO
    device_id: uuid.UUID
    remaining_seconds: Optional[int] = None


@dataclass
class DeductPointsResponseDTO:
    """DTO for a successful deduction."""

    license: LicenseStateDTO
    amount: int
    remaining_points: int


@dataclass
class HeartbeatResponseDTO:
    """DTO for an accepted heartbeat."""

    session_id: uuid.UUID
    last_heartbeat: datetime
    token_expire_time: Optional[datetime] = None
