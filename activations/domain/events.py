"""
Activation domain events.

Domain events represent something that happened in the client flows.
Each one feeds the client audit trail.
"""
import uuid
from dataclasses import dataclass
from typing import Optional

from core.domain.events import DomainEvent


@dataclass(frozen=True, kw_only=True)
class ClientActionEvent(DomainEvent):
    """
    Base class for client-facing actions.

    ``aggregate_id`` is the authorization code value.
    """

    tenant_id: Optional[uuid.UUID] = None
    code_id: Optional[uuid.UUID] = None
    device_id: Optional[uuid.UUID] = None
    fingerprint: str = ""
    ip: Optional[str] = None

    action = "unknown"
    success = True

    @property
    def message(self) -> str:
        return ""


@dataclass(frozen=True, kw_only=True)
class AuthorizationActivated(ClientActionEvent):
    """Event raised when a device activates a code (first time or repeat)."""

    is_new_activation: bool = True

    @property
    def action(self) -> str:
        return "activate" if self.is_new_activation else "reactivate"


@dataclass(frozen=True, kw_only=True)
class DeviceRebound(ClientActionEvent):
    """Event raised when a code moves from one device to another."""

    old_fingerprint: str = ""
    rebind_count: int = 0

    action = "rebind"

    @property
    def message(self) -> str:
        return f"rebind {self.rebind_count} from {self.old_fingerprint[:12]}"


@dataclass(frozen=True, kw_only=True)
class LicenseVerified(ClientActionEvent):
    """Event raised when a verification succeeds."""

    remaining_seconds: Optional[int] = None

    action = "verify"


@dataclass(frozen=True, kw_only=True)
class PointsDeducted(ClientActionEvent):
    """Event raised when points are deducted."""

    amount: int = 0
    remaining_points: int = 0

    action = "deduct_points"

    @property
    def message(self) -> str:
        return f"-{self.amount}, remaining {self.remaining_points}"


@dataclass(frozen=True, kw_only=True)
class ClientActionRejected(ClientActionEvent):
    """Event raised when a client flow fails with a business reason."""

    rejected_action: str = ""
    reason: str = ""

    success = False

    @property
    def action(self) -> str:
        return self.rejected_action

    @property
    def message(self) -> str:
        return self.reason
