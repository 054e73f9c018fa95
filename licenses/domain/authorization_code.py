"""
AuthorizationCode domain entity.

This is the core domain entity representing one license grant.
It contains business logic and is independent of infrastructure.
"""

import uuid
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from django.utils import timezone

from core.domain.value_objects import BillingModel, CardType, CodeStatus
from licenses.domain.billing import Billing, DurationBilling, PointsBilling


@dataclass(frozen=True)
class AuthorizationCode:
    """
    AuthorizationCode domain entity.

    A shared header (quotas, status, timestamps) plus exactly one billing
    variant. This is an immutable value object: every transition returns a
    new instance.
    """

    id: uuid.UUID
    tenant_id: uuid.UUID
    code: str
    billing: Billing
    device_quota: int
    rebind_quota: int
    rebind_count: int
    single_online: bool
    status: CodeStatus
    used_time: Optional[datetime]
    remark: str
    created_at: datetime
    updated_at: datetime

    def __post_init__(self):
        """Validate authorization code entity."""
        if not self.tenant_id:
            raise ValueError("Tenant ID is required")
        if not self.code:
            raise ValueError("Code value is required")
        if not isinstance(self.billing, (DurationBilling, PointsBilling)):
            raise ValueError("Billing must be DurationBilling or PointsBilling")
        if self.device_quota < 1:
            raise ValueError("Device quota must be at least 1")
        if self.rebind_quota < 0 or self.rebind_count < 0:
            raise ValueError("Rebind counters cannot be negative")

    @classmethod
    def create(
        cls,
        tenant_id: uuid.UUID,
        code: str,
        billing: Billing,
        device_quota: int = 1,
        rebind_quota: int = 0,
        single_online: bool = True,
        remark: str = "",
        code_id: Optional[uuid.UUID] = None,
    ) -> "AuthorizationCode":
        """
        Create a new, unused AuthorizationCode entity.

        Args:
            tenant_id: Owning tenant UUID
            code: Opaque code value
            billing: Billing template, normalized for issuance
            device_quota: Maximum number of bound devices
            rebind_quota: Maximum number of rebinds
            single_online: Whether only one session may stay live
            remark: Free-form admin note
            code_id: Optional UUID (generated if not provided)

        Returns:
            AuthorizationCode entity instance
        """
        now = timezone.now()
        return cls(
            id=code_id or uuid.uuid4(),
            tenant_id=tenant_id,
            code=code,
            billing=billing.for_issuance(),
            device_quota=device_quota,
            rebind_quota=rebind_quota,
            rebind_count=0,
            single_online=single_online,
            status=CodeStatus.UNUSED,
            used_time=None,
            remark=remark or "",
            created_at=now,
            updated_at=now,
        )

    @property
    def billing_model(self) -> BillingModel:
        return self.billing.model

    @property
    def is_points(self) -> bool:
        return isinstance(self.billing, PointsBilling)

    @property
    def is_duration(self) -> bool:
        return isinstance(self.billing, DurationBilling)

    @property
    def is_permanent(self) -> bool:
        return self.is_duration and self.billing.card_type == CardType.PERMANENT

    @property
    def expire_time(self) -> Optional[datetime]:
        """Expiry of a duration code (None for points codes)."""
        return self.billing.expire_time if self.is_duration else None

    @property
    def remaining_points(self) -> Optional[int]:
        """Balance of a points code (None for duration codes)."""
        return self.billing.remaining_points if self.is_points else None

    @property
    def can_rebind(self) -> bool:
        return self.rebind_count < self.rebind_quota

    def is_exhausted(self, now: datetime) -> bool:
        """
        Check billing liveness.

        Args:
            now: Current time

        Returns:
            True when the time window has passed or the balance is spent
        """
        if self.is_points:
            return self.billing.is_exhausted
        return self.billing.is_expired_at(now)

    def activate(self, now: datetime) -> "AuthorizationCode":
        """
        First-activation transition: unused -> active.

        Sets ``used_time`` and opens the billing window.

        Args:
            now: Activation time

        Returns:
            New AuthorizationCode instance with active status
        """
        if self.status != CodeStatus.UNUSED:
            raise ValueError("Only an unused code can be activated")
        return replace(
            self,
            status=CodeStatus.ACTIVE,
            used_time=now,
            billing=self.billing.start_window(now),
            updated_at=now,
        )

    def mark_expired(self) -> "AuthorizationCode":
        """
        Create a new AuthorizationCode instance with expired status.

        Returns:
            New AuthorizationCode instance with expired status
        """
        return replace(self, status=CodeStatus.EXPIRED, updated_at=timezone.now())

    def with_billing(self, billing: Billing) -> "AuthorizationCode":
        if billing.model != self.billing_model:
            raise ValueError("Billing model of an existing code cannot change")
        return replace(self, billing=billing, updated_at=timezone.now())

    def with_expire_time(self, expire_time: Optional[datetime]) -> "AuthorizationCode":
        return self.with_billing(replace(self.billing, expire_time=expire_time))

    def reconcile_expiry(self, now: datetime, inclusive: bool = False) -> "AuthorizationCode":
        """
        Align status with the current expiry of a duration code.

        Active codes past their expiry become expired and expired codes
        with a future expiry become active again. Unused and disabled codes
        are left alone.

        Args:
            now: Reference time
            inclusive: Treat an expiry equal to ``now`` as already passed
        """
        if not self.is_duration or self.expire_time is None:
            return self
        lapsed = now >= self.expire_time if inclusive else now > self.expire_time
        if self.status == CodeStatus.ACTIVE and lapsed:
            return replace(self, status=CodeStatus.EXPIRED, updated_at=now)
        if self.status == CodeStatus.EXPIRED and not lapsed:
            return replace(self, status=CodeStatus.ACTIVE, updated_at=now)
        return self
