"""
Billing variants of an authorization code.

A code is billed either by duration or by consumable points, never both.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional, Union

from core.domain.exceptions import InvalidBillingConfigError
from core.domain.value_objects import ActivateMode, BillingModel, CardType, DeductType
from licenses.domain.time_units import compute_expire_time


@dataclass(frozen=True)
class DurationBilling:
    """Time-window billing."""

    card_type: CardType = CardType.DAY
    duration: int = 1
    activate_mode: ActivateMode = ActivateMode.FIRST_USE
    start_time: Optional[datetime] = None
    expire_time: Optional[datetime] = None

    model = BillingModel.DURATION

    def __post_init__(self):
        """Validate duration billing."""
        if self.duration < 1:
            raise InvalidBillingConfigError("Duration must be at least 1")
        if self.start_time and self.expire_time and self.expire_time < self.start_time:
            raise InvalidBillingConfigError("Expire time cannot precede start time")

    @property
    def is_permanent(self) -> bool:
        return self.card_type == CardType.PERMANENT

    def for_issuance(self) -> "DurationBilling":
        """
        Billing as stored on a freshly generated code.

        Scheduled codes with a start time get their expiry precomputed;
        first-use codes carry no window until activation.
        """
        if self.activate_mode == ActivateMode.SCHEDULED and self.start_time:
            return replace(
                self,
                expire_time=compute_expire_time(self.start_time, self.card_type, self.duration),
            )
        return replace(self, start_time=None, expire_time=None)

    def start_window(self, now: datetime) -> "DurationBilling":
        """
        Window opened by a first activation at ``now``.

        A scheduled window that is already fixed is kept. A scheduled code
        without one degrades to first-use semantics.
        """
        if self.activate_mode == ActivateMode.SCHEDULED and self.start_time:
            if self.expire_time:
                return self
            return replace(
                self,
                expire_time=compute_expire_time(self.start_time, self.card_type, self.duration),
            )
        return replace(
            self,
            start_time=now,
            expire_time=compute_expire_time(now, self.card_type, self.duration),
        )

    def is_expired_at(self, now: datetime) -> bool:
        return self.expire_time is not None and now > self.expire_time


@dataclass(frozen=True)
class PointsBilling:
    """Consumable-points billing."""

    total_points: int = 0
    remaining_points: int = 0
    deduct_type: DeductType = DeductType.PER_USE
    deduct_amount: int = 1

    model = BillingModel.POINTS

    def __post_init__(self):
        """Validate points billing."""
        if self.total_points < 0:
            raise InvalidBillingConfigError("Total points cannot be negative")
        if not 0 <= self.remaining_points <= self.total_points:
            raise InvalidBillingConfigError(
                "Remaining points must be between 0 and total points"
            )
        if self.deduct_amount < 1:
            raise InvalidBillingConfigError("Deduct amount must be at least 1")

    @classmethod
    def create(
        cls,
        total_points: int,
        deduct_type: DeductType = DeductType.PER_USE,
        deduct_amount: int = 1,
    ) -> "PointsBilling":
        """
        Create a points billing with a full balance.

        Args:
            total_points: Points granted by the code
            deduct_type: Charging scheme
            deduct_amount: Default charge per deduction

        Returns:
            PointsBilling instance
        """
        return cls(
            total_points=total_points,
            remaining_points=total_points,
            deduct_type=deduct_type,
            deduct_amount=deduct_amount,
        )

    def for_issuance(self) -> "PointsBilling":
        return replace(self, remaining_points=self.total_points)

    def start_window(self, now: datetime) -> "PointsBilling":
        """Refill an empty balance on first activation."""
        if self.remaining_points == 0 and self.total_points > 0:
            return replace(self, remaining_points=self.total_points)
        return self

    def with_remaining(self, remaining_points: int) -> "PointsBilling":
        """Copy with the balance clamped to [0, total_points]."""
        clamped = max(0, min(remaining_points, self.total_points))
        return replace(self, remaining_points=clamped)

    @property
    def is_exhausted(self) -> bool:
        return self.remaining_points <= 0


Billing = Union[DurationBilling, PointsBilling]
