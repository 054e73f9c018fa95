"""
PointDeductionRecord domain entity.

Append-only audit row of one successful point deduction.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from django.utils import timezone

from core.domain.value_objects import DeductType


@dataclass(frozen=True)
class PointDeductionRecord:
    """Immutable record of an amount deducted and the resulting balance."""

    id: uuid.UUID
    code_id: uuid.UUID
    code: str
    device_id: Optional[uuid.UUID]
    deduct_type: DeductType
    amount: int
    remaining_points: int
    reason: str
    ip: Optional[str]
    created_at: datetime

    def __post_init__(self):
        if self.amount < 1:
            raise ValueError("Deducted amount must be positive")
        if self.remaining_points < 0:
            raise ValueError("Resulting balance cannot be negative")

    @classmethod
    def create(
        cls,
        code_id: uuid.UUID,
        code: str,
        deduct_type: DeductType,
        amount: int,
        remaining_points: int,
        device_id: Optional[uuid.UUID] = None,
        reason: Optional[str] = None,
        ip: Optional[str] = None,
    ) -> "PointDeductionRecord":
        return cls(
            id=uuid.uuid4(),
            code_id=code_id,
            code=code,
            device_id=device_id,
            deduct_type=deduct_type,
            amount=amount,
            remaining_points=remaining_points,
            reason=reason or "",
            ip=ip,
            created_at=timezone.now(),
        )
