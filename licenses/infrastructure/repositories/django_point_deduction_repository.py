"""
Django implementation of PointDeductionRepository port.
"""
import uuid
from typing import List

from asgiref.sync import sync_to_async

from core.domain.value_objects import DeductType
from licenses.domain.point_deduction import PointDeductionRecord
from licenses.infrastructure.models import PointDeductionRecord as PointDeductionRecordModel
from licenses.ports.point_deduction_repository import PointDeductionRepository


class DjangoPointDeductionRepository(PointDeductionRepository):
    """Django ORM implementation of PointDeductionRepository."""

    def _to_domain(self, model: PointDeductionRecordModel) -> PointDeductionRecord:
        return PointDeductionRecord(
            id=model.id,
            code_id=model.authorization_code_id,
            code=model.code,
            device_id=model.device_id,
            deduct_type=DeductType(model.deduct_type),
            amount=model.amount,
            remaining_points=model.remaining_points,
            reason=model.reason,
            ip=model.ip,
            created_at=model.created_at,
        )

    @sync_to_async
    def append(self, record: PointDeductionRecord) -> PointDeductionRecord:
        """
        Append a deduction record.

        Args:
            record: PointDeductionRecord entity

        Returns:
            Stored record
        """
        # pylint: disable=no-member
        model = PointDeductionRecordModel.objects.create(
            id=record.id,
            authorization_code_id=record.code_id,
            code=record.code,
            device_id=record.device_id,
            deduct_type=record.deduct_type.value,
            amount=record.amount,
            remaining_points=record.remaining_points,
            reason=record.reason,
            ip=record.ip,
        )
        return self._to_domain(model)

    @sync_to_async
    def find_by_code(self, code_id: uuid.UUID) -> List[PointDeductionRecord]:
        # pylint: disable=no-member
        qs = PointDeductionRecordModel.objects.filter(authorization_code_id=code_id).order_by(
            "-created_at"
        )
        return [self._to_domain(model) for model in qs]
