"""
PointDeductionRecord repository port (interface).
"""
import uuid
from abc import ABC, abstractmethod
from typing import List

from licenses.domain.point_deduction import PointDeductionRecord


class PointDeductionRepository(ABC):
    """Append-only store of point deduction records."""

    @abstractmethod
    async def append(self, record: PointDeductionRecord) -> PointDeductionRecord:
        """
        Append a deduction record.

        Args:
            record: PointDeductionRecord entity

        Returns:
            Stored record
        """
        pass

    @abstractmethod
    async def find_by_code(self, code_id: uuid.UUID) -> List[PointDeductionRecord]:
        """
        List the deductions of a code, newest first.

        Args:
            code_id: Code UUID

        Returns:
            List of PointDeductionRecord entities
        """
        pass
