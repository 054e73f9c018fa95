"""
DeductPointsHandler.

Handler for a client point deduction: verify first, then deduct on behalf
of the verified device.
"""

from activations.application.commands.deduct_points import DeductPointsCommand
from activations.application.dto.client_dto import DeductPointsResponseDTO, LicenseStateDTO
from activations.application.handlers.rejections import publish_rejection
from activations.domain.events import PointsDeducted
from activations.domain.services import ActivationEngine
from core.domain.exceptions import NotPointsCodeError
from core.domain.results import Outcome
from core.infrastructure.events import event_bus
from core.metrics import outcome_label, point_deductions_total, points_deducted_total


class DeductPointsHandler:
    """Handler for DeductPointsCommand."""

    def __init__(self, engine: ActivationEngine):
        """Initialize handler with the activation engine."""
        self.engine = engine

    async def handle(self, command: DeductPointsCommand) -> Outcome:
        """
        Handle deduct points command.

        Args:
            command: DeductPointsCommand

        Returns:
            Outcome with DeductPointsResponseDTO
        """
        outcome = await self.engine.verify(command.code, command.fingerprint, command.ip)
        if outcome.ok and not outcome.value.code.is_points:
            outcome = Outcome.from_exception(NotPointsCodeError())
        if outcome.ok:
            verified = outcome.value
            outcome = await self.engine.deduct_points(
                verified.code.id,
                amount=command.amount,
                reason=command.reason,
                device_id=verified.device.id,
                ip=command.ip,
            )
        point_deductions_total.labels(result=outcome_label(outcome)).inc()
        if not outcome.ok:
            return await publish_rejection(
                "deduct_points", outcome, command.code, command.fingerprint, command.ip
            )

        result = outcome.value
        points_deducted_total.inc(result.amount)
        await event_bus.publish(
            PointsDeducted(
                aggregate_id=result.code.code,
                tenant_id=result.code.tenant_id,
                code_id=result.code.id,
                device_id=result.record.device_id,
                fingerprint=command.fingerprint,
                ip=command.ip,
                amount=result.amount,
                remaining_points=result.remaining_points,
            )
        )
        return Outcome.success(
            DeductPointsResponseDTO(
                license=LicenseStateDTO.from_code(result.code),
                amount=result.amount,
                remaining_points=result.remaining_points,
            )
        )
