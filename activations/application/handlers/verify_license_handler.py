"""
VerifyLicenseHandler.
"""

from activations.application.commands.verify_license import VerifyLicenseCommand
from activations.application.dto.client_dto import LicenseStateDTO, VerifyLicenseResponseDTO
from activations.application.handlers.rejections import publish_rejection
from activations.domain.events import LicenseVerified
from activations.domain.services import ActivationEngine
from core.domain.results import Outcome
from core.infrastructure.events import event_bus
from core.metrics import outcome_label, verifications_total


class VerifyLicenseHandler:
    """Handler for VerifyLicenseCommand."""

    def __init__(self, engine: ActivationEngine):
        """Initialize handler with the activation engine."""
        self.engine = engine

    async def handle(self, command: VerifyLicenseCommand) -> Outcome:
        """
        Handle verify command.

        Args:
            command: VerifyLicenseCommand

        Returns:
            Outcome with VerifyLicenseResponseDTO
        """
        outcome = await self.engine.verify(command.code, command.fingerprint, command.ip)
        verifications_total.labels(result=outcome_label(outcome)).inc()
        if not outcome.ok:
            return await publish_rejection(
                "verify", outcome, command.code, command.fingerprint, command.ip
            )

        result = outcome.value
        await event_bus.publish(
            LicenseVerified(
                aggregate_id=result.code.code,
                tenant_id=result.code.tenant_id,
                code_id=result.code.id,
                device_id=result.device.id,
                fingerprint=command.fingerprint,
                ip=command.ip,
                remaining_seconds=result.remaining_seconds,
            )
        )
        return Outcome.success(
            VerifyLicenseResponseDTO(
                license=LicenseStateDTO.from_code(result.code),
                device_id=result.device.id,
                remaining_seconds=result.remaining_seconds,
            )
        )
