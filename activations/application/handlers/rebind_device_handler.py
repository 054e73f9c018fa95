"""
RebindDeviceHandler.

Handler for moving a code to a new device and opening its session.
"""

from activations.application.commands.rebind_device import RebindDeviceCommand
from activations.application.dto.client_dto import LicenseStateDTO, RebindDeviceResponseDTO
from activations.application.handlers.rejections import publish_rejection
from activations.domain.events import DeviceRebound
from core.domain.exceptions import SameFingerprintError
from core.domain.results import Outcome
from core.infrastructure.events import event_bus
from core.metrics import outcome_label, rebinds_total
from devices.domain.fingerprint import FingerprintValidator
from devices.domain.services import DeviceBindingManager
from presence.domain.services import SessionManager


class RebindDeviceHandler:
    """Handler for RebindDeviceCommand."""

    def __init__(self, binding_manager: DeviceBindingManager, sessions: SessionManager):
        """Initialize handler with domain services."""
        self.binding_manager = binding_manager
        self.sessions = sessions

    async def handle(self, command: RebindDeviceCommand) -> Outcome:
        """
        Handle rebind command.

        Args:
            command: RebindDeviceCommand

        Returns:
            Outcome with RebindDeviceResponseDTO
        """
        if FingerprintValidator.compare(command.old_fingerprint, command.new_fingerprint):
            outcome = Outcome.from_exception(SameFingerprintError())
        else:
            outcome = await self.binding_manager.rebind(
                command.code,
                command.old_fingerprint,
                command.new_fingerprint,
                command.device_info,
                command.ip,
            )
        rebinds_total.labels(result=outcome_label(outcome)).inc()
        if not outcome.ok:
            return await publish_rejection(
                "rebind", outcome, command.code, command.new_fingerprint, command.ip
            )

        code, device = outcome.value.code, outcome.value.new_device
        token = self.sessions.issue_token()
        session = (
            await self.sessions.create_session(
                device.id, code.id, code.tenant_id, token, command.ip, command.user_agent
            )
        ).unwrap()
        kicked = 0
        if code.single_online:
            kicked = (await self.sessions.enforce_single_login(code.id, session.id)).unwrap()

        await event_bus.publish(
            DeviceRebound(
                aggregate_id=code.code,
                tenant_id=code.tenant_id,
                code_id=code.id,
                device_id=device.id,
                fingerprint=command.new_fingerprint,
                ip=command.ip,
                old_fingerprint=command.old_fingerprint,
                rebind_count=code.rebind_count,
            )
        )

        return Outcome.success(
            RebindDeviceResponseDTO(
                license=LicenseStateDTO.from_code(code),
                device_id=device.id,
                session_id=session.id,
                token=token,
                rebind_count=code.rebind_count,
                rebinds_remaining=max(0, code.rebind_quota - code.rebind_count),
                sessions_kicked=kicked,
            )
        )
