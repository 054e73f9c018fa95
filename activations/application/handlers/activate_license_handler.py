"""
ActivateLicenseHandler.

Handler for a client activation: activate, open a session and enforce
single login.
"""

from activations.application.commands.activate_license import ActivateLicenseCommand
from activations.application.dto.client_dto import ActivateLicenseResponseDTO, LicenseStateDTO
from activations.application.handlers.rejections import publish_rejection
from activations.domain.events import AuthorizationActivated
from activations.domain.services import ActivationEngine
from core.domain.results import Outcome
from core.infrastructure.events import event_bus
from core.metrics import activations_total, outcome_label
from presence.domain.services import SessionManager


class ActivateLicenseHandler:
    """Handler for ActivateLicenseCommand."""

    def __init__(self, engine: ActivationEngine, sessions: SessionManager):
        """Initialize handler with domain services."""
        self.engine = engine
        self.sessions = sessions

    async def handle(self, command: ActivateLicenseCommand) -> Outcome:
        """
        Handle activate license command.

        A session is opened on every successful activation, repeat ones
        included. When the code allows a single online device, every other
        session of the code is forced offline.

        Args:
            command: ActivateLicenseCommand

        Returns:
            Outcome with ActivateLicenseResponseDTO
        """
        outcome = await self.engine.activate(
            command.code, command.fingerprint, command.device_info, command.ip
        )
        activations_total.labels(result=outcome_label(outcome)).inc()
        if not outcome.ok:
            return await publish_rejection(
                "activate", outcome, command.code, command.fingerprint, command.ip
            )

        result = outcome.value
        code, device = result.code, result.device
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
            AuthorizationActivated(
                aggregate_id=code.code,
                tenant_id=code.tenant_id,
                code_id=code.id,
                device_id=device.id,
                fingerprint=command.fingerprint,
                ip=command.ip,
                is_new_activation=result.is_new_activation,
            )
        )

        return Outcome.success(
            ActivateLicenseResponseDTO(
                license=LicenseStateDTO.from_code(code),
                device_id=device.id,
                session_id=session.id,
                token=token,
                is_new_activation=result.is_new_activation,
                sessions_kicked=kicked,
            )
        )
