"""
HeartbeatHandler.
"""

from activations.application.commands.heartbeat import HeartbeatCommand
from activations.application.dto.client_dto import HeartbeatResponseDTO
from core.domain.results import Outcome
from presence.domain.services import SessionManager


class HeartbeatHandler:
    """Handler for HeartbeatCommand."""

    def __init__(self, sessions: SessionManager):
        """Initialize handler with the session manager."""
        self.sessions = sessions

    async def handle(self, command: HeartbeatCommand) -> Outcome:
        """
        Handle heartbeat command.

        Args:
            command: HeartbeatCommand

        Returns:
            Outcome with HeartbeatResponseDTO
        """
        outcome = await self.sessions.update_heartbeat(command.token)
        if not outcome.ok:
            return outcome
        session = outcome.value
        return Outcome.success(
            HeartbeatResponseDTO(
                session_id=session.id,
                last_heartbeat=session.last_heartbeat,
                token_expire_time=session.token_expire_time,
            )
        )
