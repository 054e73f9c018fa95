"""
Rejection reporting shared by the client flow handlers.
"""

from typing import Optional

from activations.domain.events import ClientActionRejected
from core.domain.results import Outcome
from core.infrastructure.events import event_bus


async def publish_rejection(
    action: str,
    outcome: Outcome,
    code: str,
    fingerprint: str = "",
    ip: Optional[str] = None,
) -> Outcome:
    """
    Publish a ClientActionRejected event for a failed outcome.

    Returns:
        The same outcome, so handlers can ``return await publish_rejection(...)``
    """
    await event_bus.publish(
        ClientActionRejected(
            aggregate_id=code or "",
            fingerprint=fingerprint or "",
            ip=ip,
            rejected_action=action,
            reason=outcome.code or "",
        )
    )
    return outcome
