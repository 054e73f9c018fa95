"""
HeartbeatCommand.
"""

from dataclasses import dataclass


@dataclass
class HeartbeatCommand:
    """Command carrying the session token of a client heartbeat."""

    token: str
