"""
RebindDeviceCommand.

Command to move an authorization code from one device to another.
"""

from dataclasses import dataclass
from typing import Dict, Optional


@dataclass
class RebindDeviceCommand:
    """Command to replace a bound fingerprint."""

    code: str
    old_fingerprint: str
    new_fingerprint: str
    device_info: Optional[Dict] = None
    ip: Optional[str] = None
    user_agent: str = ""
