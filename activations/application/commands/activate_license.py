"""
ActivateLicenseCommand.

Command to activate an authorization code on a device.
"""

from dataclasses import dataclass
from typing import Dict, Optional


@dataclass
class ActivateLicenseCommand:
    """Command to activate a code for a fingerprint."""

    code: str
    fingerprint: str
    device_info: Optional[Dict] = None
    ip: Optional[str] = None
    user_agent: str = ""
