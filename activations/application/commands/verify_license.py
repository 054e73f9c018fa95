"""
VerifyLicenseCommand.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class VerifyLicenseCommand:
    """Command to verify a code for a fingerprint."""

    code: str
    fingerprint: str
    ip: Optional[str] = None
