"""
DeductPointsCommand.

Command to consume points of a points-billed code from a verified device.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class DeductPointsCommand:
    """Command to deduct points; ``amount`` defaults to the code's deduct amount."""

    code: str
    fingerprint: str
    amount: Optional[int] = None
    reason: Optional[str] = None
    ip: Optional[str] = None
