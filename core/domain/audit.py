"""
Client action audit trail entry.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class AuthLogEntry:
    """One client action (activate, rebind, verify, deduct) and its result."""

    id: uuid.UUID
    action: str
    success: bool
    message: str
    code: str
    tenant_id: Optional[uuid.UUID]
    code_id: Optional[uuid.UUID]
    device_id: Optional[uuid.UUID]
    fingerprint: str
    ip: Optional[str]
    created_at: datetime
