"""
Tenant domain entity.

A tenant is the software product that owns a set of authorization codes.
Disabling a tenant blocks every client flow for its codes.
"""

import uuid
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from django.utils import timezone

from core.domain.value_objects import TenantStatus


@dataclass(frozen=True)
class Tenant:
    """
    Tenant domain entity.

    This is an immutable value object with business logic.
    """

    id: uuid.UUID
    name: str
    status: TenantStatus
    created_at: datetime
    updated_at: datetime

    def __post_init__(self):
        """Validate tenant entity."""
        if not self.name or len(self.name.strip()) == 0:
            raise ValueError("Tenant name cannot be empty")
        if len(self.name) > 255:
            raise ValueError("Tenant name too long")

    @classmethod
    def create(
        cls,
        name: str,
        enabled: bool = True,
        tenant_id: Optional[uuid.UUID] = None,
    ) -> "Tenant":
        """
        Create a new Tenant entity.

        Args:
            name: Tenant display name
            enabled: Whether client flows are allowed
            tenant_id: Optional UUID (generated if not provided)

        Returns:
            Tenant entity instance
        """
        now = timezone.now()
        return cls(
            id=tenant_id or uuid.uuid4(),
            name=name.strip(),
            status=TenantStatus.ENABLED if enabled else TenantStatus.DISABLED,
            created_at=now,
            updated_at=now,
        )

    @property
    def is_enabled(self) -> bool:
        return self.status == TenantStatus.ENABLED

    def disable(self) -> "Tenant":
        """Return a disabled copy of this tenant."""
        return replace(self, status=TenantStatus.DISABLED, updated_at=timezone.now())

    def enable(self) -> "Tenant":
        """Return an enabled copy of this tenant."""
        return replace(self, status=TenantStatus.ENABLED, updated_at=timezone.now())
