"""
Tenant repository port (interface).

This defines the contract for tenant persistence operations.
Implementations are in the infrastructure layer.
"""

import uuid
from abc import ABC, abstractmethod
from typing import Optional

from tenants.domain.tenant import Tenant


class TenantRepository(ABC):
    """
    Abstract repository for Tenant entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    async def save(self, tenant: Tenant) -> Tenant:
        """
        Save a tenant entity.

        Args:
            tenant: Tenant entity to save

        Returns:
            Saved tenant entity
        """
        pass

    @abstractmethod
    async def find_by_id(self, tenant_id: uuid.UUID) -> Optional[Tenant]:
        """
        Find a tenant by ID.

        Args:
            tenant_id: Tenant UUID

        Returns:
            Tenant entity or None if not found
        """
        pass

    @abstractmethod
    async def exists(self, tenant_id: uuid.UUID) -> bool:
        """
        Check if a tenant exists.

        Args:
            tenant_id: Tenant UUID

        Returns:
            True if tenant exists, False otherwise
        """
        pass
