"""
Django implementation of TenantRepository port.

This adapter converts between domain entities and Django ORM models.
"""

import uuid
from typing import Optional

from asgiref.sync import sync_to_async

from core.domain.value_objects import TenantStatus
from tenants.domain.tenant import Tenant
from tenants.infrastructure.models import Tenant as TenantModel
from tenants.ports.tenant_repository import TenantRepository


class DjangoTenantRepository(TenantRepository):
    """Django ORM implementation of TenantRepository."""

    def _to_domain(self, model: TenantModel) -> Tenant:
        """
        Convert Django model to domain entity.

        Args:
            model: Django Tenant model

        Returns:
            Tenant domain entity
        """
        return Tenant(
            id=model.id,
            name=model.name,
            status=TenantStatus(model.status),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, tenant: Tenant) -> TenantModel:
        # pylint: disable=no-member
        model, created = TenantModel.objects.get_or_create(
            id=tenant.id,
            defaults={
                "name": tenant.name,
                "status": tenant.status.value,
            },
        )
        if not created:
            model.name = tenant.name
            model.status = tenant.status.value
        return model

    @sync_to_async
    def save(self, tenant: Tenant) -> Tenant:
        """
        Save a tenant entity.

        Args:
            tenant: Tenant entity to save

        Returns:
            Saved tenant entity
        """
        model = self._to_model(tenant)
        model.save()
        return self._to_domain(model)

    @sync_to_async
    def find_by_id(self, tenant_id: uuid.UUID) -> Optional[Tenant]:
        """
        Find a tenant by ID.

        Args:
            tenant_id: Tenant UUID

        Returns:
            Tenant entity or None if not found
        """
        try:
            # pylint: disable=no-member
            model = TenantModel.objects.get(id=tenant_id)
        except TenantModel.DoesNotExist:  # pylint: disable=no-member
            return None
        return self._to_domain(model)

    @sync_to_async
    def exists(self, tenant_id: uuid.UUID) -> bool:
        # pylint: disable=no-member
        return TenantModel.objects.filter(id=tenant_id).exists()
