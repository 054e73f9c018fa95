"""
Django implementation of DeviceRepository port.

This adapter converts between domain entities and Django ORM models.
"""
import uuid
from dataclasses import fields
from datetime import datetime
from typing import List, Optional, Tuple

from asgiref.sync import sync_to_async
from django.db.models import F

from core.domain.value_objects import CodeStatus, DeviceStatus
from core.infrastructure.database import atomic_async
from devices.domain.device import Device, DeviceInfo
from devices.infrastructure.models import Device as DeviceModel
from devices.ports.device_repository import DeviceRepository
from licenses.infrastructure.models import AuthorizationCode as AuthorizationCodeModel

_INFO_FIELDS = tuple(f.name for f in fields(DeviceInfo))


class DjangoDeviceRepository(DeviceRepository):
    """
    Django ORM implementation of DeviceRepository.

    Multi-step binding changes run inside a single database transaction.
    """

    def _to_domain(self, model: DeviceModel) -> Device:
        """
        Convert Django model to domain entity.

        Args:
            model: Django Device model

        Returns:
            Device domain entity
        """
        return Device(
            id=model.id,
            tenant_id=model.tenant_id,
            fingerprint=model.fingerprint,
            bound_code_id=model.bound_code_id,
            info=DeviceInfo(**{name: getattr(model, name) for name in _INFO_FIELDS}),
            status=DeviceStatus(model.status),
            last_heartbeat=model.last_heartbeat,
            last_ip=model.last_ip,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _bind(
        self,
        code_id: uuid.UUID,
        tenant_id: uuid.UUID,
        fingerprint: str,
        info: DeviceInfo,
        ip: Optional[str],
        now: datetime,
    ) -> DeviceModel:
        # pylint: disable=no-member
        model = DeviceModel.objects.filter(fingerprint=fingerprint).first()
        if model is None:
            return DeviceModel.objects.create(
                tenant_id=tenant_id,
                fingerprint=fingerprint,
                bound_code_id=code_id,
                status=DeviceStatus.ACTIVE.value,
                last_ip=ip,
                last_heartbeat=now,
                **info.to_dict(),
            )
        previous = DeviceInfo(**{name: getattr(model, name) for name in _INFO_FIELDS})
        merged = info.merged_over(previous)
        for name, value in merged.to_dict().items():
            setattr(model, name, value)
        model.tenant_id = tenant_id
        model.bound_code_id = code_id
        model.status = DeviceStatus.ACTIVE.value
        model.last_ip = ip or model.last_ip
        model.last_heartbeat = now
        model.save()
        return model

    @sync_to_async
    def find_by_id(self, device_id: uuid.UUID) -> Optional[Device]:
        """
        Find a device by ID.

        Args:
            device_id: Device UUID

        Returns:
            Device entity or None if not found
        """
        # pylint: disable=no-member
        model = DeviceModel.objects.filter(id=device_id).first()
        return self._to_domain(model) if model else None

    @sync_to_async
    def find_by_fingerprint(self, fingerprint: str) -> Optional[Device]:
        """
        Find a device by fingerprint.

        Args:
            fingerprint: Device fingerprint

        Returns:
            Device entity or None if not found
        """
        # pylint: disable=no-member
        model = DeviceModel.objects.filter(fingerprint=fingerprint).first()
        return self._to_domain(model) if model else None

    @sync_to_async
    def find_bound(self, code_id: uuid.UUID, fingerprint: str) -> Optional[Device]:
        # pylint: disable=no-member
        model = DeviceModel.objects.filter(bound_code_id=code_id, fingerprint=fingerprint).first()
        return self._to_domain(model) if model else None

    @sync_to_async
    def list_bound(self, code_id: uuid.UUID) -> List[Device]:
        # pylint: disable=no-member
        qs = DeviceModel.objects.filter(bound_code_id=code_id).order_by("-created_at")
        return [self._to_domain(model) for model in qs]

    @sync_to_async
    def count_bound(
        self, code_id: uuid.UUID, exclude_fingerprint: Optional[str] = None
    ) -> int:
        # pylint: disable=no-member
        qs = DeviceModel.objects.filter(bound_code_id=code_id)
        if exclude_fingerprint:
            qs = qs.exclude(fingerprint=exclude_fingerprint)
        return qs.count()

    @atomic_async
    def upsert_binding(
        self,
        code_id: uuid.UUID,
        tenant_id: uuid.UUID,
        fingerprint: str,
        info: DeviceInfo,
        ip: Optional[str],
        now: datetime,
    ) -> Device:
        """
        Point the device with this fingerprint at a code, creating it if needed.

        Returns:
            Bound Device entity
        """
        return self._to_domain(self._bind(code_id, tenant_id, fingerprint, info, ip, now))

    @sync_to_async
    def unbind(self, code_id: uuid.UUID, device_id: uuid.UUID) -> Optional[Device]:
        """
        Clear the binding of a device to a code and mark it inactive.

        Returns:
            Updated Device entity, or None if it was not bound to the code
        """
        # pylint: disable=no-member
        model = DeviceModel.objects.filter(id=device_id, bound_code_id=code_id).first()
        if model is None:
            return None
        model.bound_code_id = None
        model.status = DeviceStatus.INACTIVE.value
        model.save(update_fields=["bound_code", "status", "updated_at"])
        return self._to_domain(model)

    @atomic_async
    def rebind(
        self,
        code_id: uuid.UUID,
        old_device_id: uuid.UUID,
        tenant_id: uuid.UUID,
        new_fingerprint: str,
        info: DeviceInfo,
        ip: Optional[str],
        now: datetime,
    ) -> Optional[Tuple[Device, Device]]:
        """
        Replace a bound device in one transaction.

        Returns:
            Tuple of (old device, new device), or None if nothing was changed
        """
        # pylint: disable=no-member
        incremented = AuthorizationCodeModel.objects.filter(
            id=code_id,
            status=CodeStatus.ACTIVE.value,
            rebind_count__lt=F("rebind_quota"),
        ).update(rebind_count=F("rebind_count") + 1, updated_at=now)
        if not incremented:
            return None

        old_model = DeviceModel.objects.select_for_update().get(id=old_device_id)
        old_model.bound_code_id = None
        old_model.status = DeviceStatus.INACTIVE.value
        old_model.save(update_fields=["bound_code", "status", "updated_at"])

        new_model = self._bind(code_id, tenant_id, new_fingerprint, info, ip, now)
        return self._to_domain(old_model), self._to_domain(new_model)

    @sync_to_async
    def set_status_by_fingerprint(
        self,
        fingerprint: str,
        status: DeviceStatus,
        tenant_id: Optional[uuid.UUID] = None,
        from_status: Optional[DeviceStatus] = None,
    ) -> int:
        # pylint: disable=no-member
        qs = DeviceModel.objects.filter(fingerprint=fingerprint)
        if tenant_id:
            qs = qs.filter(tenant_id=tenant_id)
        if from_status:
            qs = qs.filter(status=from_status.value)
        return qs.update(status=status.value)
