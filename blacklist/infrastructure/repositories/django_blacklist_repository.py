"""
Django implementation of BlacklistRepository port.

This adapter converts between domain entities and Django ORM models.
"""
import uuid
from typing import List, Optional, Union

from asgiref.sync import sync_to_async
from django.db.models import Q

from blacklist.domain.entry import BlacklistEntry, BlacklistKind
from blacklist.infrastructure.models import DeviceBlacklistEntry, IpBlacklistEntry
from blacklist.ports.blacklist_repository import BlacklistRepository

EntryModel = Union[DeviceBlacklistEntry, IpBlacklistEntry]

_MODELS = {
    BlacklistKind.DEVICE: (DeviceBlacklistEntry, "fingerprint"),
    BlacklistKind.IP: (IpBlacklistEntry, "ip"),
}


class DjangoBlacklistRepository(BlacklistRepository):
    """
    Django ORM implementation of BlacklistRepository.

    Device and IP entries live in separate tables that share one shape.
    """

    def _to_domain(self, kind: BlacklistKind, model: EntryModel) -> BlacklistEntry:
        """
        Convert Django model to domain entity.

        Args:
            kind: Entry kind
            model: Django blacklist model

        Returns:
            BlacklistEntry domain entity
        """
        _, value_field = _MODELS[kind]
        return BlacklistEntry(
            id=model.id,
            kind=kind,
            value=getattr(model, value_field),
            tenant_id=model.tenant_id,
            reason=model.reason,
            created_at=model.created_at,
        )

    def _queryset(self, kind: BlacklistKind, value: str):
        model_class, value_field = _MODELS[kind]
        # pylint: disable=no-member
        return model_class.objects.filter(**{value_field: value})

    @sync_to_async
    def find_latest_match(
        self, kind: BlacklistKind, value: str, tenant_id: Optional[uuid.UUID]
    ) -> Optional[BlacklistEntry]:
        """
        Find the most recent entry matching a value.

        Args:
            kind: Device or IP
            value: Fingerprint or IP address
            tenant_id: Tenant UUID (None matches global entries only)

        Returns:
            Newest matching BlacklistEntry or None
        """
        scope = Q(tenant__isnull=True)
        if tenant_id:
            scope |= Q(tenant_id=tenant_id)
        model = self._queryset(kind, value).filter(scope).order_by("-created_at").first()
        return self._to_domain(kind, model) if model else None

    @sync_to_async
    def exists_in_scope(
        self, kind: BlacklistKind, value: str, tenant_id: Optional[uuid.UUID]
    ) -> bool:
        qs = self._queryset(kind, value)
        if tenant_id:
            return qs.filter(tenant_id=tenant_id).exists()
        return qs.filter(tenant__isnull=True).exists()

    @sync_to_async
    def add(self, entry: BlacklistEntry) -> BlacklistEntry:
        """
        Store a new entry.

        Args:
            entry: BlacklistEntry entity

        Returns:
            Stored entry
        """
        model_class, value_field = _MODELS[entry.kind]
        # pylint: disable=no-member
        model = model_class.objects.create(
            id=entry.id,
            tenant_id=entry.tenant_id,
            reason=entry.reason,
            **{value_field: entry.value},
        )
        return self._to_domain(entry.kind, model)

    @sync_to_async
    def remove(self, kind: BlacklistKind, entry_id: uuid.UUID) -> Optional[BlacklistEntry]:
        model_class, _ = _MODELS[kind]
        # pylint: disable=no-member
        model = model_class.objects.filter(id=entry_id).first()
        if model is None:
            return None
        entry = self._to_domain(kind, model)
        model.delete()
        return entry

    @sync_to_async
    def count_for_value(self, kind: BlacklistKind, value: str) -> int:
        return self._queryset(kind, value).count()

    @sync_to_async
    def list(
        self, kind: BlacklistKind, tenant_id: Optional[uuid.UUID] = None
    ) -> List[BlacklistEntry]:
        model_class, _ = _MODELS[kind]
        # pylint: disable=no-member
        qs = model_class.objects.all()
        if tenant_id:
            qs = qs.filter(Q(tenant_id=tenant_id) | Q(tenant__isnull=True))
        return [self._to_domain(kind, model) for model in qs.order_by("-created_at")]
