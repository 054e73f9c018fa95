"""
Django repository for the client audit trail.
"""
import uuid
from typing import List, Optional

from asgiref.sync import sync_to_async

from core.domain.audit import AuthLogEntry
from core.infrastructure.models import AuthLog as AuthLogModel


class DjangoAuthLogRepository:
    """Append and read AuthLog rows."""

    def _to_domain(self, model: AuthLogModel) -> AuthLogEntry:
        return AuthLogEntry(
            id=model.id,
            action=model.action,
            success=model.success,
            message=model.message,
            code=model.code,
            tenant_id=model.tenant_id,
            code_id=model.code_id,
            device_id=model.device_id,
            fingerprint=model.fingerprint,
            ip=model.ip,
            created_at=model.created_at,
        )

    @sync_to_async
    def append(
        self,
        action: str,
        success: bool,
        code: str = "",
        message: str = "",
        tenant_id: Optional[uuid.UUID] = None,
        code_id: Optional[uuid.UUID] = None,
        device_id: Optional[uuid.UUID] = None,
        fingerprint: str = "",
        ip: Optional[str] = None,
    ) -> AuthLogEntry:
        """
        Store one audit entry.

        Returns:
            Stored AuthLogEntry
        """
        # pylint: disable=no-member
        model = AuthLogModel.objects.create(
            action=action,
            success=success,
            code=code[:64],
            message=message[:255],
            tenant_id=tenant_id,
            code_id=code_id,
            device_id=device_id,
            fingerprint=fingerprint[:64],
            ip=ip or None,
        )
        return self._to_domain(model)

    @sync_to_async
    def list_recent(
        self, code: Optional[str] = None, action: Optional[str] = None, limit: int = 50
    ) -> List[AuthLogEntry]:
        # pylint: disable=no-member
        qs = AuthLogModel.objects.all()
        if code:
            qs = qs.filter(code=code)
        if action:
            qs = qs.filter(action=action)
        return [self._to_domain(model) for model in qs.order_by("-created_at")[:limit]]
