"""
Django implementation of SessionRepository port.

This adapter converts between domain entities and Django ORM models.
"""
import uuid
from datetime import datetime
from typing import List, Optional

from asgiref.sync import sync_to_async
from django.db.models import Q

from presence.domain.session import OnlineSession
from presence.infrastructure.models import OnlineSession as OnlineSessionModel
from presence.ports.session_repository import SessionRepository


class DjangoSessionRepository(SessionRepository):
    """Django ORM implementation of SessionRepository."""

    def _to_domain(self, model: OnlineSessionModel) -> OnlineSession:
        """
        Convert Django model to domain entity.

        Args:
            model: Django OnlineSession model

        Returns:
            OnlineSession domain entity
        """
        return OnlineSession(
            id=model.id,
            device_id=model.device_id,
            tenant_id=model.tenant_id,
            code_id=model.code_id,
            token_hash=model.token_hash,
            ip=model.ip,
            user_agent=model.user_agent,
            is_valid=model.is_valid,
            force_offline=model.force_offline,
            login_time=model.login_time,
            last_heartbeat=model.last_heartbeat,
            token_expire_time=model.token_expire_time,
        )

    def _valid(self):
        # pylint: disable=no-member
        return OnlineSessionModel.objects.filter(is_valid=True, force_offline=False)

    @sync_to_async
    def find_by_id(self, session_id: uuid.UUID) -> Optional[OnlineSession]:
        # pylint: disable=no-member
        model = OnlineSessionModel.objects.filter(id=session_id).first()
        return self._to_domain(model) if model else None

    @sync_to_async
    def find_valid_by_pair(
        self, device_id: uuid.UUID, code_id: uuid.UUID
    ) -> Optional[OnlineSession]:
        model = (
            self._valid()
            .filter(device_id=device_id, code_id=code_id)
            .order_by("-last_heartbeat")
            .first()
        )
        return self._to_domain(model) if model else None

    @sync_to_async
    def find_by_token_hash(self, token_hash: str) -> Optional[OnlineSession]:
        # Forced-offline rows stay visible so the caller can report the kick.
        # pylint: disable=no-member
        model = (
            OnlineSessionModel.objects.filter(token_hash=token_hash)
            .filter(Q(is_valid=True) | Q(force_offline=True))
            .order_by("-login_time")
            .first()
        )
        return self._to_domain(model) if model else None

    @sync_to_async
    def save(self, session: OnlineSession) -> OnlineSession:
        """
        Save session (create or update).

        Args:
            session: OnlineSession domain entity

        Returns:
            Saved OnlineSession entity
        """
        # pylint: disable=no-member
        model, _ = OnlineSessionModel.objects.update_or_create(
            id=session.id,
            defaults={
                "device_id": session.device_id,
                "tenant_id": session.tenant_id,
                "code_id": session.code_id,
                "token_hash": session.token_hash,
                "ip": session.ip,
                "user_agent": session.user_agent,
                "is_valid": session.is_valid,
                "force_offline": session.force_offline,
                "login_time": session.login_time,
                "last_heartbeat": session.last_heartbeat,
                "token_expire_time": session.token_expire_time,
            },
        )
        return self._to_domain(model)

    @sync_to_async
    def touch(self, session_id: uuid.UUID, now: datetime) -> None:
        # pylint: disable=no-member
        OnlineSessionModel.objects.filter(id=session_id).update(last_heartbeat=now)

    @sync_to_async
    def invalidate(self, session_id: uuid.UUID) -> None:
        # pylint: disable=no-member
        OnlineSessionModel.objects.filter(id=session_id).update(is_valid=False)

    @sync_to_async
    def mark_force_offline(self, session_id: uuid.UUID) -> bool:
        # pylint: disable=no-member
        updated = OnlineSessionModel.objects.filter(id=session_id).update(
            force_offline=True, is_valid=False
        )
        return updated > 0

    @sync_to_async
    def invalidate_stale(self, cutoff: datetime) -> int:
        return self._valid().filter(last_heartbeat__lt=cutoff).update(is_valid=False)

    @sync_to_async
    def count_stale(self, cutoff: datetime) -> int:
        return self._valid().filter(last_heartbeat__lt=cutoff).count()

    @sync_to_async
    def force_offline_others(self, code_id: uuid.UUID, keep_session_id: uuid.UUID) -> int:
        return (
            self._valid()
            .filter(code_id=code_id)
            .exclude(id=keep_session_id)
            .update(force_offline=True, is_valid=False)
        )

    @sync_to_async
    def list_live(
        self,
        now: datetime,
        tenant_id: Optional[uuid.UUID] = None,
        code_id: Optional[uuid.UUID] = None,
    ) -> List[OnlineSession]:
        qs = self._valid().filter(
            Q(token_expire_time__isnull=True) | Q(token_expire_time__gte=now)
        )
        if tenant_id:
            qs = qs.filter(tenant_id=tenant_id)
        if code_id:
            qs = qs.filter(code_id=code_id)
        return [self._to_domain(model) for model in qs.order_by("-last_heartbeat")]
