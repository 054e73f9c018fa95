"""
Django implementation of AuthorizationCodeRepository port.

This adapter converts between domain entities and Django ORM models.
"""
import uuid
from typing import Iterable, List, Optional, Set, Tuple

from asgiref.sync import sync_to_async
from django.db import models as db_models
from django.db.models import Case, F, Value, When
from django.utils import timezone

from core.domain.value_objects import (
    ActivateMode,
    BillingModel,
    CardType,
    CodeStatus,
    DeductType,
)
from core.infrastructure.database import atomic_async
from devices.infrastructure.models import Device as DeviceModel
from licenses.domain.authorization_code import AuthorizationCode
from licenses.domain.billing import Billing, DurationBilling, PointsBilling
from licenses.infrastructure.models import AuthorizationCode as AuthorizationCodeModel
from licenses.ports.authorization_code_repository import AuthorizationCodeRepository

_DURATION_COLUMNS = ("card_type", "duration", "activate_mode", "start_time", "expire_time")
_POINTS_COLUMNS = ("total_points", "remaining_points", "deduct_type", "deduct_amount")


class DjangoAuthorizationCodeRepository(AuthorizationCodeRepository):
    """
    Django ORM implementation of AuthorizationCodeRepository.

    This adapter:
    1. Maps the tagged row onto exactly one billing variant
    2. Flattens a billing variant back into its column group
    3. Runs conditional and multi-row updates inside the database
    """

    def _billing_to_domain(self, model: AuthorizationCodeModel) -> Billing:
        if model.billing_model == BillingModel.POINTS.value:
            return PointsBilling(
                total_points=model.total_points or 0,
                remaining_points=model.remaining_points or 0,
                deduct_type=DeductType(model.deduct_type or DeductType.PER_USE.value),
                deduct_amount=model.deduct_amount or 1,
            )
        return DurationBilling(
            card_type=CardType(model.card_type or CardType.DAY.value),
            duration=model.duration or 1,
            activate_mode=ActivateMode(model.activate_mode or ActivateMode.FIRST_USE.value),
            start_time=model.start_time,
            expire_time=model.expire_time,
        )

    def _billing_columns(self, billing: Billing) -> dict:
        """
        Flatten a billing variant into model columns.

        Columns of the other variant are nulled.
        """
        if isinstance(billing, PointsBilling):
            columns = dict.fromkeys(_DURATION_COLUMNS)
            columns.update(
                billing_model=BillingModel.POINTS.value,
                total_points=billing.total_points,
                remaining_points=billing.remaining_points,
                deduct_type=billing.deduct_type.value,
                deduct_amount=billing.deduct_amount,
            )
            return columns
        columns = dict.fromkeys(_POINTS_COLUMNS)
        columns.update(
            billing_model=BillingModel.DURATION.value,
            card_type=billing.card_type.value,
            duration=billing.duration,
            activate_mode=billing.activate_mode.value,
            start_time=billing.start_time,
            expire_time=billing.expire_time,
        )
        return columns

    def _to_domain(self, model: AuthorizationCodeModel) -> AuthorizationCode:
        """
        Convert Django model to domain entity.

        Args:
            model: Django AuthorizationCode model

        Returns:
            AuthorizationCode domain entity
        """
        return AuthorizationCode(
            id=model.id,
            tenant_id=model.tenant_id,
            code=model.code,
            billing=self._billing_to_domain(model),
            device_quota=model.device_quota,
            rebind_quota=model.rebind_quota,
            rebind_count=model.rebind_count,
            single_online=model.single_online,
            status=CodeStatus(model.status),
            used_time=model.used_time,
            remark=model.remark,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _header_columns(self, code: AuthorizationCode) -> dict:
        return {
            "tenant_id": code.tenant_id,
            "code": code.code,
            "device_quota": code.device_quota,
            "rebind_quota": code.rebind_quota,
            "rebind_count": code.rebind_count,
            "single_online": code.single_online,
            "status": code.status.value,
            "used_time": code.used_time,
            "remark": code.remark,
        }

    def _to_model(self, code: AuthorizationCode) -> AuthorizationCodeModel:
        """
        Convert domain entity to Django model.

        Args:
            code: AuthorizationCode domain entity

        Returns:
            Django AuthorizationCode model
        """
        columns = {**self._header_columns(code), **self._billing_columns(code.billing)}
        # pylint: disable=no-member
        model, created = AuthorizationCodeModel.objects.get_or_create(
            id=code.id, defaults=columns
        )
        if not created:
            for name, value in columns.items():
                setattr(model, name, value)
        return model

    @sync_to_async
    def save(self, code: AuthorizationCode) -> AuthorizationCode:
        """
        Save an authorization code entity.

        Args:
            code: AuthorizationCode entity to save

        Returns:
            Saved authorization code entity
        """
        model = self._to_model(code)
        model.save()
        return self._to_domain(model)

    @atomic_async
    def save_many(self, codes: List[AuthorizationCode]) -> List[AuthorizationCode]:
        """
        Insert a batch of new codes in one transaction.

        Args:
            codes: New AuthorizationCode entities

        Returns:
            Saved entities in input order
        """
        rows = [
            AuthorizationCodeModel(
                id=code.id,
                **self._header_columns(code),
                **self._billing_columns(code.billing),
            )
            for code in codes
        ]
        # pylint: disable=no-member
        AuthorizationCodeModel.objects.bulk_create(rows)
        stored = AuthorizationCodeModel.objects.in_bulk([code.id for code in codes])
        return [self._to_domain(stored[code.id]) for code in codes]

    @sync_to_async
    def find_by_id(self, code_id: uuid.UUID) -> Optional[AuthorizationCode]:
        """
        Find an authorization code by ID.

        Args:
            code_id: Code UUID

        Returns:
            AuthorizationCode entity or None if not found
        """
        try:
            # pylint: disable=no-member
            model = AuthorizationCodeModel.objects.get(id=code_id)
        except AuthorizationCodeModel.DoesNotExist:  # pylint: disable=no-member
            return None
        return self._to_domain(model)

    @sync_to_async
    def find_by_code(self, code: str) -> Optional[AuthorizationCode]:
        """
        Find an authorization code by its value.

        Args:
            code: Code value

        Returns:
            AuthorizationCode entity or None if not found
        """
        try:
            # pylint: disable=no-member
            model = AuthorizationCodeModel.objects.get(code=code)
        except AuthorizationCodeModel.DoesNotExist:  # pylint: disable=no-member
            return None
        return self._to_domain(model)

    @sync_to_async
    def find_existing_codes(self, codes: Iterable[str]) -> Set[str]:
        # pylint: disable=no-member
        qs = AuthorizationCodeModel.objects.filter(code__in=list(codes))
        return set(qs.values_list("code", flat=True))

    @sync_to_async
    def list(
        self,
        tenant_id: Optional[uuid.UUID] = None,
        status: Optional[CodeStatus] = None,
        billing_model: Optional[BillingModel] = None,
        search: Optional[str] = None,
        offset: int = 0,
        limit: int = 10,
    ) -> Tuple[List[AuthorizationCode], int]:
        """
        Filtered, paginated scan ordered by newest first.

        Returns:
            Tuple of (page items, total matching rows)
        """
        # pylint: disable=no-member
        qs = AuthorizationCodeModel.objects.all()
        if tenant_id:
            qs = qs.filter(tenant_id=tenant_id)
        if status:
            qs = qs.filter(status=status.value)
        if billing_model:
            qs = qs.filter(billing_model=billing_model.value)
        if search:
            qs = qs.filter(code__icontains=search.strip())
        total = qs.count()
        items = [self._to_domain(model) for model in qs.order_by("-created_at")[offset : offset + limit]]
        return items, total

    @atomic_async
    def delete_and_unbind(self, code_id: uuid.UUID) -> bool:
        """
        Unbind every device of a code and delete it, atomically.

        Args:
            code_id: Code UUID

        Returns:
            True if the code existed
        """
        # pylint: disable=no-member
        if not AuthorizationCodeModel.objects.filter(id=code_id).exists():
            return False
        DeviceModel.objects.filter(bound_code_id=code_id).update(
            bound_code=None, status="inactive", updated_at=timezone.now()
        )
        AuthorizationCodeModel.objects.filter(id=code_id).delete()
        return True

    @atomic_async
    def deduct_points(self, code_id: uuid.UUID, amount: int) -> Optional[AuthorizationCode]:
        """
        Conditionally subtract points in a single-row update.

        Args:
            code_id: Code UUID
            amount: Points to subtract

        Returns:
            Updated entity, or None if the condition did not hold
        """
        # status is assigned before remaining_points so that both read the
        # pre-update balance on every backend
        # pylint: disable=no-member
        updated = AuthorizationCodeModel.objects.filter(
            id=code_id,
            billing_model=BillingModel.POINTS.value,
            status=CodeStatus.ACTIVE.value,
            remaining_points__gte=amount,
        ).update(
            status=Case(
                When(remaining_points=amount, then=Value(CodeStatus.EXPIRED.value)),
                default=F("status"),
                output_field=db_models.CharField(),
            ),
            remaining_points=F("remaining_points") - amount,
            updated_at=timezone.now(),
        )
        if not updated:
            return None
        return self._to_domain(AuthorizationCodeModel.objects.get(id=code_id))

    @sync_to_async
    def mark_expired(self, code_id: uuid.UUID) -> None:
        # pylint: disable=no-member
        AuthorizationCodeModel.objects.filter(
            id=code_id, status=CodeStatus.ACTIVE.value
        ).update(status=CodeStatus.EXPIRED.value, updated_at=timezone.now())
