"""
License domain services.

LicenseRegistry issues authorization codes in batches and carries the
administrative operations on them: listing, editing, deleting and nudging
expiry.
"""

import logging
import uuid
from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Generic, List, Mapping, Optional, Type, TypeVar

from django.utils import timezone

from core.config import LicensingConfig
from core.domain.exceptions import (
    AuthorizationCodeNotFoundError,
    CodeGenerationExhaustedError,
    CodeNotActivatedError,
    DomainException,
    InvalidAdjustmentError,
    InvalidAmountError,
    InvalidBatchSizeError,
    InvalidBillingConfigError,
    InvalidFilterError,
    InvalidTimeUnitError,
    InvalidUpdateError,
    TenantNotFoundError,
    TimeAdjustmentNotAllowedError,
    UnsupportedOperationError,
)
from core.domain.results import returns_outcome
from core.domain.value_objects import AdjustDirection, BillingModel, CodeStatus, TimeUnit
from core.metrics import codes_deleted_total, codes_generated_total, time_adjustments_total
from licenses.domain.authorization_code import AuthorizationCode
from licenses.domain.billing import Billing, DurationBilling
from licenses.domain.code_generator import generate_code
from licenses.domain.time_units import shift
from licenses.ports.authorization_code_repository import AuthorizationCodeRepository
from tenants.ports.tenant_repository import TenantRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")
E = TypeVar("E", bound=Enum)

MAX_PAGE_SIZE = 100

UPDATABLE_FIELDS = frozenset(
    {
        "status",
        "device_quota",
        "rebind_quota",
        "single_online",
        "remark",
        "start_time",
        "expire_time",
        "remaining_points",
    }
)


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of a filtered listing."""

    items: List[T]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return (self.total + self.limit - 1) // self.limit if self.limit else 0


@dataclass(frozen=True)
class TimeAdjustment:
    """Result of an administrative expiry adjustment."""

    code_id: uuid.UUID
    code: str
    old_expire_time: datetime
    new_expire_time: datetime
    status: CodeStatus


def coerce_enum(enum_cls: Type[E], value: Any, error: Type[DomainException]) -> E:
    """
    Accept an enum member or its value.

    Raises:
        error: When the value is not a member of ``enum_cls``
    """
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError as exc:
        raise error(f"Invalid {enum_cls.__name__}: {value}") from exc


class LicenseRegistry:
    """Domain service for authorization code issuance and administration."""

    def __init__(
        self,
        code_repository: AuthorizationCodeRepository,
        tenant_repository: TenantRepository,
        config: Optional[LicensingConfig] = None,
        clock: Callable[[], datetime] = timezone.now,
        code_factory: Callable[[], str] = generate_code,
    ):
        """Initialize registry with repositories, config and a clock."""
        self.code_repository = code_repository
        self.tenant_repository = tenant_repository
        self.config = config or LicensingConfig()
        self.clock = clock
        self.code_factory = code_factory

    async def _load(self, code_id: uuid.UUID) -> AuthorizationCode:
        code = await self.code_repository.find_by_id(code_id)
        if code is None:
            raise AuthorizationCodeNotFoundError()
        return code

    async def _unique_values(self, count: int) -> List[str]:
        """
        Draw ``count`` values unused both in the batch and in the store.

        Each round asks the store which candidates are taken and redraws
        only the shortfall.
        """
        values: List[str] = []
        drawn = set()
        for _ in range(self.config.code_generation_max_attempts):
            needed = count - len(values)
            if needed == 0:
                break
            candidates = {self.code_factory() for _ in range(needed)} - drawn
            drawn |= candidates
            taken = await self.code_repository.find_existing_codes(candidates)
            values.extend(sorted(candidates - taken))
        if len(values) < count:
            raise CodeGenerationExhaustedError()
        return values

    @returns_outcome
    async def generate_batch(
        self,
        tenant_id: uuid.UUID,
        billing: Optional[Billing] = None,
        count: int = 1,
        device_quota: int = 1,
        rebind_quota: int = 0,
        single_online: bool = True,
        remark: str = "",
    ) -> List[AuthorizationCode]:
        """
        Generate a batch of unused authorization codes.

        Args:
            tenant_id: Owning tenant UUID
            billing: DurationBilling or PointsBilling template
                (defaults to one day, first use)
            count: Number of codes to generate
            device_quota: Maximum bound devices per code
            rebind_quota: Maximum rebinds per code
            single_online: Whether only one session may stay live
            remark: Free-form admin note

        Returns:
            Outcome with the created codes
        """
        if count < 1:
            raise InvalidBatchSizeError()
        if device_quota < 1:
            raise InvalidBillingConfigError("Device quota must be at least 1")
        if rebind_quota < 0:
            raise InvalidBillingConfigError("Rebind quota cannot be negative")
        if not await self.tenant_repository.exists(tenant_id):
            raise TenantNotFoundError()

        billing = billing or DurationBilling()
        values = await self._unique_values(count)
        codes = [
            AuthorizationCode.create(
                tenant_id=tenant_id,
                code=value,
                billing=billing,
                device_quota=device_quota,
                rebind_quota=rebind_quota,
                single_online=single_online,
                remark=remark,
            )
            for value in values
        ]
        saved = await self.code_repository.save_many(codes)

        codes_generated_total.labels(billing_model=billing.model.value).inc(len(saved))
        logger.info(
            "Authorization codes generated",
            extra={
                "tenant_id": str(tenant_id),
                "count": len(saved),
                "billing_model": billing.model.value,
            },
        )
        return saved

    @returns_outcome
    async def list_codes(
        self,
        tenant_id: Optional[uuid.UUID] = None,
        status: Any = None,
        billing_model: Any = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Page[AuthorizationCode]:
        """
        List codes with filters, newest first.

        Args:
            tenant_id: Optional tenant filter
            status: Optional CodeStatus (or its value)
            billing_model: Optional BillingModel (or its value)
            search: Optional code substring
            page: 1-based page number
            limit: Page size (capped at 100)

        Returns:
            Outcome with a Page of codes
        """
        status = coerce_enum(CodeStatus, status, InvalidFilterError) if status else None
        billing_model = (
            coerce_enum(BillingModel, billing_model, InvalidFilterError) if billing_model else None
        )
        page = max(1, page)
        limit = max(1, min(limit, MAX_PAGE_SIZE))
        items, total = await self.code_repository.list(
            tenant_id=tenant_id,
            status=status,
            billing_model=billing_model,
            search=search,
            offset=(page - 1) * limit,
            limit=limit,
        )
        return Page(items=items, total=total, page=page, limit=limit)

    @returns_outcome
    async def get_code(self, code_id: uuid.UUID) -> AuthorizationCode:
        """Fetch a code by ID."""
        return await self._load(code_id)

    @returns_outcome
    async def get_by_value(self, code: str) -> AuthorizationCode:
        """Fetch a code by its value."""
        found = await self.code_repository.find_by_code(code)
        if found is None:
            raise AuthorizationCodeNotFoundError()
        return found

    @returns_outcome
    async def update_code(
        self, code_id: uuid.UUID, changes: Mapping[str, Any]
    ) -> AuthorizationCode:
        """
        Apply an administrative edit.

        Moving an unused code to active performs the first-activation
        transition (used time, billing window, point refill) before any
        explicit time or point overrides in the same edit. An active
        duration code left with a past expiry becomes expired.

        Args:
            code_id: Code UUID
            changes: Mapping of field name to new value; accepted fields are
                status, device_quota, rebind_quota, single_online, remark,
                start_time, expire_time and remaining_points

        Returns:
            Outcome with the updated code
        """
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise InvalidUpdateError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

        code = await self._load(code_id)
        now = self.clock()

        header = {}
        for name in ("device_quota", "rebind_quota"):
            if name in changes:
                value = int(changes[name])
                if value < (1 if name == "device_quota" else 0):
                    raise InvalidUpdateError(f"Invalid {name}: {value}")
                header[name] = value
        if "single_online" in changes:
            header["single_online"] = bool(changes["single_online"])
        if "remark" in changes:
            header["remark"] = changes["remark"] or ""
        if header:
            code = replace(code, updated_at=now, **header)

        if "status" in changes:
            target = coerce_enum(CodeStatus, changes["status"], InvalidUpdateError)
            if code.status == CodeStatus.UNUSED and target == CodeStatus.ACTIVE:
                code = code.activate(now)
                logger.info("Authorization code activated manually", extra={"code_id": str(code.id)})
            elif target != code.status:
                code = replace(code, status=target, updated_at=now)

        time_fields = {name: changes[name] for name in ("start_time", "expire_time") if name in changes}
        if time_fields:
            if not code.is_duration:
                raise UnsupportedOperationError("Points-billed codes have no time window")
            code = code.with_billing(replace(code.billing, **time_fields))

        if "remaining_points" in changes:
            if not code.is_points:
                raise UnsupportedOperationError("Duration-billed codes have no point balance")
            code = code.with_billing(code.billing.with_remaining(int(changes["remaining_points"])))

        if code.status == CodeStatus.ACTIVE and code.is_duration and code.billing.is_expired_at(now):
            code = code.mark_expired()

        saved = await self.code_repository.save(code)
        logger.info(
            "Authorization code updated",
            extra={"code_id": str(code_id), "fields": sorted(changes), "status": saved.status.value},
        )
        return saved

    @returns_outcome
    async def delete_code(self, code_id: uuid.UUID) -> bool:
        """
        Delete a code after unbinding its devices, in one transaction.

        Args:
            code_id: Code UUID

        Returns:
            Outcome with True, or a not-found failure
        """
        if not await self.code_repository.delete_and_unbind(code_id):
            raise AuthorizationCodeNotFoundError()
        codes_deleted_total.inc()
        logger.info("Authorization code deleted", extra={"code_id": str(code_id)})
        return True

    @returns_outcome
    async def adjust_time(
        self,
        code_id: uuid.UUID,
        direction: Any,
        amount: int,
        unit: Any,
        reason: Optional[str] = None,
    ) -> TimeAdjustment:
        """
        Move the expiry of an activated duration code.

        Month and year shift the calendar field. A subtraction never moves
        the expiry before now or before the start of the window. Status is
        reconciled against the new expiry right away, and an expiry at or
        before now expires the code; a disabled code stays disabled.

        Args:
            code_id: Code UUID
            direction: AdjustDirection (or "add"/"subtract")
            amount: Positive number of units
            unit: TimeUnit (or its value)
            reason: Optional note for the audit trail

        Returns:
            Outcome with a TimeAdjustment
        """
        direction = coerce_enum(AdjustDirection, direction, InvalidAdjustmentError)
        unit = coerce_enum(TimeUnit, unit, InvalidTimeUnitError)
        if not isinstance(amount, int) or amount < 1:
            raise InvalidAmountError()

        code = await self._load(code_id)
        if code.is_points:
            raise TimeAdjustmentNotAllowedError("Points-billed codes have no expiry to adjust")
        if code.is_permanent:
            raise TimeAdjustmentNotAllowedError("Permanent codes cannot be adjusted")
        if code.status == CodeStatus.UNUSED or code.used_time is None:
            raise CodeNotActivatedError()
        if code.expire_time is None:
            raise TimeAdjustmentNotAllowedError("Code has no expiry to adjust")

        now = self.clock()
        old_expire_time = code.expire_time
        new_expire_time = shift(old_expire_time, direction, amount, unit)
        start_time = code.billing.start_time
        floor = max(now, start_time) if start_time else now
        if direction == AdjustDirection.SUBTRACT and new_expire_time < floor:
            new_expire_time = floor

        code = code.with_expire_time(new_expire_time).reconcile_expiry(now, inclusive=True)
        saved = await self.code_repository.save(code)

        time_adjustments_total.labels(direction=direction.value).inc()
        logger.info(
            "Authorization code expiry adjusted",
            extra={
                "code_id": str(code_id),
                "direction": direction.value,
                "amount": amount,
                "unit": unit.value,
                "reason": reason or "",
                "old_expire_time": old_expire_time.isoformat(),
                "new_expire_time": new_expire_time.isoformat(),
            },
        )
        return TimeAdjustment(
            code_id=saved.id,
            code=saved.code,
            old_expire_time=old_expire_time,
            new_expire_time=saved.expire_time,
            status=saved.status,
        )
