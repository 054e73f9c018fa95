"""
Activation domain services.

ActivationEngine is the authorization code state machine
(unused -> active -> expired) driven by client activation, verification
and point deduction.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from django.utils import timezone

from blacklist.domain.services import BlacklistGate
from core.config import LicensingConfig
from core.domain.exceptions import (
    AuthorizationCodeNotFoundError,
    CodeDisabledError,
    CodeExpiredError,
    CodeNotActivatedError,
    DeviceBlacklistedError,
    DeviceInactiveError,
    DeviceLimitReachedError,
    DeviceNotBoundError,
    InsufficientPointsError,
    InvalidAmountError,
    InvalidFingerprintError,
    IpBlacklistedError,
    NotPointsCodeError,
    PointsExhaustedError,
    TenantDisabledError,
)
from core.domain.results import returns_outcome
from core.domain.value_objects import CodeStatus, DeviceStatus
from devices.domain.device import Device
from devices.domain.fingerprint import DeviceComponents, FingerprintValidator
from devices.domain.services import DeviceBindingManager
from devices.ports.device_repository import DeviceRepository
from licenses.domain.authorization_code import AuthorizationCode
from licenses.domain.point_deduction import PointDeductionRecord
from licenses.ports.authorization_code_repository import AuthorizationCodeRepository
from licenses.ports.point_deduction_repository import PointDeductionRepository
from tenants.ports.tenant_repository import TenantRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActivationResult:
    """Successful activation."""

    code: AuthorizationCode
    device: Device
    is_new_activation: bool


@dataclass(frozen=True)
class VerificationResult:
    """Successful verification; ``remaining_seconds`` is None for points codes."""

    code: AuthorizationCode
    device: Device
    remaining_seconds: Optional[int]


@dataclass(frozen=True)
class DeductionResult:
    """Successful point deduction."""

    code: AuthorizationCode
    amount: int
    remaining_points: int
    record: PointDeductionRecord


class ActivationEngine:
    """Domain service for the authorization code lifecycle."""

    def __init__(
        self,
        code_repository: AuthorizationCodeRepository,
        device_repository: DeviceRepository,
        tenant_repository: TenantRepository,
        blacklist_gate: BlacklistGate,
        binding_manager: DeviceBindingManager,
        deduction_repository: PointDeductionRepository,
        config: Optional[LicensingConfig] = None,
        clock: Callable[[], datetime] = timezone.now,
    ):
        """Initialize engine with collaborators, config and a clock."""
        self.code_repository = code_repository
        self.device_repository = device_repository
        self.tenant_repository = tenant_repository
        self.blacklist_gate = blacklist_gate
        self.binding_manager = binding_manager
        self.deduction_repository = deduction_repository
        self.config = config or LicensingConfig()
        self.clock = clock

    async def _load_for_client(self, code: str, fingerprint: str) -> AuthorizationCode:
        if not FingerprintValidator.verify_format(fingerprint):
            raise InvalidFingerprintError()
        loaded = await self.code_repository.find_by_code(code)
        if loaded is None:
            raise AuthorizationCodeNotFoundError()
        tenant = await self.tenant_repository.find_by_id(loaded.tenant_id)
        if tenant is None or not tenant.is_enabled:
            raise TenantDisabledError()
        return loaded

    async def _check_blacklist(
        self, tenant_id: uuid.UUID, fingerprint: str, ip: Optional[str]
    ) -> None:
        check = await self.blacklist_gate.is_device_blacklisted(fingerprint, tenant_id)
        if check.blacklisted:
            raise DeviceBlacklistedError(check.reason)
        check = await self.blacklist_gate.is_ip_blacklisted(ip, tenant_id)
        if check.blacklisted:
            raise IpBlacklistedError(check.reason)

    @returns_outcome
    async def activate(
        self,
        code: str,
        fingerprint: str,
        device_info: Optional[DeviceComponents] = None,
        ip: Optional[str] = None,
    ) -> ActivationResult:
        """
        Activate a code on a device.

        A fingerprint already bound to the code is a repeat activation and
        changes nothing. Otherwise the device quota is enforced, an unused
        code goes through its first activation and the device is bound.

        Args:
            code: Authorization code value
            fingerprint: Device fingerprint
            device_info: Hardware descriptors
            ip: Client IP

        Returns:
            Outcome with an ActivationResult
        """
        fingerprint = FingerprintValidator.normalize(fingerprint)
        loaded = await self._load_for_client(code, fingerprint)
        if loaded.status == CodeStatus.DISABLED:
            raise CodeDisabledError()
        if loaded.status == CodeStatus.EXPIRED:
            raise CodeExpiredError()

        await self._check_blacklist(loaded.tenant_id, fingerprint, ip)

        bound = await self.device_repository.find_bound(loaded.id, fingerprint)
        if bound is not None:
            logger.info(
                "Repeat activation",
                extra={"code_id": str(loaded.id), "device_id": str(bound.id)},
            )
            return ActivationResult(code=loaded, device=bound, is_new_activation=False)

        if not await self.binding_manager.has_capacity(loaded, fingerprint):
            raise DeviceLimitReachedError(
                f"Device limit reached (max {loaded.device_quota} device(s))"
            )

        if loaded.status == CodeStatus.UNUSED:
            loaded = await self.code_repository.save(loaded.activate(self.clock()))
            logger.info(
                "Authorization code first activation",
                extra={
                    "code_id": str(loaded.id),
                    "billing_model": loaded.billing_model.value,
                    "expire_time": loaded.expire_time.isoformat() if loaded.expire_time else None,
                },
            )

        device = await self.binding_manager.attach(loaded, fingerprint, device_info, ip)
        return ActivationResult(code=loaded, device=device, is_new_activation=True)

    @returns_outcome
    async def verify(
        self, code: str, fingerprint: str, ip: Optional[str] = None
    ) -> VerificationResult:
        """
        Verify that a device may use a code right now.

        Reads only; the one write is persisting an expiry discovered here.

        Args:
            code: Authorization code value
            fingerprint: Device fingerprint
            ip: Client IP

        Returns:
            Outcome with a VerificationResult
        """
        fingerprint = FingerprintValidator.normalize(fingerprint)
        loaded = await self._load_for_client(code, fingerprint)
        if loaded.status == CodeStatus.DISABLED:
            raise CodeDisabledError()
        if loaded.status == CodeStatus.EXPIRED:
            raise CodeExpiredError()
        if loaded.status == CodeStatus.UNUSED:
            raise CodeNotActivatedError()

        await self._check_blacklist(loaded.tenant_id, fingerprint, ip)

        device = await self.device_repository.find_bound(loaded.id, fingerprint)
        if device is None:
            raise DeviceNotBoundError()
        if device.status == DeviceStatus.BLACKLISTED:
            raise DeviceBlacklistedError()
        if device.status == DeviceStatus.INACTIVE:
            raise DeviceInactiveError()

        now = self.clock()
        if loaded.is_exhausted(now):
            await self.code_repository.mark_expired(loaded.id)
            logger.info("Authorization code expired on verify", extra={"code_id": str(loaded.id)})
            if loaded.is_points:
                raise PointsExhaustedError()
            raise CodeExpiredError()

        remaining_seconds = None
        if loaded.is_duration and loaded.expire_time is not None:
            remaining_seconds = max(0, int((loaded.expire_time - now).total_seconds()))
        return VerificationResult(code=loaded, device=device, remaining_seconds=remaining_seconds)

    @returns_outcome
    async def deduct_points(
        self,
        code_id: uuid.UUID,
        amount: Optional[int] = None,
        reason: Optional[str] = None,
        device_id: Optional[uuid.UUID] = None,
        ip: Optional[str] = None,
    ) -> DeductionResult:
        """
        Deduct points from an active points code.

        The balance check and the write are one conditional update; a
        balance reaching zero expires the code in the same update.

        Args:
            code_id: Code UUID
            amount: Points to deduct (defaults to the code's deduct amount)
            reason: Free-form reason for the record
            device_id: Device that consumed the points
            ip: Client IP

        Returns:
            Outcome with a DeductionResult
        """
        loaded = await self.code_repository.find_by_id(code_id)
        if loaded is None:
            raise AuthorizationCodeNotFoundError()
        if not loaded.is_points:
            raise NotPointsCodeError()
        if loaded.status == CodeStatus.DISABLED:
            raise CodeDisabledError()
        if loaded.status == CodeStatus.EXPIRED:
            raise CodeExpiredError()
        if loaded.status == CodeStatus.UNUSED:
            raise CodeNotActivatedError()

        amount = loaded.billing.deduct_amount if amount is None else amount
        if amount <= 0:
            raise InvalidAmountError()
        if loaded.remaining_points < amount:
            raise InsufficientPointsError(
                f"Insufficient points (remaining {loaded.remaining_points}, required {amount})"
            )

        updated = await self.code_repository.deduct_points(code_id, amount)
        if updated is None:
            # balance or status changed since the read
            current = await self.code_repository.find_by_id(code_id)
            if current is None:
                raise AuthorizationCodeNotFoundError()
            if current.status != CodeStatus.ACTIVE:
                raise CodeExpiredError()
            raise InsufficientPointsError()

        record = await self.deduction_repository.append(
            PointDeductionRecord.create(
                code_id=updated.id,
                code=updated.code,
                deduct_type=updated.billing.deduct_type,
                amount=amount,
                remaining_points=updated.remaining_points,
                device_id=device_id,
                reason=reason,
                ip=ip,
            )
        )
        logger.info(
            "Points deducted",
            extra={
                "code_id": str(code_id),
                "amount": amount,
                "remaining_points": updated.remaining_points,
                "status": updated.status.value,
            },
        )
        return DeductionResult(
            code=updated,
            amount=amount,
            remaining_points=updated.remaining_points,
            record=record,
        )
