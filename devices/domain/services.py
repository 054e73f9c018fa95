"""
Device domain services.

DeviceBindingManager owns the binding between devices and authorization
codes: idempotent bind, device quota, administrative unbind and rebind.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional

from django.utils import timezone

from blacklist.domain.services import BlacklistGate
from core.domain.exceptions import (
    AuthorizationCodeNotFoundError,
    CodeDisabledError,
    CodeExpiredError,
    CodeNotActivatedError,
    DeviceAlreadyBoundError,
    DeviceBlacklistedError,
    DeviceNotBoundError,
    InvalidFingerprintError,
    RebindLimitReachedError,
    TenantDisabledError,
)
from core.domain.results import returns_outcome
from core.domain.value_objects import CodeStatus
from devices.domain.device import Device, DeviceInfo
from devices.domain.fingerprint import DeviceComponents, FingerprintValidator
from devices.ports.device_repository import DeviceRepository
from licenses.domain.authorization_code import AuthorizationCode
from licenses.ports.authorization_code_repository import AuthorizationCodeRepository
from tenants.ports.tenant_repository import TenantRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RebindResult:
    """Outcome value of a successful rebind."""

    code: AuthorizationCode
    old_device: Device
    new_device: Device


class DeviceBindingManager:
    """Domain service for binding devices to authorization codes."""

    def __init__(
        self,
        device_repository: DeviceRepository,
        code_repository: AuthorizationCodeRepository,
        tenant_repository: TenantRepository,
        blacklist_gate: BlacklistGate,
        clock: Callable[[], datetime] = timezone.now,
    ):
        """Initialize manager with repositories and a clock."""
        self.device_repository = device_repository
        self.code_repository = code_repository
        self.tenant_repository = tenant_repository
        self.blacklist_gate = blacklist_gate
        self.clock = clock

    async def has_capacity(self, code: AuthorizationCode, fingerprint: str) -> bool:
        """
        Check the device quota of a code for a fingerprint.

        A fingerprint that is already bound never counts against the quota.

        Args:
            code: Authorization code
            fingerprint: Requesting fingerprint

        Returns:
            True if the fingerprint may be bound
        """
        bound = await self.device_repository.count_bound(code.id, exclude_fingerprint=fingerprint)
        return bound < code.device_quota

    async def attach(
        self,
        code: AuthorizationCode,
        fingerprint: str,
        device_info: Optional[DeviceComponents] = None,
        ip: Optional[str] = None,
    ) -> Device:
        """
        Bind a fingerprint to a loaded code, raising on invalid input.

        Args:
            code: Authorization code
            fingerprint: Device fingerprint
            device_info: Hardware descriptors
            ip: Client IP

        Returns:
            Bound Device entity
        """
        fingerprint = FingerprintValidator.normalize(fingerprint)
        if not FingerprintValidator.verify_format(fingerprint):
            raise InvalidFingerprintError()
        info = FingerprintValidator.normalize_device_info(DeviceInfo.from_mapping(device_info))
        device = await self.device_repository.upsert_binding(
            code.id, code.tenant_id, fingerprint, info, ip, self.clock()
        )
        logger.info(
            "Device bound",
            extra={"code_id": str(code.id), "device_id": str(device.id)},
        )
        return device

    @returns_outcome
    async def bind(
        self,
        code_id: uuid.UUID,
        fingerprint: str,
        device_info: Optional[DeviceComponents] = None,
        ip: Optional[str] = None,
    ) -> Device:
        """
        Bind a fingerprint to a code.

        The device row is created on first bind and updated in place
        afterwards, so repeated calls never duplicate a fingerprint.

        Args:
            code_id: Authorization code UUID
            fingerprint: Device fingerprint
            device_info: Hardware descriptors (blank fields keep stored values)
            ip: Client IP

        Returns:
            Outcome with the bound Device
        """
        fingerprint = FingerprintValidator.normalize(fingerprint)
        if not FingerprintValidator.verify_format(fingerprint):
            raise InvalidFingerprintError()
        code = await self.code_repository.find_by_id(code_id)
        if code is None:
            raise AuthorizationCodeNotFoundError()
        return await self.attach(code, fingerprint, device_info, ip)

    @returns_outcome
    async def list_bound(self, code_id: uuid.UUID) -> List[Device]:
        """
        List devices currently bound to a code.

        Args:
            code_id: Authorization code UUID

        Returns:
            Outcome with the bound devices
        """
        return await self.device_repository.list_bound(code_id)

    @returns_outcome
    async def unbind_admin(self, code_id: uuid.UUID, device_id: uuid.UUID) -> Device:
        """
        Administratively unbind a device.

        The device becomes inactive; the rebind counter is not touched.

        Args:
            code_id: Authorization code UUID
            device_id: Device UUID

        Returns:
            Outcome with the unbound Device
        """
        device = await self.device_repository.unbind(code_id, device_id)
        if device is None:
            raise DeviceNotBoundError()
        logger.info(
            "Device unbound by admin",
            extra={"code_id": str(code_id), "device_id": str(device_id)},
        )
        return device

    @returns_outcome
    async def rebind(
        self,
        code: str,
        old_fingerprint: str,
        new_fingerprint: str,
        device_info: Optional[DeviceComponents] = None,
        ip: Optional[str] = None,
    ) -> RebindResult:
        """
        Replace a bound device with a new fingerprint.

        Every check runs before any mutation. The counter increment, the
        unbind and the bind are then committed in one transaction.

        Args:
            code: Authorization code value
            old_fingerprint: Currently bound fingerprint
            new_fingerprint: Fingerprint to bind instead
            device_info: Hardware descriptors of the new device
            ip: Client IP

        Returns:
            Outcome with a RebindResult carrying the reloaded code
        """
        old_fingerprint = FingerprintValidator.normalize(old_fingerprint)
        new_fingerprint = FingerprintValidator.normalize(new_fingerprint)
        if not FingerprintValidator.verify_format(new_fingerprint):
            raise InvalidFingerprintError("Invalid new device fingerprint format")

        loaded = await self.code_repository.find_by_code(code)
        if loaded is None:
            raise AuthorizationCodeNotFoundError()

        tenant = await self.tenant_repository.find_by_id(loaded.tenant_id)
        if tenant is None or not tenant.is_enabled:
            raise TenantDisabledError()

        self._require_active(loaded)

        if not loaded.can_rebind:
            raise RebindLimitReachedError()

        check = await self.blacklist_gate.is_device_blacklisted(new_fingerprint, loaded.tenant_id)
        if check.blacklisted:
            raise DeviceBlacklistedError(check.reason)

        old_device = await self.device_repository.find_bound(loaded.id, old_fingerprint)
        if old_device is None:
            raise DeviceNotBoundError("Old device is not bound to this authorization code")

        if await self.device_repository.find_bound(loaded.id, new_fingerprint):
            raise DeviceAlreadyBoundError()

        info = FingerprintValidator.normalize_device_info(DeviceInfo.from_mapping(device_info))
        swapped = await self.device_repository.rebind(
            loaded.id, old_device.id, loaded.tenant_id, new_fingerprint, info, ip, self.clock()
        )
        if swapped is None:
            # counter guard lost a race with a concurrent rebind
            raise RebindLimitReachedError()

        old_device, new_device = swapped
        reloaded = await self.code_repository.find_by_id(loaded.id)
        logger.info(
            "Device rebound",
            extra={
                "code_id": str(loaded.id),
                "old_device_id": str(old_device.id),
                "new_device_id": str(new_device.id),
                "rebind_count": reloaded.rebind_count,
            },
        )
        return RebindResult(code=reloaded, old_device=old_device, new_device=new_device)

    @staticmethod
    def _require_active(code: AuthorizationCode) -> None:
        if code.status == CodeStatus.DISABLED:
            raise CodeDisabledError()
        if code.status == CodeStatus.EXPIRED:
            raise CodeExpiredError()
        if code.status == CodeStatus.UNUSED:
            raise CodeNotActivatedError()
