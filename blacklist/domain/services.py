"""
Blacklist domain services.

BlacklistGate answers "is this fingerprint/IP banned for this tenant or
globally?" and owns the administrative add/remove of entries.
"""

import ipaddress
import logging
import uuid
from typing import Optional

from blacklist.domain.entry import BlacklistCheck, BlacklistEntry, BlacklistKind
from blacklist.ports.blacklist_repository import BlacklistRepository
from core.domain.exceptions import (
    AlreadyBlacklistedError,
    BlacklistEntryNotFoundError,
    InvalidFingerprintError,
    InvalidIpAddressError,
)
from core.domain.results import returns_outcome
from core.domain.value_objects import DeviceStatus
from core.metrics import blacklist_hits_total
from devices.domain.fingerprint import FingerprintValidator
from devices.ports.device_repository import DeviceRepository

logger = logging.getLogger(__name__)


class BlacklistGate:
    """Domain service for blacklist lookups and administration."""

    def __init__(
        self,
        blacklist_repository: BlacklistRepository,
        device_repository: DeviceRepository,
    ):
        """Initialize gate with repositories."""
        self.blacklist_repository = blacklist_repository
        self.device_repository = device_repository

    async def _check(
        self, kind: BlacklistKind, value: Optional[str], tenant_id: Optional[uuid.UUID]
    ) -> BlacklistCheck:
        if not value:
            return BlacklistCheck.clear()
        entry = await self.blacklist_repository.find_latest_match(kind, value, tenant_id)
        if entry is None:
            return BlacklistCheck.clear()
        blacklist_hits_total.labels(kind=kind.value).inc()
        logger.info(
            "Blacklist hit",
            extra={"kind": kind.value, "tenant_id": str(tenant_id), "entry_id": str(entry.id)},
        )
        return BlacklistCheck.hit(entry)

    async def is_device_blacklisted(
        self, fingerprint: str, tenant_id: Optional[uuid.UUID] = None
    ) -> BlacklistCheck:
        """
        Check a fingerprint against tenant and global entries.

        Args:
            fingerprint: Device fingerprint
            tenant_id: Tenant UUID

        Returns:
            BlacklistCheck with the most recent matching reason
        """
        return await self._check(
            BlacklistKind.DEVICE, FingerprintValidator.normalize(fingerprint), tenant_id
        )

    async def is_ip_blacklisted(
        self, ip: Optional[str], tenant_id: Optional[uuid.UUID] = None
    ) -> BlacklistCheck:
        """
        Check an IP against tenant and global entries.

        A missing IP is never blacklisted.

        Args:
            ip: Client IP address
            tenant_id: Tenant UUID

        Returns:
            BlacklistCheck with the most recent matching reason
        """
        return await self._check(BlacklistKind.IP, ip, tenant_id)

    async def _add(self, entry: BlacklistEntry) -> BlacklistEntry:
        if await self.blacklist_repository.exists_in_scope(entry.kind, entry.value, entry.tenant_id):
            raise AlreadyBlacklistedError(f"{entry.kind.value} is already blacklisted in this scope")
        stored = await self.blacklist_repository.add(entry)
        logger.info(
            "Blacklist entry added",
            extra={
                "kind": entry.kind.value,
                "entry_id": str(stored.id),
                "tenant_id": str(entry.tenant_id),
            },
        )
        return stored

    @returns_outcome
    async def add_device(
        self,
        fingerprint: str,
        reason: Optional[str] = None,
        tenant_id: Optional[uuid.UUID] = None,
    ) -> BlacklistEntry:
        """
        Ban a fingerprint and flag matching devices as blacklisted.

        Args:
            fingerprint: Device fingerprint
            reason: Reason shown to the client
            tenant_id: Tenant scope (None for a global ban)

        Returns:
            Outcome with the stored BlacklistEntry
        """
        fingerprint = FingerprintValidator.normalize(fingerprint)
        if not FingerprintValidator.verify_format(fingerprint):
            raise InvalidFingerprintError()
        stored = await self._add(
            BlacklistEntry.create(BlacklistKind.DEVICE, fingerprint, reason, tenant_id)
        )
        await self.device_repository.set_status_by_fingerprint(
            fingerprint, DeviceStatus.BLACKLISTED, tenant_id=tenant_id
        )
        return stored

    @returns_outcome
    async def add_ip(
        self,
        ip: str,
        reason: Optional[str] = None,
        tenant_id: Optional[uuid.UUID] = None,
    ) -> BlacklistEntry:
        """
        Ban an IP address.

        Args:
            ip: IPv4 or IPv6 address
            reason: Reason shown to the client
            tenant_id: Tenant scope (None for a global ban)

        Returns:
            Outcome with the stored BlacklistEntry
        """
        try:
            ipaddress.ip_address((ip or "").strip())
        except ValueError as exc:
            raise InvalidIpAddressError(f"Invalid IP address: {ip}") from exc
        return await self._add(BlacklistEntry.create(BlacklistKind.IP, ip, reason, tenant_id))

    @returns_outcome
    async def remove_device(self, entry_id: uuid.UUID) -> BlacklistEntry:
        """
        Delete a device entry.

        When no entry for the fingerprint remains, devices flagged as
        blacklisted are restored to active.

        Args:
            entry_id: Entry UUID

        Returns:
            Outcome with the removed entry (not-found failure otherwise)
        """
        entry = await self.blacklist_repository.remove(BlacklistKind.DEVICE, entry_id)
        if entry is None:
            raise BlacklistEntryNotFoundError()
        remaining = await self.blacklist_repository.count_for_value(BlacklistKind.DEVICE, entry.value)
        if remaining == 0:
            await self.device_repository.set_status_by_fingerprint(
                entry.value, DeviceStatus.ACTIVE, from_status=DeviceStatus.BLACKLISTED
            )
        logger.info(
            "Blacklist entry removed",
            extra={"kind": "device", "entry_id": str(entry_id), "remaining": remaining},
        )
        return entry

    @returns_outcome
    async def remove_ip(self, entry_id: uuid.UUID) -> BlacklistEntry:
        """
        Delete an IP entry.

        Args:
            entry_id: Entry UUID

        Returns:
            Outcome with the removed entry (not-found failure otherwise)
        """
        entry = await self.blacklist_repository.remove(BlacklistKind.IP, entry_id)
        if entry is None:
            raise BlacklistEntryNotFoundError()
        logger.info("Blacklist entry removed", extra={"kind": "ip", "entry_id": str(entry_id)})
        return entry
