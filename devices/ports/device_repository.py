"""
Device repository port (interface).

This defines the contract for device persistence operations.
Implementations are in the infrastructure layer.
"""
import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Tuple

from core.domain.value_objects import DeviceStatus
from devices.domain.device import Device, DeviceInfo


class DeviceRepository(ABC):
    """
    Abstract repository for Device entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    async def find_by_id(self, device_id: uuid.UUID) -> Optional[Device]:
        """
        Find a device by ID.

        Args:
            device_id: Device UUID

        Returns:
            Device entity or None if not found
        """
        pass

    @abstractmethod
    async def find_by_fingerprint(self, fingerprint: str) -> Optional[Device]:
        """
        Find a device by fingerprint.

        Args:
            fingerprint: Device fingerprint

        Returns:
            Device entity or None if not found
        """
        pass

    @abstractmethod
    async def find_bound(self, code_id: uuid.UUID, fingerprint: str) -> Optional[Device]:
        """
        Find the device with this fingerprint if it is bound to the code.

        Args:
            code_id: Authorization code UUID
            fingerprint: Device fingerprint

        Returns:
            Device entity or None
        """
        pass

    @abstractmethod
    async def list_bound(self, code_id: uuid.UUID) -> List[Device]:
        """
        List devices bound to a code, newest first.

        Args:
            code_id: Authorization code UUID

        Returns:
            List of Device entities
        """
        pass

    @abstractmethod
    async def count_bound(
        self, code_id: uuid.UUID, exclude_fingerprint: Optional[str] = None
    ) -> int:
        """
        Count devices bound to a code.

        Args:
            code_id: Authorization code UUID
            exclude_fingerprint: Fingerprint left out of the count

        Returns:
            Number of bound devices
        """
        pass

    @abstractmethod
    async def upsert_binding(
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

        Blank descriptor fields keep their stored value; the device becomes
        active and records ``ip`` and ``now`` as its last contact.

        Returns:
            Bound Device entity
        """
        pass

    @abstractmethod
    async def unbind(self, code_id: uuid.UUID, device_id: uuid.UUID) -> Optional[Device]:
        """
        Clear the binding of a device to a code and mark it inactive.

        Returns:
            Updated Device entity, or None if it was not bound to the code
        """
        pass

    @abstractmethod
    async def rebind(
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

        Increments the code's rebind counter (only while it is below the
        quota and the code is active), unbinds the old device and binds the
        new fingerprint.

        Returns:
            Tuple of (old device, new device), or None if the counter guard
            did not hold and nothing was changed
        """
        pass

    @abstractmethod
    async def set_status_by_fingerprint(
        self,
        fingerprint: str,
        status: DeviceStatus,
        tenant_id: Optional[uuid.UUID] = None,
        from_status: Optional[DeviceStatus] = None,
    ) -> int:
        """
        Set the status of devices with a fingerprint.

        Args:
            fingerprint: Device fingerprint
            status: New status
            tenant_id: Restrict to one tenant (None for every tenant)
            from_status: Only update devices currently in this status

        Returns:
            Number of updated rows
        """
        pass
