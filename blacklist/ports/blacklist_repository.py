"""
Blacklist repository port (interface).

This defines the contract for blacklist persistence operations.
Implementations are in the infrastructure layer.
"""
import uuid
from abc import ABC, abstractmethod
from typing import List, Optional

from blacklist.domain.entry import BlacklistEntry, BlacklistKind


class BlacklistRepository(ABC):
    """
    Abstract repository for BlacklistEntry entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    async def find_latest_match(
        self, kind: BlacklistKind, value: str, tenant_id: Optional[uuid.UUID]
    ) -> Optional[BlacklistEntry]:
        """
        Find the most recent entry matching a value.

        Both entries scoped to ``tenant_id`` and global entries match.

        Args:
            kind: Device or IP
            value: Fingerprint or IP address
            tenant_id: Tenant UUID (None matches global entries only)

        Returns:
            Newest matching BlacklistEntry or None
        """
        pass

    @abstractmethod
    async def exists_in_scope(
        self, kind: BlacklistKind, value: str, tenant_id: Optional[uuid.UUID]
    ) -> bool:
        """
        Check for an entry with exactly this value and scope.

        Args:
            kind: Device or IP
            value: Fingerprint or IP address
            tenant_id: Tenant UUID, or None for the global scope

        Returns:
            True if such an entry exists
        """
        pass

    @abstractmethod
    async def add(self, entry: BlacklistEntry) -> BlacklistEntry:
        """
        Store a new entry.

        Args:
            entry: BlacklistEntry entity

        Returns:
            Stored entry
        """
        pass

    @abstractmethod
    async def remove(self, kind: BlacklistKind, entry_id: uuid.UUID) -> Optional[BlacklistEntry]:
        """
        Delete an entry.

        Args:
            kind: Device or IP
            entry_id: Entry UUID

        Returns:
            The deleted entry, or None if it did not exist
        """
        pass

    @abstractmethod
    async def count_for_value(self, kind: BlacklistKind, value: str) -> int:
        """
        Count entries for a value across every scope.

        Args:
            kind: Device or IP
            value: Fingerprint or IP address

        Returns:
            Number of entries
        """
        pass

    @abstractmethod
    async def list(
        self, kind: BlacklistKind, tenant_id: Optional[uuid.UUID] = None
    ) -> List[BlacklistEntry]:
        """
        List entries, newest first.

        Args:
            kind: Device or IP
            tenant_id: Optional tenant filter (global entries are included)

        Returns:
            List of BlacklistEntry entities
        """
        pass
