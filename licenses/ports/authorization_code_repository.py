"""
AuthorizationCode repository port (interface).

This defines the contract for authorization code persistence operations.
Implementations are in the infrastructure layer.
"""
import uuid
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Set, Tuple

from core.domain.value_objects import BillingModel, CodeStatus
from licenses.domain.authorization_code import AuthorizationCode


class AuthorizationCodeRepository(ABC):
    """
    Abstract repository for AuthorizationCode entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    async def save(self, code: AuthorizationCode) -> AuthorizationCode:
        """
        Save an authorization code entity.

        Args:
            code: AuthorizationCode entity to save

        Returns:
            Saved authorization code entity
        """
        pass

    @abstractmethod
    async def save_many(self, codes: List[AuthorizationCode]) -> List[AuthorizationCode]:
        """
        Insert a batch of new codes in one transaction.

        Args:
            codes: New AuthorizationCode entities

        Returns:
            Saved entities in input order
        """
        pass

    @abstractmethod
    async def find_by_id(self, code_id: uuid.UUID) -> Optional[AuthorizationCode]:
        """
        Find an authorization code by ID.

        Args:
            code_id: Code UUID

        Returns:
            AuthorizationCode entity or None if not found
        """
        pass

    @abstractmethod
    async def find_by_code(self, code: str) -> Optional[AuthorizationCode]:
        """
        Find an authorization code by its value.

        Args:
            code: Code value

        Returns:
            AuthorizationCode entity or None if not found
        """
        pass

    @abstractmethod
    async def find_existing_codes(self, codes: Iterable[str]) -> Set[str]:
        """
        Return the subset of values already stored.

        Args:
            codes: Candidate code values

        Returns:
            Values that are already taken
        """
        pass

    @abstractmethod
    async def list(
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

        Args:
            tenant_id: Optional tenant filter
            status: Optional status filter
            billing_model: Optional billing model filter
            search: Optional code substring
            offset: Rows to skip
            limit: Maximum rows to return

        Returns:
            Tuple of (page items, total matching rows)
        """
        pass

    @abstractmethod
    async def delete_and_unbind(self, code_id: uuid.UUID) -> bool:
        """
        Unbind every device of a code and delete it, atomically.

        Args:
            code_id: Code UUID

        Returns:
            True if the code existed
        """
        pass

    @abstractmethod
    async def deduct_points(
        self, code_id: uuid.UUID, amount: int
    ) -> Optional[AuthorizationCode]:
        """
        Conditionally subtract points in a single-row update.

        The update applies only while the code is active and its balance
        covers ``amount``; reaching zero flips the status to expired in the
        same statement.

        Args:
            code_id: Code UUID
            amount: Points to subtract

        Returns:
            Updated entity, or None if the condition did not hold
        """
        pass

    @abstractmethod
    async def mark_expired(self, code_id: uuid.UUID) -> None:
        """
        Persist a lazily discovered expiry of an active code.

        Args:
            code_id: Code UUID
        """
        pass
