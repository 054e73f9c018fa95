"""
Operation outcomes.

Expected business failures are reported as values rather than raised to
callers. Domain code raises DomainException subclasses internally and the
public operations convert them with ``returns_outcome``.
"""

import functools
import logging
from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

from core.domain.exceptions import DomainException, ErrorCategory

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Discriminated success/failure result of a domain operation."""

    ok: bool
    value: Optional[T] = None
    code: Optional[str] = None
    category: Optional[ErrorCategory] = None
    message: Optional[str] = None

    @classmethod
    def success(cls, value: T = None) -> "Outcome[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(
        cls, code: str, category: ErrorCategory, message: str
    ) -> "Outcome[Any]":
        return cls(ok=False, code=code, category=category, message=message)

    @classmethod
    def from_exception(cls, exc: DomainException) -> "Outcome[Any]":
        return cls.failure(exc.code, exc.category, exc.message)

    @property
    def reason(self) -> Optional[str]:
        """Machine-readable failure reason (None on success)."""
        return self.code

    def unwrap(self) -> T:
        """
        Return the value or raise when the outcome is a failure.

        Intended for composing operations where a failure was already
        ruled out.
        """
        if not self.ok:
            raise RuntimeError(f"Cannot unwrap failed outcome: {self.code}")
        return self.value


def returns_outcome(func):
    """
    Wrap an async operation so DomainException becomes a failed Outcome.

    Returned values are wrapped into a successful Outcome unless the
    operation already returned one. Anything other than DomainException
    propagates unchanged.
    """

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            result = await func(*args, **kwargs)
        except DomainException as exc:
            logger.warning(
                "%s rejected: %s",
                func.__qualname__,
                exc.code,
                extra={"reason": exc.code, "category": str(exc.category)},
            )
            return Outcome.from_exception(exc)
        if isinstance(result, Outcome):
            return result
        return Outcome.success(result)

    return wrapper
