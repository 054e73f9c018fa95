"""
Value objects for the domain.

Value objects are immutable objects that are defined by their attributes
rather than their identity. They have no identity and are compared by value.
"""
from enum import Enum


class CodeStatus(Enum):
    """Authorization code lifecycle status."""

    UNUSED = "unused"
    ACTIVE = "active"
    EXPIRED = "expired"
    DISABLED = "disabled"

    def __str__(self) -> str:
        """Return status as string."""
        return self.value


class BillingModel(Enum):
    """Billing model tag of an authorization code."""

    DURATION = "duration"
    POINTS = "points"

    def __str__(self) -> str:
        return self.value


class CardType(Enum):
    """Duration unit of a duration-billed code."""

    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"
    PERMANENT = "permanent"

    def __str__(self) -> str:
        return self.value


class ActivateMode(Enum):
    """When the duration clock of a code starts."""

    FIRST_USE = "first_use"
    SCHEDULED = "scheduled"

    def __str__(self) -> str:
        return self.value


class DeductType(Enum):
    """How a points-billed code is charged."""

    PER_USE = "per_use"
    PER_HOUR = "per_hour"
    PER_DAY = "per_day"

    def __str__(self) -> str:
        return self.value


class DeviceStatus(Enum):
    """Device status value object."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    BLACKLISTED = "blacklisted"

    def __str__(self) -> str:
        return self.value


class TenantStatus(Enum):
    """Tenant status value object."""

    ENABLED = "enabled"
    DISABLED = "disabled"

    def __str__(self) -> str:
        return self.value


class TimeUnit(Enum):
    """Units accepted by administrative time adjustment."""

    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"

    def __str__(self) -> str:
        return self.value


class AdjustDirection(Enum):
    """Direction of an administrative time adjustment."""

    ADD = "add"
    SUBTRACT = "subtract"

    def __str__(self) -> str:
        return self.value
