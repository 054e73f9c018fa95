"""
Time arithmetic for duration-billed codes.

Two policies coexist:

- ``duration_delta`` / ``compute_expire_time`` use a fixed-day table and are
  used for first activation, scheduled precompute and manual activation
  (month is 30 days, quarter 90, year 365, permanent 100 years of 365 days).
- ``shift`` is calendar-aware and is used for administrative adjustment only,
  so adding one month to Jan 31 lands on the last day of February.
"""

import calendar
from datetime import datetime, timedelta

from core.domain.exceptions import InvalidTimeUnitError
from core.domain.value_objects import AdjustDirection, CardType, TimeUnit

PERMANENT_YEARS = 100

_FIXED_DELTAS = {
    CardType.MINUTE: timedelta(minutes=1),
    CardType.HOUR: timedelta(hours=1),
    CardType.DAY: timedelta(days=1),
    CardType.WEEK: timedelta(days=7),
    CardType.MONTH: timedelta(days=30),
    CardType.QUARTER: timedelta(days=90),
    CardType.YEAR: timedelta(days=365),
}


def duration_delta(card_type: CardType, duration: int) -> timedelta:
    """
    Convert a card duration into a fixed timedelta.

    Args:
        card_type: Card unit
        duration: Number of units (ignored for permanent cards)

    Returns:
        Length of the validity window
    """
    if card_type == CardType.PERMANENT:
        return timedelta(days=365 * PERMANENT_YEARS)
    try:
        return _FIXED_DELTAS[card_type] * duration
    except KeyError as exc:
        raise InvalidTimeUnitError(f"Unknown card type: {card_type}") from exc


def compute_expire_time(start: datetime, card_type: CardType, duration: int) -> datetime:
    """Expiry of a window starting at ``start``."""
    return start + duration_delta(card_type, duration)


def _add_months(value: datetime, months: int) -> datetime:
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def shift(value: datetime, direction: AdjustDirection, amount: int, unit: TimeUnit) -> datetime:
    """
    Move a datetime by a calendar-aware amount.

    Args:
        value: Datetime to move
        direction: Add or subtract
        amount: Number of units
        unit: Time unit; month and year shift the calendar field

    Returns:
        Shifted datetime
    """
    signed = amount if direction == AdjustDirection.ADD else -amount
    if unit == TimeUnit.MONTH:
        return _add_months(value, signed)
    if unit == TimeUnit.YEAR:
        return _add_months(value, signed * 12)
    deltas = {
        TimeUnit.MINUTE: timedelta(minutes=signed),
        TimeUnit.HOUR: timedelta(hours=signed),
        TimeUnit.DAY: timedelta(days=signed),
        TimeUnit.WEEK: timedelta(weeks=signed),
    }
    try:
        return value + deltas[unit]
    except KeyError as exc:
        raise InvalidTimeUnitError(f"Unknown time unit: {unit}") from exc
