"""
Unit tests for billing variants.
"""

from datetime import datetime, timedelta, timezone

import pytest

from core.domain.exceptions import InvalidBillingConfigError
from core.domain.value_objects import ActivateMode, CardType, DeductType
from licenses.domain.billing import DurationBilling, PointsBilling

NOW = datetime(2024, 6, 1, 8, 0, tzinfo=timezone.utc)


class TestDurationBilling:
    """Tests for DurationBilling."""

    def test_first_use_window_starts_at_activation(self):
        """Test a first-use window opens at now."""
        billing = DurationBilling(card_type=CardType.DAY, duration=30).for_issuance()

        window = billing.start_window(NOW)

        assert billing.start_time is None
        assert window.start_time == NOW
        assert window.expire_time - window.start_time == timedelta(days=30)

    def test_scheduled_window_precomputed_and_kept(self):
        """Test a scheduled window is fixed at issuance and untouched by activation."""
        start = NOW + timedelta(days=3)
        billing = DurationBilling(
            card_type=CardType.WEEK, duration=1, activate_mode=ActivateMode.SCHEDULED, start_time=start
        ).for_issuance()

        window = billing.start_window(NOW)

        assert billing.expire_time == start + timedelta(days=7)
        assert window == billing

    def test_scheduled_without_start_degrades_to_first_use(self):
        """Test a scheduled code without a start time behaves like first use."""
        billing = DurationBilling(activate_mode=ActivateMode.SCHEDULED).for_issuance()

        window = billing.start_window(NOW)

        assert window.start_time == NOW
        assert window.expire_time == NOW + timedelta(days=1)

    def test_is_expired_at(self):
        """Test expiry is strictly after expire_time."""
        window = DurationBilling().start_window(NOW)

        assert not window.is_expired_at(window.expire_time)
        assert window.is_expired_at(window.expire_time + timedelta(seconds=1))

    def test_invalid_duration(self):
        """Test zero duration is rejected."""
        with pytest.raises(InvalidBillingConfigError):
            DurationBilling(duration=0)


class TestPointsBilling:
    """Tests for PointsBilling."""

    def test_create_full_balance(self):
        """Test a new points billing starts full."""
        billing = PointsBilling.create(10, DeductType.PER_USE, 3)

        assert billing.remaining_points == 10
        assert billing.deduct_amount == 3

    def test_refill_on_first_activation(self):
        """Test an empty balance refills on activation."""
        empty = PointsBilling(total_points=10, remaining_points=0)

        assert empty.start_window(NOW).remaining_points == 10

    def test_partial_balance_kept_on_activation(self):
        """Test a non-empty balance is not refilled."""
        partial = PointsBilling(total_points=10, remaining_points=4)

        assert partial.start_window(NOW).remaining_points == 4

    def test_with_remaining_clamps(self):
        """Test balance overrides stay within [0, total]."""
        billing = PointsBilling.create(10)

        assert billing.with_remaining(25).remaining_points == 10
        assert billing.with_remaining(-5).remaining_points == 0

    def test_balance_bounds_enforced(self):
        """Test a balance above total is rejected."""
        with pytest.raises(InvalidBillingConfigError):
            PointsBilling(total_points=5, remaining_points=6)
