"""
Integration tests for ActivationEngine.
"""

from datetime import timedelta

import pytest

from core.domain.value_objects import ActivateMode, CardType, CodeStatus
from licenses.domain.billing import DurationBilling


@pytest.mark.django_db(transaction=True)
@pytest.mark.integration
class TestActivate:
    """Tests for client activation."""

    @pytest.mark.asyncio
    async def test_first_activation(self, services, db_duration_code, fingerprint, device_info, clock):
        """Test unused -> active with a window opened at activation time."""
        outcome = await services.engine.activate(
            db_duration_code.code, fingerprint, device_info, "10.0.0.1"
        )

        result = outcome.unwrap()
        assert result.is_new_activation is True
        assert result.code.status == CodeStatus.ACTIVE
        assert result.code.used_time == clock()
        assert result.code.expire_time == clock() + timedelta(days=1)
        assert result.device.fingerprint == fingerprint
        assert result.device.bound_code_id == db_duration_code.id

    @pytest.mark.asyncio
    async def test_month_card_is_thirty_days(self, services, db_tenant, fingerprint, clock):
        """Test the fixed-length month window."""
        code = (
            await services.registry.generate_batch(
                db_tenant.id, DurationBilling(card_type=CardType.MONTH, duration=1)
            )
        ).unwrap()[0]

        result = (await services.engine.activate(code.code, fingerprint)).unwrap()

        assert result.code.expire_time == clock() + timedelta(days=30)

    @pytest.mark.asyncio
    async def test_scheduled_window_is_kept(self, services, db_tenant, fingerprint, clock):
        """Test that a scheduled code keeps its precomputed window."""
        start = clock() - timedelta(days=1)
        code = (
            await services.registry.generate_batch(
                db_tenant.id,
                DurationBilling(
                    card_type=CardType.WEEK, activate_mode=ActivateMode.SCHEDULED, start_time=start
                ),
            )
        ).unwrap()[0]
        assert code.expire_time == start + timedelta(days=7)

        result = (await services.engine.activate(code.code, fingerprint)).unwrap()

        assert result.code.expire_time == start + timedelta(days=7)
        assert result.code.used_time == clock()

    @pytest.mark.asyncio
    async def test_repeat_activation_changes_nothing(
        self, services, db_duration_code, fingerprint, clock
    ):
        """Test that the same fingerprint activating again is a no-op."""
        first = (await services.engine.activate(db_duration_code.code, fingerprint)).unwrap()
        clock.advance(hours=2)

        again = (await services.engine.activate(db_duration_code.code, fingerprint)).unwrap()

        assert again.is_new_activation is False
        assert again.device.id == first.device.id
        assert again.code.used_time == first.code.used_time
        assert again.code.expire_time == first.code.expire_time

    @pytest.mark.asyncio
    async def test_device_limit(self, services, db_duration_code, fingerprint, other_fingerprint):
        """Test that a second device is refused on a one-device code."""
        (await services.engine.activate(db_duration_code.code, fingerprint)).unwrap()

        outcome = await services.engine.activate(db_duration_code.code, other_fingerprint)

        assert outcome.code == "DEVICE_LIMIT_REACHED"
        assert "max 1" in outcome.message

    @pytest.mark.asyncio
    async def test_unknown_code(self, services, fingerprint, transactional_db):
        """Test activation of a missing code."""
        outcome = await services.engine.activate("ZZZZ-ZZZZ-ZZZZ-ZZZZ", fingerprint)

        assert outcome.code == "CODE_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_malformed_fingerprint(self, services, db_duration_code):
        """Test that the fingerprint is checked first."""
        outcome = await services.engine.activate(db_duration_code.code, "ABC")

        assert outcome.code == "INVALID_FINGERPRINT"

    @pytest.mark.asyncio
    async def test_disabled_tenant(
        self, services, tenant_repository, db_tenant, db_duration_code, fingerprint
    ):
        """Test that a disabled tenant blocks activation."""
        await tenant_repository.save(db_tenant.disable())

        outcome = await services.engine.activate(db_duration_code.code, fingerprint)

        assert outcome.code == "TENANT_DISABLED"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status, expected",
        [("disabled", "CODE_DISABLED"), ("expired", "CODE_EXPIRED")],
    )
    async def test_inactive_status(self, services, db_duration_code, fingerprint, status, expected):
        """Test that disabled and expired codes refuse activation."""
        (await services.registry.update_code(db_duration_code.id, {"status": status})).unwrap()

        outcome = await services.engine.activate(db_duration_code.code, fingerprint)

        assert outcome.code == expected

    @pytest.mark.asyncio
    async def test_blacklisted_device(self, services, db_tenant, db_duration_code, fingerprint):
        """Test that a banned fingerprint cannot activate and the code stays unused."""
        (await services.blacklist.add_device(fingerprint, "fraud", db_tenant.id)).unwrap()

        outcome = await services.engine.activate(db_duration_code.code, fingerprint)

        assert outcome.code == "DEVICE_BLACKLISTED"
        assert outcome.message == "fraud"
        code = (await services.registry.get_code(db_duration_code.id)).unwrap()
        assert code.status == CodeStatus.UNUSED

    @pytest.mark.asyncio
    async def test_blacklist_ignores_fingerprint_case(
        self, services, db_tenant, db_duration_code, fingerprint
    ):
        """Test that a ban matches the fingerprint whatever its letter case."""
        (await services.blacklist.add_device(fingerprint.upper(), "fraud", db_tenant.id)).unwrap()

        upper = await services.engine.activate(db_duration_code.code, fingerprint.upper())
        lower = await services.engine.activate(db_duration_code.code, fingerprint)

        assert upper.code == "DEVICE_BLACKLISTED"
        assert lower.code == "DEVICE_BLACKLISTED"

    @pytest.mark.asyncio
    async def test_blacklisted_ip(self, services, db_duration_code, fingerprint):
        """Test that a banned IP cannot activate."""
        (await services.blacklist.add_ip("203.0.113.50")).unwrap()

        outcome = await services.engine.activate(
            db_duration_code.code, fingerprint, ip="203.0.113.50"
        )

        assert outcome.code == "IP_BLACKLISTED"


@pytest.mark.django_db(transaction=True)
@pytest.mark.integration
class TestVerify:
    """Tests for client verification."""

    @pytest.mark.asyncio
    async def test_remaining_seconds(self, services, db_duration_code, fingerprint, clock):
        """Test the remaining time of a duration code."""
        (await services.engine.activate(db_duration_code.code, fingerprint)).unwrap()
        clock.advance(hours=1)

        result = (await services.engine.verify(db_duration_code.code, fingerprint)).unwrap()

        assert result.remaining_seconds == 23 * 3600
        assert result.device.fingerprint == fingerprint

    @pytest.mark.asyncio
    async def test_lazy_expiry_is_persisted(self, services, db_duration_code, fingerprint, clock):
        """Test that verifying past the expiry expires the code."""
        (await services.engine.activate(db_duration_code.code, fingerprint)).unwrap()
        clock.advance(days=1, seconds=1)

        outcome = await services.engine.verify(db_duration_code.code, fingerprint)

        assert outcome.code == "CODE_EXPIRED"
        code = (await services.registry.get_code(db_duration_code.id)).unwrap()
        assert code.status == CodeStatus.EXPIRED

    @pytest.mark.asyncio
    async def test_exact_expiry_still_valid(self, services, db_duration_code, fingerprint, clock):
        """Test that the expiry instant itself is still inside the window."""
        (await services.engine.activate(db_duration_code.code, fingerprint)).unwrap()
        clock.advance(days=1)

        result = (await services.engine.verify(db_duration_code.code, fingerprint)).unwrap()

        assert result.remaining_seconds == 0

    @pytest.mark.asyncio
    async def test_unused_code(self, services, db_duration_code, fingerprint):
        """Test that an unused code cannot be verified."""
        outcome = await services.engine.verify(db_duration_code.code, fingerprint)

        assert outcome.code == "CODE_NOT_ACTIVATED"

    @pytest.mark.asyncio
    async def test_unbound_device(
        self, services, db_tenant, fingerprint, other_fingerprint
    ):
        """Test that only a bound device passes verification."""
        code = (await services.registry.generate_batch(db_tenant.id, device_quota=2)).unwrap()[0]
        (await services.engine.activate(code.code, fingerprint)).unwrap()

        outcome = await services.engine.verify(code.code, other_fingerprint)

        assert outcome.code == "DEVICE_NOT_BOUND"

    @pytest.mark.asyncio
    async def test_blacklisted_after_activation(self, services, db_duration_code, fingerprint):
        """Test that a ban placed after activation blocks verification."""
        (await services.engine.activate(db_duration_code.code, fingerprint)).unwrap()
        (await services.blacklist.add_device(fingerprint)).unwrap()

        outcome = await services.engine.verify(db_duration_code.code, fingerprint)

        assert outcome.code == "DEVICE_BLACKLISTED"

    @pytest.mark.asyncio
    async def test_points_code_has_no_remaining_seconds(self, services, db_points_code, fingerprint):
        """Test verification of a points code."""
        (await services.engine.activate(db_points_code.code, fingerprint)).unwrap()

        result = (await services.engine.verify(db_points_code.code, fingerprint)).unwrap()

        assert result.remaining_seconds is None
        assert result.code.remaining_points == 10

    @pytest.mark.asyncio
    async def test_empty_balance_expires_on_verify(self, services, db_points_code, fingerprint):
        """Test that an active code with no points left expires when verified."""
        (await services.engine.activate(db_points_code.code, fingerprint)).unwrap()
        (await services.registry.update_code(db_points_code.id, {"remaining_points": 0})).unwrap()

        outcome = await services.engine.verify(db_points_code.code, fingerprint)

        assert outcome.code == "POINTS_EXHAUSTED"
        code = (await services.registry.get_code(db_points_code.id)).unwrap()
        assert code.status == CodeStatus.EXPIRED


@pytest.mark.django_db(transaction=True)
@pytest.mark.integration
class TestDeductPoints:
    """Tests for point deduction."""

    async def _activate(self, services, code, fingerprint):
        return (await services.engine.activate(code.code, fingerprint)).unwrap()

    @pytest.mark.asyncio
    async def test_default_amount(
        self, services, deduction_repository, db_points_code, fingerprint
    ):
        """Test that the code's deduct amount is charged by default."""
        activation = await self._activate(services, db_points_code, fingerprint)

        result = (
            await services.engine.deduct_points(
                db_points_code.id, reason="export", device_id=activation.device.id, ip="10.0.0.2"
            )
        ).unwrap()

        assert result.amount == 3
        assert result.remaining_points == 7
        assert result.code.status == CodeStatus.ACTIVE
        records = await deduction_repository.find_by_code(db_points_code.id)
        assert len(records) == 1
        assert records[0].amount == 3
        assert records[0].remaining_points == 7
        assert records[0].device_id == activation.device.id
        assert records[0].reason == "export"

    @pytest.mark.asyncio
    async def test_draining_balance_expires_code(self, services, db_points_code, fingerprint):
        """Test that reaching zero expires the code in the same update."""
        await self._activate(services, db_points_code, fingerprint)

        result = (await services.engine.deduct_points(db_points_code.id, amount=10)).unwrap()

        assert result.remaining_points == 0
        assert result.code.status == CodeStatus.EXPIRED
        assert (await services.engine.deduct_points(db_points_code.id, 1)).code == "CODE_EXPIRED"

    @pytest.mark.asyncio
    async def test_insufficient_points(self, services, db_points_code, fingerprint):
        """Test that an overdraft is refused without touching the balance."""
        await self._activate(services, db_points_code, fingerprint)

        outcome = await services.engine.deduct_points(db_points_code.id, amount=11)

        assert outcome.code == "INSUFFICIENT_POINTS"
        code = (await services.registry.get_code(db_points_code.id)).unwrap()
        assert code.remaining_points == 10

    @pytest.mark.asyncio
    async def test_invalid_amount(self, services, db_points_code, fingerprint):
        """Test that a non-positive amount is refused."""
        await self._activate(services, db_points_code, fingerprint)

        outcome = await services.engine.deduct_points(db_points_code.id, amount=0)

        assert outcome.code == "INVALID_AMOUNT"

    @pytest.mark.asyncio
    async def test_unused_code(self, services, db_points_code):
        """Test that an unused code cannot be charged."""
        outcome = await services.engine.deduct_points(db_points_code.id)

        assert outcome.code == "CODE_NOT_ACTIVATED"

    @pytest.mark.asyncio
    async def test_duration_code(self, services, db_duration_code, fingerprint):
        """Test that a duration code has no balance."""
        await self._activate(services, db_duration_code, fingerprint)

        outcome = await services.engine.deduct_points(db_duration_code.id, 1)

        assert outcome.code == "NOT_POINTS_CODE"
