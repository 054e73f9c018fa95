"""
Integration tests for DeviceBindingManager.
"""

import uuid

import pytest

from core.domain.value_objects import DeviceStatus
from tenants.domain.tenant import Tenant


async def issue_active_code(services, tenant_id, fingerprint, **kwargs):
    """Generate one duration code and activate it on ``fingerprint``."""
    code = (await services.registry.generate_batch(tenant_id, **kwargs)).unwrap()[0]
    (await services.engine.activate(code.code, fingerprint)).unwrap()
    return (await services.registry.get_code(code.id)).unwrap()


@pytest.mark.django_db(transaction=True)
@pytest.mark.integration
class TestBind:
    """Tests for binding and quota checks."""

    @pytest.mark.asyncio
    async def test_bind_is_idempotent(self, services, db_duration_code, fingerprint, device_info):
        """Test that binding twice keeps a single device row."""
        first = (
            await services.binding.bind(db_duration_code.id, fingerprint, device_info, "10.0.0.1")
        ).unwrap()
        second = (await services.binding.bind(db_duration_code.id, fingerprint)).unwrap()

        assert first.id == second.id
        assert second.info.cpu_id == "cpu-a1"
        assert second.status == DeviceStatus.ACTIVE
        bound = (await services.binding.list_bound(db_duration_code.id)).unwrap()
        assert [device.id for device in bound] == [first.id]

    @pytest.mark.asyncio
    async def test_bind_rejects_malformed_fingerprint(self, services, db_duration_code):
        """Test fingerprint validation before any lookup."""
        outcome = await services.binding.bind(db_duration_code.id, "not-a-fingerprint")

        assert outcome.code == "INVALID_FINGERPRINT"

    @pytest.mark.asyncio
    async def test_fingerprint_case_is_ignored(
        self, services, db_tenant, device_repository, fingerprint
    ):
        """Test that one fingerprint in two letter cases stays one device."""
        code = (await services.registry.generate_batch(db_tenant.id, device_quota=2)).unwrap()[0]

        first = (await services.engine.activate(code.code, fingerprint)).unwrap()
        second = (await services.engine.activate(code.code, fingerprint.upper())).unwrap()

        assert second.is_new_activation is False
        assert second.device.id == first.device.id
        assert await device_repository.count_bound(code.id) == 1
        stored = await device_repository.find_by_fingerprint(fingerprint)
        assert stored.fingerprint == fingerprint

    @pytest.mark.asyncio
    async def test_bind_to_other_tenant_moves_device(
        self, services, tenant_repository, device_repository, db_duration_code, fingerprint
    ):
        """Test that binding to another tenant's code moves the device to that tenant."""
        other_tenant = await tenant_repository.save(Tenant.create(name="Other tenant"))
        other_code = (await services.registry.generate_batch(other_tenant.id)).unwrap()[0]
        (await services.binding.bind(db_duration_code.id, fingerprint)).unwrap()

        moved = (await services.binding.bind(other_code.id, fingerprint)).unwrap()

        assert moved.tenant_id == other_tenant.id
        (await services.blacklist.add_device(fingerprint, tenant_id=other_tenant.id)).unwrap()
        stored = await device_repository.find_by_fingerprint(fingerprint)
        assert stored.status == DeviceStatus.BLACKLISTED

    @pytest.mark.asyncio
    async def test_bind_unknown_code(self, services, fingerprint, transactional_db):
        """Test binding to a missing code."""
        outcome = await services.binding.bind(uuid.uuid4(), fingerprint)

        assert outcome.code == "CODE_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_has_capacity_ignores_bound_fingerprint(
        self, services, db_duration_code, fingerprint, other_fingerprint
    ):
        """Test that a full code still accepts the fingerprint it holds."""
        (await services.binding.bind(db_duration_code.id, fingerprint)).unwrap()

        assert await services.binding.has_capacity(db_duration_code, fingerprint) is True
        assert await services.binding.has_capacity(db_duration_code, other_fingerprint) is False


@pytest.mark.django_db(transaction=True)
@pytest.mark.integration
class TestUnbindAdmin:
    """Tests for administrative unbind."""

    @pytest.mark.asyncio
    async def test_unbind_frees_quota(
        self, services, db_tenant, fingerprint, other_fingerprint
    ):
        """Test that an unbound slot can be reused without spending a rebind."""
        code = await issue_active_code(services, db_tenant.id, fingerprint)
        device = (await services.binding.list_bound(code.id)).unwrap()[0]

        unbound = (await services.binding.unbind_admin(code.id, device.id)).unwrap()
        assert unbound.status == DeviceStatus.INACTIVE
        assert unbound.bound_code_id is None

        outcome = await services.engine.activate(code.code, other_fingerprint)
        assert outcome.ok
        reloaded = (await services.registry.get_code(code.id)).unwrap()
        assert reloaded.rebind_count == 0

    @pytest.mark.asyncio
    async def test_unbind_twice(self, services, db_duration_code, fingerprint):
        """Test that a released device cannot be unbound again."""
        device = (await services.binding.bind(db_duration_code.id, fingerprint)).unwrap()
        (await services.binding.unbind_admin(db_duration_code.id, device.id)).unwrap()

        outcome = await services.binding.unbind_admin(db_duration_code.id, device.id)

        assert outcome.code == "DEVICE_NOT_BOUND"


@pytest.mark.django_db(transaction=True)
@pytest.mark.integration
class TestRebind:
    """Tests for moving a code to a new device."""

    @pytest.mark.asyncio
    async def test_rebind_success(self, services, db_tenant, fingerprint, other_fingerprint):
        """Test that the old device is released and the new one bound."""
        code = await issue_active_code(services, db_tenant.id, fingerprint, rebind_quota=1)

        result = (
            await services.binding.rebind(code.code, fingerprint, other_fingerprint, ip="10.0.0.9")
        ).unwrap()

        assert result.code.rebind_count == 1
        assert result.old_device.status == DeviceStatus.INACTIVE
        assert result.old_device.bound_code_id is None
        assert result.new_device.fingerprint == other_fingerprint
        assert result.new_device.bound_code_id == code.id
        assert result.new_device.last_ip == "10.0.0.9"
        bound = (await services.binding.list_bound(code.id)).unwrap()
        assert [device.fingerprint for device in bound] == [other_fingerprint]

    @pytest.mark.asyncio
    async def test_rebind_limit(
        self, services, db_tenant, fingerprint, other_fingerprint, fingerprint_factory
    ):
        """Test that the rebind quota is enforced."""
        code = await issue_active_code(services, db_tenant.id, fingerprint, rebind_quota=1)
        (await services.binding.rebind(code.code, fingerprint, other_fingerprint)).unwrap()

        outcome = await services.binding.rebind(
            code.code, other_fingerprint, fingerprint_factory("c3")
        )

        assert outcome.code == "REBIND_LIMIT_REACHED"
        reloaded = (await services.registry.get_code(code.id)).unwrap()
        assert reloaded.rebind_count == 1

    @pytest.mark.asyncio
    async def test_rebind_without_quota(self, services, db_tenant, fingerprint, other_fingerprint):
        """Test that a code issued without rebinds cannot move."""
        code = await issue_active_code(services, db_tenant.id, fingerprint)

        outcome = await services.binding.rebind(code.code, fingerprint, other_fingerprint)

        assert outcome.code == "REBIND_LIMIT_REACHED"

    @pytest.mark.asyncio
    async def test_old_device_not_bound(
        self, services, db_tenant, fingerprint, other_fingerprint, fingerprint_factory
    ):
        """Test that failed checks leave the counter untouched."""
        code = await issue_active_code(services, db_tenant.id, fingerprint, rebind_quota=2)

        outcome = await services.binding.rebind(
            code.code, fingerprint_factory("c3"), other_fingerprint
        )

        assert outcome.code == "DEVICE_NOT_BOUND"
        reloaded = (await services.registry.get_code(code.id)).unwrap()
        assert reloaded.rebind_count == 0

    @pytest.mark.asyncio
    async def test_new_device_already_bound(
        self, services, db_tenant, fingerprint, other_fingerprint
    ):
        """Test that both fingerprints bound to the code is a conflict."""
        code = await issue_active_code(
            services, db_tenant.id, fingerprint, device_quota=2, rebind_quota=1
        )
        (await services.engine.activate(code.code, other_fingerprint)).unwrap()

        outcome = await services.binding.rebind(code.code, fingerprint, other_fingerprint)

        assert outcome.code == "DEVICE_ALREADY_BOUND"

    @pytest.mark.asyncio
    async def test_unused_code(self, services, db_duration_code, fingerprint, other_fingerprint):
        """Test that only an active code can be rebound."""
        outcome = await services.binding.rebind(
            db_duration_code.code, fingerprint, other_fingerprint
        )

        assert outcome.code == "CODE_NOT_ACTIVATED"

    @pytest.mark.asyncio
    async def test_malformed_new_fingerprint(self, services, db_duration_code, fingerprint):
        """Test new fingerprint validation."""
        outcome = await services.binding.rebind(db_duration_code.code, fingerprint, "xyz")

        assert outcome.code == "INVALID_FINGERPRINT"

    @pytest.mark.asyncio
    async def test_blacklisted_new_device(
        self, services, db_tenant, fingerprint, other_fingerprint
    ):
        """Test that a banned fingerprint cannot take over a code."""
        code = await issue_active_code(services, db_tenant.id, fingerprint, rebind_quota=1)
        (await services.blacklist.add_device(other_fingerprint, "stolen", db_tenant.id)).unwrap()

        outcome = await services.binding.rebind(code.code, fingerprint, other_fingerprint)

        assert outcome.code == "DEVICE_BLACKLISTED"
        assert outcome.message == "stolen"

    @pytest.mark.asyncio
    async def test_disabled_tenant(
        self, services, tenant_repository, db_tenant, fingerprint, other_fingerprint
    ):
        """Test that a disabled tenant blocks rebinds."""
        code = await issue_active_code(services, db_tenant.id, fingerprint, rebind_quota=1)
        await tenant_repository.save(db_tenant.disable())

        outcome = await services.binding.rebind(code.code, fingerprint, other_fingerprint)

        assert outcome.code == "TENANT_DISABLED"
