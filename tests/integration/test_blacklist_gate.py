"""
Integration tests for BlacklistGate.
"""

import uuid

import pytest

from blacklist.domain.entry import DEFAULT_DEVICE_REASON, DEFAULT_IP_REASON
from core.domain.value_objects import DeviceStatus
from tenants.domain.tenant import Tenant


@pytest.mark.django_db(transaction=True)
@pytest.mark.integration
class TestBlacklistLookups:
    """Tests for device and IP lookups."""

    @pytest.mark.asyncio
    async def test_clear_by_default(self, services, db_tenant, fingerprint):
        """Test that nothing is banned on an empty blacklist."""
        device = await services.blacklist.is_device_blacklisted(fingerprint, db_tenant.id)
        ip = await services.blacklist.is_ip_blacklisted("10.0.0.1", db_tenant.id)

        assert not device.blacklisted
        assert not ip.blacklisted

    @pytest.mark.asyncio
    async def test_missing_ip_is_never_banned(self, services, db_tenant):
        """Test that a request without an IP passes the IP check."""
        (await services.blacklist.add_ip("10.0.0.1")).unwrap()

        assert not (await services.blacklist.is_ip_blacklisted(None, db_tenant.id)).blacklisted
        assert not (await services.blacklist.is_ip_blacklisted("", db_tenant.id)).blacklisted

    @pytest.mark.asyncio
    async def test_global_entry_applies_to_every_tenant(self, services, db_tenant, fingerprint):
        """Test that an entry without a tenant matches any tenant."""
        (await services.blacklist.add_device(fingerprint)).unwrap()

        check = await services.blacklist.is_device_blacklisted(fingerprint, db_tenant.id)

        assert check.blacklisted
        assert check.reason == DEFAULT_DEVICE_REASON

    @pytest.mark.asyncio
    async def test_tenant_entry_is_scoped(self, services, tenant_repository, db_tenant):
        """Test that a tenant entry does not leak into another tenant."""
        other = await tenant_repository.save(Tenant.create(name="Other"))
        (await services.blacklist.add_ip("192.0.2.10", "abuse", db_tenant.id)).unwrap()

        hit = await services.blacklist.is_ip_blacklisted("192.0.2.10", db_tenant.id)
        miss = await services.blacklist.is_ip_blacklisted("192.0.2.10", other.id)

        assert hit.blacklisted
        assert hit.reason == "abuse"
        assert not miss.blacklisted

    @pytest.mark.asyncio
    async def test_blank_reason_falls_back_to_default(self, services, db_tenant):
        """Test the default IP reason."""
        (await services.blacklist.add_ip("192.0.2.11", "  ", db_tenant.id)).unwrap()

        check = await services.blacklist.is_ip_blacklisted("192.0.2.11", db_tenant.id)

        assert check.reason == DEFAULT_IP_REASON


@pytest.mark.django_db(transaction=True)
@pytest.mark.integration
class TestBlacklistAdministration:
    """Tests for adding and removing entries."""

    @pytest.mark.asyncio
    async def test_add_device_flags_bound_devices(
        self, services, device_repository, db_duration_code, fingerprint
    ):
        """Test that banning a fingerprint marks its device blacklisted."""
        (await services.binding.bind(db_duration_code.id, fingerprint)).unwrap()

        (await services.blacklist.add_device(fingerprint, "chargeback")).unwrap()

        device = await device_repository.find_by_fingerprint(fingerprint)
        assert device.status == DeviceStatus.BLACKLISTED

    @pytest.mark.asyncio
    async def test_remove_last_entry_restores_device(
        self, services, device_repository, db_duration_code, fingerprint
    ):
        """Test that removing the only entry reactivates the device."""
        (await services.binding.bind(db_duration_code.id, fingerprint)).unwrap()
        entry = (await services.blacklist.add_device(fingerprint)).unwrap()

        removed = (await services.blacklist.remove_device(entry.id)).unwrap()

        assert removed.id == entry.id
        device = await device_repository.find_by_fingerprint(fingerprint)
        assert device.status == DeviceStatus.ACTIVE
        assert not (await services.blacklist.is_device_blacklisted(fingerprint)).blacklisted

    @pytest.mark.asyncio
    async def test_remove_keeps_flag_while_other_entries_exist(
        self, services, device_repository, db_tenant, db_duration_code, fingerprint
    ):
        """Test that a remaining entry keeps the device blacklisted."""
        (await services.binding.bind(db_duration_code.id, fingerprint)).unwrap()
        global_entry = (await services.blacklist.add_device(fingerprint)).unwrap()
        (await services.blacklist.add_device(fingerprint, tenant_id=db_tenant.id)).unwrap()

        (await services.blacklist.remove_device(global_entry.id)).unwrap()

        device = await device_repository.find_by_fingerprint(fingerprint)
        assert device.status == DeviceStatus.BLACKLISTED

    @pytest.mark.asyncio
    async def test_duplicate_in_scope(self, services, db_tenant):
        """Test that the same value cannot be banned twice in one scope."""
        (await services.blacklist.add_ip("192.0.2.12", tenant_id=db_tenant.id)).unwrap()

        duplicate = await services.blacklist.add_ip("192.0.2.12", tenant_id=db_tenant.id)
        global_entry = await services.blacklist.add_ip("192.0.2.12")

        assert duplicate.code == "ALREADY_BLACKLISTED"
        assert global_entry.ok

    @pytest.mark.asyncio
    async def test_invalid_values(self, services, transactional_db):
        """Test input validation."""
        bad_ip = await services.blacklist.add_ip("999.1.1.1")
        bad_fingerprint = await services.blacklist.add_device("short")

        assert bad_ip.code == "INVALID_IP"
        assert bad_fingerprint.code == "INVALID_FINGERPRINT"

    @pytest.mark.asyncio
    async def test_remove_missing(self, services, transactional_db):
        """Test removing an unknown entry."""
        device = await services.blacklist.remove_device(uuid.uuid4())
        ip = await services.blacklist.remove_ip(uuid.uuid4())

        assert device.code == "BLACKLIST_ENTRY_NOT_FOUND"
        assert ip.code == "BLACKLIST_ENTRY_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_remove_ip(self, services):
        """Test removing an IP entry lifts the ban."""
        entry = (await services.blacklist.add_ip("192.0.2.13")).unwrap()

        (await services.blacklist.remove_ip(entry.id)).unwrap()

        assert not (await services.blacklist.is_ip_blacklisted("192.0.2.13")).blacklisted
