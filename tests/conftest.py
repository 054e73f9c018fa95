"""
Pytest configuration and shared fixtures.
"""

import asyncio
import uuid
from datetime import timedelta

import pytest
from django.utils import timezone

from activations.application.factory import build_services
from blacklist.infrastructure.repositories.django_blacklist_repository import (
    DjangoBlacklistRepository,
)
from core.config import LicensingConfig
from core.infrastructure.events import event_bus
from devices.domain.fingerprint import FingerprintValidator
from devices.infrastructure.repositories.django_device_repository import DjangoDeviceRepository
from licenses.domain.billing import DurationBilling, PointsBilling
from licenses.infrastructure.repositories.django_authorization_code_repository import (
    DjangoAuthorizationCodeRepository,
)
from licenses.infrastructure.repositories.django_point_deduction_repository import (
    DjangoPointDeductionRepository,
)
from presence.infrastructure.repositories.django_session_repository import (
    DjangoSessionRepository,
)
from tenants.domain.tenant import Tenant
from tenants.infrastructure.repositories.django_tenant_repository import DjangoTenantRepository


class FrozenClock:
    """Controllable time source for services."""

    def __init__(self, now=None):
        self.now = now or timezone.now().replace(microsecond=0)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)
        return self.now


def make_fingerprint(seed: str) -> str:
    """Deterministic fingerprint for a seed."""
    return FingerprintValidator.generate(
        {
            "cpu_id": f"cpu-{seed}",
            "board_serial": f"board-{seed}",
            "disk_serial": f"disk-{seed}",
            "mac_address": f"00:11:22:33:44:{seed[:2]}",
            "platform": "windows",
        }
    )


@pytest.fixture(autouse=True)
def isolated_event_bus():
    """Start every test without subscriptions."""
    event_bus.clear()
    yield event_bus
    event_bus.clear()


@pytest.fixture
def tenant_repository():
    """Fixture for TenantRepository."""
    return DjangoTenantRepository()


@pytest.fixture
def code_repository():
    """Fixture for AuthorizationCodeRepository."""
    return DjangoAuthorizationCodeRepository()


@pytest.fixture
def device_repository():
    """Fixture for DeviceRepository."""
    return DjangoDeviceRepository()


@pytest.fixture
def blacklist_repository():
    """Fixture for BlacklistRepository."""
    return DjangoBlacklistRepository()


@pytest.fixture
def session_repository():
    """Fixture for SessionRepository."""
    return DjangoSessionRepository()


@pytest.fixture
def deduction_repository():
    """Fixture for PointDeductionRepository."""
    return DjangoPointDeductionRepository()


@pytest.fixture
def clock():
    """Fixture for a frozen clock."""
    return FrozenClock()


@pytest.fixture
def config():
    """Fixture for licensing config."""
    return LicensingConfig(heartbeat_timeout_seconds=30, token_ttl_hours=24)


@pytest.fixture
def services(config, clock):
    """Fixture for every service wired to the Django repositories."""
    return build_services(config=config, clock=clock)


@pytest.fixture
def fingerprint():
    """Fixture for a valid fingerprint."""
    return make_fingerprint("a1")


@pytest.fixture
def other_fingerprint():
    """Fixture for a second valid fingerprint."""
    return make_fingerprint("b2")


@pytest.fixture
def fingerprint_factory():
    """Fixture for building fingerprints from a seed."""
    return make_fingerprint


@pytest.fixture
def device_info():
    """Fixture for hardware descriptors."""
    return {
        "platform": "windows",
        "os_version": "11",
        "cpu_id": "cpu-a1",
        "board_serial": "board-a1",
        "disk_serial": "disk-a1",
        "mac_address": "00:11:22:33:44:a1",
        "region": "eu",
    }


@pytest.fixture
def db_tenant(transactional_db, tenant_repository):
    """Fixture for a Tenant saved in database."""

    async def save_tenant():
        unique_id = uuid.uuid4().hex[:8]
        return await tenant_repository.save(Tenant.create(name=f"Tenant{unique_id}"))

    return asyncio.run(save_tenant())


@pytest.fixture
def db_duration_code(transactional_db, db_tenant, services):
    """Fixture for an unused one-day code with one device and no rebinds."""

    async def generate():
        outcome = await services.registry.generate_batch(
            db_tenant.id,
            DurationBilling(),
            count=1,
            device_quota=1,
            rebind_quota=0,
        )
        return outcome.unwrap()[0]

    return asyncio.run(generate())


@pytest.fixture
def db_points_code(transactional_db, db_tenant, services):
    """Fixture for an unused 10-point code charging 3 per use."""

    async def generate():
        outcome = await services.registry.generate_batch(
            db_tenant.id,
            PointsBilling.create(total_points=10, deduct_amount=3),
            count=1,
        )
        return outcome.unwrap()[0]

    return asyncio.run(generate())
