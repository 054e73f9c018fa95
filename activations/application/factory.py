"""
Wiring of domain services to the Django repositories.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from django.utils import timezone

from activations.application.handlers.activate_license_handler import ActivateLicenseHandler
from activations.application.handlers.deduct_points_handler import DeductPointsHandler
from activations.application.handlers.heartbeat_handler import HeartbeatHandler
from activations.application.handlers.rebind_device_handler import RebindDeviceHandler
from activations.application.handlers.verify_license_handler import VerifyLicenseHandler
from activations.domain.services import ActivationEngine
from blacklist.domain.services import BlacklistGate
from blacklist.infrastructure.repositories.django_blacklist_repository import (
    DjangoBlacklistRepository,
)
from core.config import LicensingConfig
from devices.domain.services import DeviceBindingManager
from devices.infrastructure.repositories.django_device_repository import DjangoDeviceRepository
from licenses.domain.services import LicenseRegistry
from licenses.infrastructure.repositories.django_authorization_code_repository import (
    DjangoAuthorizationCodeRepository,
)
from licenses.infrastructure.repositories.django_point_deduction_repository import (
    DjangoPointDeductionRepository,
)
from presence.domain.services import SessionManager
from presence.infrastructure.repositories.django_session_repository import (
    DjangoSessionRepository,
)
from tenants.infrastructure.repositories.django_tenant_repository import DjangoTenantRepository


@dataclass(frozen=True)
class LicensingServices:
    """Domain services and client flow handlers sharing one config and clock."""

    registry: LicenseRegistry
    blacklist: BlacklistGate
    binding: DeviceBindingManager
    engine: ActivationEngine
    sessions: SessionManager
    activate: ActivateLicenseHandler
    rebind: RebindDeviceHandler
    verify: VerifyLicenseHandler
    deduct_points: DeductPointsHandler
    heartbeat: HeartbeatHandler


def build_services(
    config: Optional[LicensingConfig] = None,
    clock: Callable[[], datetime] = timezone.now,
) -> LicensingServices:
    """
    Build every service on top of the Django repositories.

    Args:
        config: Licensing config (defaults to the LICENSING setting)
        clock: Time source shared by all services

    Returns:
        LicensingServices
    """
    config = config or LicensingConfig.from_settings()
    code_repository = DjangoAuthorizationCodeRepository()
    device_repository = DjangoDeviceRepository()
    tenant_repository = DjangoTenantRepository()

    registry = LicenseRegistry(code_repository, tenant_repository, config=config, clock=clock)
    gate = BlacklistGate(DjangoBlacklistRepository(), device_repository)
    binding = DeviceBindingManager(
        device_repository, code_repository, tenant_repository, gate, clock=clock
    )
    engine = ActivationEngine(
        code_repository,
        device_repository,
        tenant_repository,
        gate,
        binding,
        DjangoPointDeductionRepository(),
        config=config,
        clock=clock,
    )
    sessions = SessionManager(DjangoSessionRepository(), config=config, clock=clock)

    return LicensingServices(
        registry=registry,
        blacklist=gate,
        binding=binding,
        engine=engine,
        sessions=sessions,
        activate=ActivateLicenseHandler(engine, sessions),
        rebind=RebindDeviceHandler(binding, sessions),
        verify=VerifyLicenseHandler(engine),
        deduct_points=DeductPointsHandler(engine),
        heartbeat=HeartbeatHandler(sessions),
    )
