"""Django model registry for the tenants app."""

from tenants.infrastructure.models import Tenant  # noqa: F401
