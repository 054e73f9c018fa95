"""Django model registry for the blacklist app."""

from blacklist.infrastructure.models import DeviceBlacklistEntry, IpBlacklistEntry  # noqa: F401
