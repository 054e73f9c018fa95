"""
Licensing runtime configuration.

Values are read once from the ``LICENSING`` Django setting and passed
explicitly to the services that need them.
"""
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional

from django.conf import settings


@dataclass(frozen=True)
class LicensingConfig:
    """Shared licensing parameters."""

    heartbeat_timeout_seconds: int = 30
    token_ttl_hours: int = 24
    sweep_interval_seconds: int = 60
    code_generation_max_attempts: int = 100

    def __post_init__(self):
        """Validate configuration."""
        if self.heartbeat_timeout_seconds < 1:
            raise ValueError("heartbeat_timeout_seconds must be positive")
        if self.token_ttl_hours < 1:
            raise ValueError("token_ttl_hours must be positive")
        if self.sweep_interval_seconds < 1:
            raise ValueError("sweep_interval_seconds must be positive")
        if self.code_generation_max_attempts < 1:
            raise ValueError("code_generation_max_attempts must be positive")

    @classmethod
    def from_settings(cls, overrides: Optional[Dict[str, Any]] = None) -> "LicensingConfig":
        """
        Build config from the LICENSING setting.

        Args:
            overrides: Optional values taking precedence over settings

        Returns:
            LicensingConfig instance
        """
        known = {f.name for f in fields(cls)}
        values = dict(getattr(settings, "LICENSING", {}) or {})
        values.update(overrides or {})
        return cls(**{key: int(value) for key, value in values.items() if key in known})
