"""Django model registry for the presence app."""

from presence.infrastructure.models import OnlineSession  # noqa: F401
