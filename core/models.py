"""Django model registry for the core app."""

from core.infrastructure.models import AuthLog  # noqa: F401
