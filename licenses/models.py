"""Django model registry for the licenses app."""

from licenses.infrastructure.models import AuthorizationCode, PointDeductionRecord  # noqa: F401
