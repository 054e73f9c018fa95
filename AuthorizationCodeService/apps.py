"""
App configuration for Authorization Code Service.
"""

import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class AuthorizationCodeServiceConfig(AppConfig):
    """App configuration for AuthorizationCodeService."""

    name = "AuthorizationCodeService"
    verbose_name = "Authorization Code Service"

    def ready(self):
        """Register domain event handlers once apps are loaded."""
        from core.infrastructure.event_handlers import register_event_handlers

        register_event_handlers()
