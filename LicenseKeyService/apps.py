"""
App configuration for License Key Service.
"""

import logging
import os
import sys

from django.apps import AppConfig
from django.conf import settings

logger = logging.getLogger(__name__)

# Management commands that never serve requests.
SKIP_OBSERVABILITY_COMMANDS = ["migrate", "makemigrations", "collectstatic", "check"]


class LicenseKeyServiceConfig(AppConfig):
    """App configuration for LicenseKeyService."""

    name = "LicenseKeyService"
    verbose_name = "License Key Service"

    def ready(self):
        """Called when Django starts."""
        from core.infrastructure.event_handlers import register_event_handlers

        register_event_handlers()

        if not settings.OBSERVABILITY_ENABLED:
            return
        if len(sys.argv) > 1 and sys.argv[1] in SKIP_OBSERVABILITY_COMMANDS:
            return
        # Django's autoreloader imports the project twice; only the child serves.
        if os.environ.get("RUN_MAIN") == "false":
            return

        from core.instrumentation import setup_opentelemetry

        logger.info("Setting up observability...")
        setup_opentelemetry()
        logger.info("Observability setup complete")
