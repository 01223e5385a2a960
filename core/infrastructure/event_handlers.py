"""
Event handlers for license key domain events.

These handlers process domain events for side effects
like audit logging.
"""

import logging

from core.domain.events import DomainEvent, EventHandler
from core.infrastructure.events import event_bus
from licenses.domain.events import (
    LicenseKeyActivated,
    LicenseKeyGenerated,
    LicenseKeySuperseded,
)

logger = logging.getLogger(__name__)


class AuditLogEventHandler(EventHandler):
    """Writes every lifecycle event to the structured audit log."""

    async def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event for audit logging.

        Args:
            event: Domain event to log
        """
        logger.info(
            "Audit log: %s - %s",
            event.event_type,
            event.aggregate_id,
            extra={
                "event_id": str(event.event_id),
                "event_type": event.event_type,
                "aggregate_id": event.aggregate_id,
                "occurred_at": event.occurred_at.isoformat(),
                "payload": event.payload,
            },
        )


def register_event_handlers():
    """Register event handlers with the event bus."""
    audit_handler = AuditLogEventHandler()

    for event_type in (LicenseKeyGenerated, LicenseKeyActivated, LicenseKeySuperseded):
        event_bus.subscribe(event_type, audit_handler)

    logger.info("Event handlers registered")
