"""
License key domain events.

Domain events represent something that happened to a license key.
"""

import uuid
from datetime import datetime
from typing import Optional

from core.domain.events import DomainEvent


class LicenseKeyGenerated(DomainEvent):
    """Event raised when a license key is issued."""

    def __init__(
        self,
        license_key_id: uuid.UUID,
        service_id: str,
        plan_id: uuid.UUID,
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(
            aggregate_id=str(license_key_id),
            payload={"service_id": service_id, "plan_id": str(plan_id)},
            occurred_at=occurred_at,
        )


class LicenseKeyActivated(DomainEvent):
    """Event raised when a license key is bound to an identifier."""

    def __init__(
        self,
        license_key_id: uuid.UUID,
        service_id: str,
        identifier: str,
        expires_at: datetime,
        chained_from: Optional[uuid.UUID] = None,
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize LicenseKeyActivated event.

        Args:
            license_key_id: Activated license key UUID
            service_id: Owning service
            identifier: Binding target
            expires_at: Computed expiry
            chained_from: UUID of the superseded key, when time was carried over
            occurred_at: When the event occurred
        """
        super().__init__(
            aggregate_id=str(license_key_id),
            payload={
                "service_id": service_id,
                "identifier": identifier,
                "expires_at": expires_at.isoformat(),
                "chained_from": str(chained_from) if chained_from else None,
            },
            occurred_at=occurred_at,
        )


class LicenseKeySuperseded(DomainEvent):
    """Event raised when an activation truncates an older key for the same identifier."""

    def __init__(
        self,
        license_key_id: uuid.UUID,
        superseded_by: uuid.UUID,
        previous_expires_at: datetime,
        expires_at: datetime,
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(
            aggregate_id=str(license_key_id),
            payload={
                "superseded_by": str(superseded_by),
                "previous_expires_at": previous_expires_at.isoformat(),
                "expires_at": expires_at.isoformat(),
            },
            occurred_at=occurred_at,
        )
