"""
LicenseKey domain entity.

This is the core domain entity representing an issued license key.
It contains business logic and is independent of infrastructure.
"""

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

from core.domain.exceptions import LicenseAlreadyActiveError
from core.domain.value_objects import ExtraValue, LicenseKeyState, ServiceId, clean_extra
from plans.domain.plan import Plan


@dataclass(frozen=True)
class LicenseKey:
    """
    LicenseKey domain entity.

    A key starts ``issued``; activation binds it to an identifier and
    starts its expiry clock. The entity is immutable: every transition
    returns a new instance, and ``version`` is the concurrency token the
    record store compares before writing.
    """

    id: uuid.UUID
    value: str
    service_id: str
    plan: Optional[Plan]
    identifier: Optional[str] = None
    activated_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    extra: Dict[str, ExtraValue] = field(default_factory=dict)
    version: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate license key entity."""
        if not self.value or len(self.value.strip()) == 0:
            raise ValueError("License value cannot be empty")
        if len(self.value) > 100:
            raise ValueError("License value too long")
        ServiceId(self.service_id)

    @classmethod
    def create(
        cls,
        value: str,
        service_id: str,
        plan: Plan,
        license_key_id: Optional[uuid.UUID] = None,
    ) -> "LicenseKey":
        """
        Create a new, issued LicenseKey entity.

        Args:
            value: Generated token
            service_id: Owning service
            plan: Plan the key is issued under
            license_key_id: Optional UUID (generated if not provided)

        Returns:
            LicenseKey entity instance
        """
        now = datetime.now(timezone.utc)
        return cls(
            id=license_key_id or uuid.uuid4(),
            value=value,
            service_id=service_id,
            plan=plan,
            created_at=now,
            updated_at=now,
        )

    @property
    def is_activated(self) -> bool:
        """A record with either binding field set counts as activated."""
        return self.identifier is not None or self.activated_at is not None

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and self.expires_at < now

    def state(self, now: datetime) -> LicenseKeyState:
        """
        Derive the lifecycle state at ``now``.

        Args:
            now: Reference time

        Returns:
            LicenseKeyState
        """
        if self.activated_at is None:
            return LicenseKeyState.ISSUED
        if self.is_expired(now):
            return LicenseKeyState.EXPIRED
        return LicenseKeyState.ACTIVE

    def activate(
        self,
        identifier: str,
        now: datetime,
        expires_at: datetime,
        extra: Optional[Mapping[str, Any]] = None,
    ) -> "LicenseKey":
        """
        Create a new LicenseKey instance bound to ``identifier``.

        ``extra`` is merged key by key into the existing metadata.

        Args:
            identifier: Binding target
            now: Activation time
            expires_at: Computed end of the license window
            extra: Optional activation metadata

        Returns:
            New LicenseKey instance in the activated state

        Raises:
            LicenseAlreadyActiveError: If identifier or activated_at is already set
        """
        if self.is_activated:
            raise LicenseAlreadyActiveError()

        merged = dict(self.extra)
        merged.update(clean_extra(extra))

        return replace(
            self,
            identifier=identifier,
            activated_at=now,
            expires_at=expires_at,
            extra=merged,
            updated_at=now,
        )

    def truncate(self, now: datetime) -> "LicenseKey":
        """
        Create a new LicenseKey instance whose window ends at ``now``.

        Only ever moves ``expires_at`` earlier.

        Args:
            now: Time of the superseding activation

        Returns:
            New LicenseKey instance
        """
        if self.expires_at is not None and self.expires_at <= now:
            return self
        return replace(self, expires_at=now, updated_at=now)
