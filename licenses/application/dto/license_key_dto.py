"""
License key DTOs for API responses.
"""
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from core.domain.value_objects import ExtraValue
from licenses.domain.license_key import LicenseKey
from plans.domain.plan import Plan


@dataclass
class PlanDTO:
    """DTO for plan information."""

    id: uuid.UUID
    alias: str
    name: str
    duration: str

    @classmethod
    def from_entity(cls, plan: Plan) -> "PlanDTO":
        return cls(id=plan.id, alias=plan.alias, name=plan.name, duration=str(plan.duration))


@dataclass
class LicenseKeyDTO:
    """DTO for license key information."""

    id: uuid.UUID
    value: str
    service_id: str
    plan: Optional[PlanDTO]
    identifier: Optional[str]
    activated_at: Optional[datetime]
    expires_at: Optional[datetime]
    extra: Dict[str, ExtraValue]
    status: str
    created_at: Optional[datetime]

    @classmethod
    def from_entity(cls, license_key: LicenseKey, now: datetime) -> "LicenseKeyDTO":
        """
        Build the DTO, deriving ``status`` at ``now``.

        Args:
            license_key: LicenseKey entity
            now: Reference time

        Returns:
            LicenseKeyDTO
        """
        return cls(
            id=license_key.id,
            value=license_key.value,
            service_id=license_key.service_id,
            plan=PlanDTO.from_entity(license_key.plan) if license_key.plan else None,
            identifier=license_key.identifier,
            activated_at=license_key.activated_at,
            expires_at=license_key.expires_at,
            extra=dict(license_key.extra),
            status=license_key.state(now).value,
            created_at=license_key.created_at,
        )


@dataclass
class LicenseKeyPageDTO:
    """DTO for a page of license keys."""

    results: List[LicenseKeyDTO] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 25
    pages: int = 0
