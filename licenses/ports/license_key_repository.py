"""
LicenseKey repository port (interface).

This defines the contract for license key persistence operations.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional
import uuid

from core.domain.value_objects import LicenseKeyState
from licenses.domain.license_key import LicenseKey

SORTABLE_FIELDS = ("created_at", "activated_at", "expires_at", "value", "service_id")


@dataclass
class LicenseKeyFilter:
    """Listing filters; unset fields do not constrain the result."""

    state: Optional[LicenseKeyState] = None
    service_id: Optional[str] = None
    plan: Optional[str] = None
    identifier: Optional[str] = None


@dataclass
class LicenseKeyPage:
    """One page of a license key listing."""

    items: List[LicenseKey] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 25

    @property
    def pages(self) -> int:
        return (self.total + self.limit - 1) // self.limit if self.limit else 0


class LicenseKeyRepository(ABC):
    """
    Abstract repository for LicenseKey entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    async def create(self, license_key: LicenseKey) -> LicenseKey:
        """
        Persist a newly issued license key.

        Args:
            license_key: LicenseKey entity to insert

        Returns:
            Saved license key entity

        Raises:
            DuplicateLicenseValueError: If the value is already taken
        """
        pass

    @abstractmethod
    async def find_by_id(self, license_key_id: uuid.UUID) -> Optional[LicenseKey]:
        """
        Find a license key by ID.

        Args:
            license_key_id: License key UUID

        Returns:
            LicenseKey entity or None if not found
        """
        pass

    @abstractmethod
    async def find_by_value(self, value: str) -> Optional[LicenseKey]:
        """
        Find a license key by its token value.

        Args:
            value: License value

        Returns:
            LicenseKey entity or None if not found
        """
        pass

    @abstractmethod
    async def find_superseding_candidate(
        self,
        identifier: str,
        service_id: str,
        now: datetime,
        exclude_id: Optional[uuid.UUID] = None,
    ) -> Optional[LicenseKey]:
        """
        Find the unexpired key an activation for ``identifier`` would supersede.

        Matches keys with the same identifier and service whose
        ``expires_at >= now``. When several match, the one with the latest
        ``expires_at`` wins, then the earliest ``created_at``, then ``id``.

        Args:
            identifier: Binding target
            service_id: Owning service
            now: Reference time
            exclude_id: Key being activated

        Returns:
            LicenseKey entity or None
        """
        pass

    @abstractmethod
    async def commit_activation(
        self, activated: LicenseKey, superseded: Optional[LicenseKey] = None
    ) -> LicenseKey:
        """
        Atomically persist an activation and the truncation it causes.

        Both writes are compare-and-set on ``version``; the target write
        additionally requires the stored record to still be issued. Either
        both writes happen or neither does.

        Args:
            activated: Activated state of the target key
            superseded: Truncated state of the superseded key, if any

        Returns:
            Activated license key as stored

        Raises:
            LicenseAlreadyActiveError: If the target was activated concurrently
            StaleCandidateError: If the superseded key changed concurrently
        """
        pass

    @abstractmethod
    async def list(
        self,
        filters: LicenseKeyFilter,
        now: datetime,
        page: int = 1,
        limit: int = 25,
        sort: str = "-created_at",
    ) -> LicenseKeyPage:
        """
        List license keys matching ``filters``.

        Args:
            filters: Listing filters
            now: Reference time for state filters
            page: 1-based page number
            limit: Page size
            sort: Field name, ``-`` prefix for descending

        Returns:
            LicenseKeyPage
        """
        pass
