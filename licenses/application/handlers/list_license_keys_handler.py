"""
ListLicenseKeysHandler.

Handles the list license keys query.
"""

from django.conf import settings
from django.utils import timezone

from core.domain.exceptions import InvalidParametersError
from core.domain.value_objects import LicenseKeyState
from licenses.application.dto.license_key_dto import LicenseKeyDTO, LicenseKeyPageDTO
from licenses.application.queries.list_license_keys import ListLicenseKeysQuery
from licenses.ports.license_key_repository import (
    SORTABLE_FIELDS,
    LicenseKeyFilter,
    LicenseKeyRepository,
)


class ListLicenseKeysHandler:
    """Handler for ListLicenseKeysQuery."""

    def __init__(self, license_key_repository: LicenseKeyRepository):
        """Initialize handler with repository."""
        self.license_key_repository = license_key_repository

    async def handle(self, query: ListLicenseKeysQuery) -> LicenseKeyPageDTO:
        """
        Handle list license keys query.

        Args:
            query: ListLicenseKeysQuery

        Returns:
            LicenseKeyPageDTO

        Raises:
            InvalidParametersError: If a filter, page, limit or sort is unusable
        """
        state = None
        if query.status:
            try:
                state = LicenseKeyState(query.status)
            except ValueError as e:
                raise InvalidParametersError(f"Unknown status: {query.status}") from e

        limit = query.limit or settings.LICENSE_KEY_PAGE_SIZE
        if query.page < 1:
            raise InvalidParametersError("page must be at least 1")
        if limit < 1 or limit > settings.LICENSE_KEY_MAX_PAGE_SIZE:
            raise InvalidParametersError(
                f"limit must be between 1 and {settings.LICENSE_KEY_MAX_PAGE_SIZE}"
            )
        if query.sort.lstrip("-") not in SORTABLE_FIELDS:
            raise InvalidParametersError(f"Unsupported sort field: {query.sort}")

        now = query.now or timezone.now()
        page = await self.license_key_repository.list(
            LicenseKeyFilter(
                state=state,
                service_id=query.service_id,
                plan=query.plan,
                identifier=query.identifier,
            ),
            now=now,
            page=query.page,
            limit=limit,
            sort=query.sort,
        )

        return LicenseKeyPageDTO(
            results=[LicenseKeyDTO.from_entity(item, now) for item in page.items],
            total=page.total,
            page=page.page,
            limit=page.limit,
            pages=page.pages,
        )
