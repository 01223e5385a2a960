"""
GetLicenseKeyHandler.

Handles the get license key query.
"""

import uuid

from django.utils import timezone

from core.domain.exceptions import LicenseNotFoundError
from licenses.application.dto.license_key_dto import LicenseKeyDTO
from licenses.application.queries.get_license_key import GetLicenseKeyQuery
from licenses.ports.license_key_repository import LicenseKeyRepository


class GetLicenseKeyHandler:
    """Handler for GetLicenseKeyQuery."""

    def __init__(self, license_key_repository: LicenseKeyRepository):
        """Initialize handler with repository."""
        self.license_key_repository = license_key_repository

    async def handle(self, query: GetLicenseKeyQuery) -> LicenseKeyDTO:
        """
        Resolve a license key by UUID, falling back to its value.

        Raises:
            LicenseNotFoundError: If neither lookup matches
        """
        license_key = None
        try:
            license_key_id = uuid.UUID(str(query.reference))
        except ValueError:
            license_key_id = None
        if license_key_id is not None:
            license_key = await self.license_key_repository.find_by_id(license_key_id)
        if license_key is None:
            license_key = await self.license_key_repository.find_by_value(query.reference)
        if license_key is None:
            raise LicenseNotFoundError()

        return LicenseKeyDTO.from_entity(license_key, query.now or timezone.now())
