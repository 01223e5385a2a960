"""
ValidateLicenseKeyHandler.

Handles the validate license key query.
"""

from django.utils import timezone

from core.domain.exceptions import DomainException, LicenseNotFoundError, MissingParametersError
from core.metrics import license_key_validations_total
from licenses.application.dto.license_key_dto import LicenseKeyDTO
from licenses.application.queries.validate_license_key import ValidateLicenseKeyQuery
from licenses.domain.services import LicenseValidator
from licenses.ports.license_key_repository import LicenseKeyRepository


class ValidateLicenseKeyHandler:
    """Handler for ValidateLicenseKeyQuery."""

    def __init__(self, license_key_repository: LicenseKeyRepository):
        """Initialize handler with repository."""
        self.license_key_repository = license_key_repository

    async def handle(self, query: ValidateLicenseKeyQuery) -> LicenseKeyDTO:
        """
        Handle validate license key query.

        Args:
            query: ValidateLicenseKeyQuery

        Returns:
            LicenseKeyDTO when the key is valid for the identifier

        Raises:
            LicenseNotFoundError: If no key has this value
            LicenseNotActiveError: If the key was never activated
            IdentifierMismatchError: If the key is bound to another identifier
            LicenseExpiredError: If the key has expired
        """
        if not query.identifier:
            raise MissingParametersError("identifier is required")

        now = query.now or timezone.now()
        try:
            license_key = await self.license_key_repository.find_by_value(query.value)
            if license_key is None:
                raise LicenseNotFoundError()
            LicenseValidator.validate(license_key, query.identifier, now)
        except DomainException as e:
            license_key_validations_total.labels(result=e.code.lower()).inc()
            raise

        license_key_validations_total.labels(result="valid").inc()
        return LicenseKeyDTO.from_entity(license_key, now)
