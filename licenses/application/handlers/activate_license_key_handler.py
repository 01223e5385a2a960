"""
ActivateLicenseKeyHandler.

Handles the activate license key command.
"""

import logging

from django.conf import settings
from django.utils import timezone

from core.domain.exceptions import (
    InvalidParametersError,
    LicenseAlreadyActiveError,
    LicenseNotFoundError,
    MissingParametersError,
    NoPlanToLicenseError,
    StaleCandidateError,
)
from core.domain.value_objects import Identifier, clean_extra
from core.infrastructure.events import event_bus
from core.metrics import license_keys_activated_total
from licenses.application.commands.activate_license_key import ActivateLicenseKeyCommand
from licenses.application.dto.license_key_dto import LicenseKeyDTO
from licenses.domain.events import LicenseKeyActivated, LicenseKeySuperseded
from licenses.domain.services import ActivationResult, LicenseActivator
from licenses.ports.license_key_repository import LicenseKeyRepository

logger = logging.getLogger(__name__)


class ActivateLicenseKeyHandler:
    """Handler for ActivateLicenseKeyCommand."""

    def __init__(self, license_key_repository: LicenseKeyRepository):
        """Initialize handler with repository."""
        self.license_key_repository = license_key_repository

    async def handle(self, command: ActivateLicenseKeyCommand) -> LicenseKeyDTO:
        """
        Handle activate license key command.

        Steps:
        1. Load the key by value
        2. Check it has a plan and is still issued
        3. Find the unexpired key it supersedes for the same identifier
        4. Compute both new states and commit them atomically

        A superseded key that changed between the read and the commit is
        re-read, up to ``LICENSE_ACTIVATION_ATTEMPTS`` attempts in total.

        Args:
            command: ActivateLicenseKeyCommand

        Returns:
            LicenseKeyDTO of the activated key

        Raises:
            LicenseNotFoundError: If no key has this value
            NoPlanToLicenseError: If the key lost its plan
            LicenseAlreadyActiveError: If the key was already activated
            StaleCandidateError: If the superseded key kept changing
        """
        if not command.identifier:
            raise MissingParametersError("identifier is required")
        try:
            Identifier(command.identifier)
            extra = clean_extra(command.extra)
        except ValueError as e:
            raise InvalidParametersError(str(e)) from e

        now = command.now or timezone.now()
        attempts = settings.LICENSE_ACTIVATION_ATTEMPTS
        attempt = 0
        while True:
            attempt += 1
            result = await self._prepare(command.value, command.identifier, extra, now)
            try:
                saved = await self.license_key_repository.commit_activation(
                    result.activated, result.superseded
                )
                break
            except StaleCandidateError:
                if attempt >= attempts:
                    logger.warning(
                        "Superseded license changed on every attempt",
                        extra={"attempts": attempt},
                    )
                    raise
                logger.info("Superseded license changed concurrently, re-reading")

        license_keys_activated_total.labels(chained=str(result.chained).lower()).inc()

        previous = result.superseded_from
        await event_bus.publish(
            LicenseKeyActivated(
                license_key_id=saved.id,
                service_id=saved.service_id,
                identifier=saved.identifier,
                expires_at=saved.expires_at,
                chained_from=previous.id if previous else None,
            )
        )
        if previous is not None:
            await event_bus.publish(
                LicenseKeySuperseded(
                    license_key_id=previous.id,
                    superseded_by=saved.id,
                    previous_expires_at=previous.expires_at,
                    expires_at=result.superseded.expires_at,
                )
            )

        return LicenseKeyDTO.from_entity(saved, now)

    async def _prepare(self, value, identifier, extra, now) -> ActivationResult:
        license_key = await self.license_key_repository.find_by_value(value)
        if license_key is None:
            raise LicenseNotFoundError()
        if license_key.plan is None:
            raise NoPlanToLicenseError()
        if license_key.is_activated:
            raise LicenseAlreadyActiveError()

        candidate = await self.license_key_repository.find_superseding_candidate(
            identifier=identifier,
            service_id=license_key.service_id,
            now=now,
            exclude_id=license_key.id,
        )
        return LicenseActivator.activate(license_key, identifier, now, candidate, extra)
