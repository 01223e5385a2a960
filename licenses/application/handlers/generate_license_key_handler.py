"""
GenerateLicenseKeyHandler.

Handles the generate license key command.
"""

import logging

from django.conf import settings
from django.utils import timezone

from core.domain.exceptions import (
    DuplicateLicenseValueError,
    InfrastructureError,
    InvalidParametersError,
    MissingParametersError,
    PlanNotFoundError,
)
from core.domain.value_objects import ServiceId
from core.infrastructure.events import event_bus
from core.metrics import license_key_collisions_total, license_keys_generated_total
from licenses.application.commands.generate_license_key import GenerateLicenseKeyCommand
from licenses.application.dto.license_key_dto import LicenseKeyDTO
from licenses.domain.events import LicenseKeyGenerated
from licenses.domain.license_key import LicenseKey
from licenses.domain.services import LicenseKeyGenerator
from licenses.ports.license_key_repository import LicenseKeyRepository
from plans.ports.plan_repository import PlanRepository

logger = logging.getLogger(__name__)


class GenerateLicenseKeyHandler:
    """Handler for GenerateLicenseKeyCommand."""

    def __init__(
        self,
        plan_repository: PlanRepository,
        license_key_repository: LicenseKeyRepository,
        generator=LicenseKeyGenerator,
    ):
        """Initialize handler with repositories."""
        self.plan_repository = plan_repository
        self.license_key_repository = license_key_repository
        self.generator = generator

    async def handle(self, command: GenerateLicenseKeyCommand) -> LicenseKeyDTO:
        """
        Handle generate license key command.

        A value the store rejects as a duplicate is replaced with a fresh
        one, up to ``LICENSE_KEY_GENERATION_ATTEMPTS`` times.

        Args:
            command: GenerateLicenseKeyCommand

        Returns:
            LicenseKeyDTO of the issued key

        Raises:
            MissingParametersError: If serviceId or plan is missing
            PlanNotFoundError: If the plan does not resolve
            InfrastructureError: If no unique value could be stored
        """
        service_id = command.service_id
        if not service_id or not service_id.strip() or service_id == "undefined":
            raise MissingParametersError("serviceId is required")
        try:
            ServiceId(service_id)
        except ValueError as e:
            raise InvalidParametersError(str(e)) from e
        if not command.plan:
            raise MissingParametersError("plan is required")

        plan = await self.plan_repository.find_by_id_or_alias(command.plan)
        if plan is None:
            raise PlanNotFoundError(f"Plan {command.plan} not found")

        now = command.now or timezone.now()
        attempts = settings.LICENSE_KEY_GENERATION_ATTEMPTS
        for attempt in range(1, attempts + 1):
            license_key = LicenseKey.create(
                value=self.generator.generate(service_id),
                service_id=service_id,
                plan=plan,
            )
            try:
                saved = await self.license_key_repository.create(license_key)
            except DuplicateLicenseValueError:
                license_key_collisions_total.inc()
                logger.warning(
                    "Generated license value collided, retrying",
                    extra={"service_id": service_id, "attempt": attempt},
                )
                continue

            license_keys_generated_total.inc()
            await event_bus.publish(
                LicenseKeyGenerated(
                    license_key_id=saved.id,
                    service_id=saved.service_id,
                    plan_id=plan.id,
                )
            )
            return LicenseKeyDTO.from_entity(saved, now)

        logger.error(
            "Could not generate a unique license value",
            extra={"service_id": service_id, "attempts": attempts},
        )
        raise InfrastructureError("Could not generate a unique license value")
