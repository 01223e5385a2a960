"""
Django implementation of LicenseKeyRepository port.

This adapter converts between domain entities and Django ORM models.
"""
import logging
import uuid
from datetime import datetime
from typing import Optional

from asgiref.sync import sync_to_async
from django.db import IntegrityError, transaction
from django.db.models import F

from core.domain.exceptions import (
    DuplicateLicenseValueError,
    LicenseAlreadyActiveError,
    StaleCandidateError,
)
from core.domain.value_objects import LicenseKeyState
from core.infrastructure.database import translate_database_errors
from licenses.domain.license_key import LicenseKey
from licenses.infrastructure.models import LicenseKey as LicenseKeyModel
from licenses.ports.license_key_repository import (
    LicenseKeyFilter,
    LicenseKeyPage,
    LicenseKeyRepository,
    SORTABLE_FIELDS,
)
from plans.infrastructure.repositories.django_plan_repository import (
    plan_lookup,
    plan_to_domain,
)

logger = logging.getLogger(__name__)


class DjangoLicenseKeyRepository(LicenseKeyRepository):
    """
    Django ORM implementation of LicenseKeyRepository.

    This adapter:
    1. Converts Django models to domain entities
    2. Writes activations as conditional updates guarded by ``version``
    3. Implements repository interface
    """

    def _to_domain(self, model: LicenseKeyModel) -> LicenseKey:
        """
        Convert Django model to domain entity.

        Args:
            model: Django LicenseKey model

        Returns:
            LicenseKey domain entity
        """
        return LicenseKey(
            id=model.id,
            value=model.value,
            service_id=model.service_id,
            plan=plan_to_domain(model.plan) if model.plan_id else None,
            identifier=model.identifier,
            activated_at=model.activated_at,
            expires_at=model.expires_at,
            extra=dict(model.extra or {}),
            version=model.version,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _get(self, **lookup) -> Optional[LicenseKey]:
        model = LicenseKeyModel.objects.select_related("plan").filter(**lookup).first()
        return self._to_domain(model) if model else None

    @sync_to_async
    @translate_database_errors
    def create(self, license_key: LicenseKey) -> LicenseKey:
        """
        Insert a newly issued license key.

        Args:
            license_key: LicenseKey entity to insert

        Returns:
            Saved license key entity

        Raises:
            DuplicateLicenseValueError: If the value is already taken
            IntegrityError: If any other constraint is violated
        """
        try:
            with transaction.atomic():
                model = LicenseKeyModel.objects.create(
                    id=license_key.id,
                    value=license_key.value,
                    service_id=license_key.service_id,
                    plan_id=license_key.plan.id if license_key.plan else None,
                    extra=dict(license_key.extra),
                )
        except IntegrityError as exc:
            if not LicenseKeyModel.objects.filter(value=license_key.value).exists():
                raise
            logger.warning("License value collision for service %s", license_key.service_id)
            raise DuplicateLicenseValueError() from exc
        return self._get(id=model.id)

    @sync_to_async
    @translate_database_errors
    def find_by_id(self, license_key_id: uuid.UUID) -> Optional[LicenseKey]:
        """
        Find a license key by ID.

        Args:
            license_key_id: License key UUID

        Returns:
            LicenseKey entity or None if not found
        """
        return self._get(id=license_key_id)

    @sync_to_async
    @translate_database_errors
    def find_by_value(self, value: str) -> Optional[LicenseKey]:
        """
        Find a license key by its token value.

        Args:
            value: License value

        Returns:
            LicenseKey entity or None if not found
        """
        if not value:
            return None
        return self._get(value=value)

    @sync_to_async
    @translate_database_errors
    def find_superseding_candidate(
        self,
        identifier: str,
        service_id: str,
        now: datetime,
        exclude_id: Optional[uuid.UUID] = None,
    ) -> Optional[LicenseKey]:
        """Find the unexpired key an activation for ``identifier`` would supersede."""
        queryset = LicenseKeyModel.objects.select_related("plan").filter(
            identifier=identifier,
            service_id=service_id,
            expires_at__gte=now,
        )
        if exclude_id is not None:
            queryset = queryset.exclude(id=exclude_id)
        model = queryset.order_by("-expires_at", "created_at", "id").first()
        return self._to_domain(model) if model else None

    @sync_to_async
    @translate_database_errors
    def commit_activation(
        self, activated: LicenseKey, superseded: Optional[LicenseKey] = None
    ) -> LicenseKey:
        """
        Atomically persist an activation and the truncation it causes.

        The truncation is written first; a failed target write raises out of
        the atomic block and rolls it back.

        Args:
            activated: Activated state of the target key
            superseded: Truncated state of the superseded key, if any

        Returns:
            Activated license key as stored

        Raises:
            LicenseAlreadyActiveError: If the target was activated concurrently
            StaleCandidateError: If the superseded key changed concurrently
        """
        with transaction.atomic():
            if superseded is not None:
                updated = LicenseKeyModel.objects.filter(
                    id=superseded.id,
                    version=superseded.version,
                ).update(
                    expires_at=superseded.expires_at,
                    updated_at=superseded.updated_at,
                    version=F("version") + 1,
                )
                if updated == 0:
                    raise StaleCandidateError()

            updated = LicenseKeyModel.objects.filter(
                id=activated.id,
                version=activated.version,
                identifier__isnull=True,
                activated_at__isnull=True,
            ).update(
                identifier=activated.identifier,
                activated_at=activated.activated_at,
                expires_at=activated.expires_at,
                extra=dict(activated.extra),
                updated_at=activated.updated_at,
                version=F("version") + 1,
            )
            if updated == 0:
                raise LicenseAlreadyActiveError()

            return self._get(id=activated.id)

    @sync_to_async
    @translate_database_errors
    def list(
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
        if sort.lstrip("-") not in SORTABLE_FIELDS:
            raise ValueError(f"Unsupported sort field: {sort}")

        queryset = LicenseKeyModel.objects.select_related("plan")
        if filters.service_id:
            queryset = queryset.filter(service_id=filters.service_id)
        if filters.identifier:
            queryset = queryset.filter(identifier=filters.identifier)
        if filters.plan:
            queryset = queryset.filter(plan_lookup(filters.plan, prefix="plan__"))
        if filters.state == LicenseKeyState.ISSUED:
            queryset = queryset.filter(activated_at__isnull=True)
        elif filters.state == LicenseKeyState.ACTIVE:
            queryset = queryset.filter(activated_at__isnull=False, expires_at__gte=now)
        elif filters.state == LicenseKeyState.EXPIRED:
            queryset = queryset.filter(activated_at__isnull=False, expires_at__lt=now)

        total = queryset.count()
        offset = (page - 1) * limit
        models = queryset.order_by(sort, "id")[offset : offset + limit]
        return LicenseKeyPage(
            items=[self._to_domain(model) for model in models],
            total=total,
            page=page,
            limit=limit,
        )
