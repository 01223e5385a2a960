"""
Pytest configuration and shared fixtures.
"""

from datetime import datetime, timezone

import pytest
from asgiref.sync import async_to_sync

from licenses.domain.license_key import LicenseKey
from licenses.domain.services import LicenseKeyGenerator
from licenses.infrastructure.repositories.django_license_key_repository import (
    DjangoLicenseKeyRepository,
)
from plans.domain.duration import Duration, DurationUnit
from plans.domain.plan import Plan
from plans.infrastructure.repositories.django_plan_repository import DjangoPlanRepository


@pytest.fixture
def plan_repository():
    """Fixture for PlanRepository."""
    return DjangoPlanRepository()


@pytest.fixture
def license_key_repository():
    """Fixture for LicenseKeyRepository."""
    return DjangoLicenseKeyRepository()


@pytest.fixture
def now():
    """A fixed reference time."""
    return datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def annual_plan():
    """Fixture for a one year Plan entity."""
    return Plan.create(alias="annual", duration=Duration(1, DurationUnit.YEARS), name="Annual")


@pytest.fixture
def monthly_plan():
    """Fixture for a one month Plan entity."""
    return Plan.create(alias="monthly", duration="1 month", name="Monthly")


@pytest.fixture
def sample_license_key(annual_plan):
    """Fixture for an issued LicenseKey entity."""
    return LicenseKey.create(
        value=LicenseKeyGenerator.generate("svc-a"),
        service_id="svc-a",
        plan=annual_plan,
    )


@pytest.fixture
def db_plan(db, plan_repository, annual_plan):
    """Fixture for the annual Plan saved in database."""
    return async_to_sync(plan_repository.save)(annual_plan)


@pytest.fixture
def db_monthly_plan(db, plan_repository, monthly_plan):
    """Fixture for the monthly Plan saved in database."""
    return async_to_sync(plan_repository.save)(monthly_plan)


@pytest.fixture
def make_license_key(db, db_plan, license_key_repository):
    """Factory fixture that stores issued license keys."""

    def make(service_id="svc-a", plan=None, value=None):
        key = LicenseKey.create(
            value=value or LicenseKeyGenerator.generate(service_id),
            service_id=service_id,
            plan=plan or db_plan,
        )
        return async_to_sync(license_key_repository.create)(key)

    return make


@pytest.fixture
def db_license_key(make_license_key):
    """Fixture for an issued LicenseKey saved in database."""
    return make_license_key()


@pytest.fixture
def api_client():
    """Fixture for DRF API client."""
    from rest_framework.test import APIClient

    return APIClient()
