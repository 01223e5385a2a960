"""
Integration tests for repository implementations.
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from asgiref.sync import async_to_sync
from django.db import IntegrityError
from django.db.models import F

from core.domain.exceptions import (
    DuplicateLicenseValueError,
    LicenseAlreadyActiveError,
    StaleCandidateError,
)
from core.domain.value_objects import LicenseKeyState
from licenses.domain.license_key import LicenseKey
from licenses.domain.services import LicenseActivator
from licenses.infrastructure.models import LicenseKey as LicenseKeyModel
from licenses.ports.license_key_repository import LicenseKeyFilter
from plans.domain.plan import Plan
from plans.infrastructure.models import Plan as PlanModel

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def _bind(license_key, identifier, activated_at, expires_at, created_at=None):
    """Store an activation directly, bypassing the engine."""
    fields = {"identifier": identifier, "activated_at": activated_at, "expires_at": expires_at}
    if created_at is not None:
        fields["created_at"] = created_at
    LicenseKeyModel.objects.filter(id=license_key.id).update(**fields)


@pytest.mark.django_db
@pytest.mark.integration
class TestPlanRepository:
    """Integration tests for PlanRepository."""

    def test_save_and_find_by_alias(self, plan_repository):
        """Test saving and finding a plan by alias."""
        plan = Plan.create(alias="quarterly", duration="1 quarter", name="Quarterly")

        saved = async_to_sync(plan_repository.save)(plan)
        found = async_to_sync(plan_repository.find_by_id_or_alias)("quarterly")

        assert saved.id == plan.id
        assert found == saved
        assert str(found.duration) == "1 quarter"

    def test_find_by_id(self, plan_repository, db_plan):
        """Test finding a plan by UUID text."""
        found = async_to_sync(plan_repository.find_by_id_or_alias)(str(db_plan.id))
        assert found.alias == "annual"

    def test_find_not_found(self, plan_repository, db_plan):
        """Test missing references return None."""
        find = async_to_sync(plan_repository.find_by_id_or_alias)
        assert find("unknown") is None
        assert find(str(uuid.uuid4())) is None
        assert find("") is None

    def test_save_updates_existing(self, plan_repository, db_plan):
        """Test saving with the same id updates the plan."""
        updated = Plan.create(alias="annual", duration="2 years", name="Biennial", plan_id=db_plan.id)

        async_to_sync(plan_repository.save)(updated)

        model = PlanModel.objects.get(id=db_plan.id)
        assert model.name == "Biennial"
        assert model.duration_quantity == 2


@pytest.mark.django_db
@pytest.mark.integration
class TestLicenseKeyRepository:
    """Integration tests for LicenseKeyRepository."""

    def test_create_and_find(self, license_key_repository, db_license_key, db_plan):
        """Test creating and finding a license key by id and value."""
        by_id = async_to_sync(license_key_repository.find_by_id)(db_license_key.id)
        by_value = async_to_sync(license_key_repository.find_by_value)(db_license_key.value)

        assert by_id == by_value
        assert by_id.plan == db_plan
        assert by_id.version == 0
        assert by_id.created_at is not None

    def test_find_not_found(self, license_key_repository, db_plan):
        """Test finding non-existent keys."""
        assert async_to_sync(license_key_repository.find_by_id)(uuid.uuid4()) is None
        assert async_to_sync(license_key_repository.find_by_value)("NOPE") is None

    def test_duplicate_value(self, license_key_repository, db_license_key, db_plan):
        """Test the unique index surfaces as DuplicateLicenseValueError."""
        duplicate = LicenseKey.create(value=db_license_key.value, service_id="svc-b", plan=db_plan)

        with pytest.raises(DuplicateLicenseValueError):
            async_to_sync(license_key_repository.create)(duplicate)

        assert LicenseKeyModel.objects.filter(value=db_license_key.value).count() == 1

    def test_other_integrity_error_propagates(self, monkeypatch, license_key_repository, db_plan):
        """Test a constraint other than the value index is not reported as a duplicate."""

        def failing_create(**kwargs):
            raise IntegrityError("FOREIGN KEY constraint failed")

        monkeypatch.setattr(LicenseKeyModel.objects, "create", failing_create)
        key = LicenseKey.create(value="UNUSED-VALUE", service_id="svc-a", plan=db_plan)

        with pytest.raises(IntegrityError):
            async_to_sync(license_key_repository.create)(key)

    def test_deleted_plan_leaves_key_without_plan(self, license_key_repository, db_license_key):
        """Test deleting a plan keeps the key with no plan."""
        PlanModel.objects.all().delete()

        found = async_to_sync(license_key_repository.find_by_id)(db_license_key.id)

        assert found is not None
        assert found.plan is None


@pytest.mark.django_db
@pytest.mark.integration
class TestSupersedingCandidate:
    """Integration tests for the superseding candidate lookup."""

    def test_latest_expiry_then_oldest_wins(self, license_key_repository, make_license_key):
        """Test tie-break: latest expires_at, then earliest created_at."""
        short, newer, older = make_license_key(), make_license_key(), make_license_key()
        _bind(short, "device-1", NOW, NOW + timedelta(days=10))
        _bind(newer, "device-1", NOW, NOW + timedelta(days=20), created_at=NOW - timedelta(days=1))
        _bind(older, "device-1", NOW, NOW + timedelta(days=20), created_at=NOW - timedelta(days=2))

        candidate = async_to_sync(license_key_repository.find_superseding_candidate)(
            "device-1", "svc-a", NOW
        )

        assert candidate.id == older.id

    def test_ignores_expired_other_service_and_excluded(
        self, license_key_repository, make_license_key
    ):
        """Test expired keys, other services and the target are not candidates."""
        expired, other_service, target = (
            make_license_key(),
            make_license_key(service_id="svc-b"),
            make_license_key(),
        )
        _bind(expired, "device-1", NOW - timedelta(days=30), NOW - timedelta(seconds=1))
        _bind(other_service, "device-1", NOW, NOW + timedelta(days=30))
        _bind(target, "device-1", NOW, NOW + timedelta(days=30))

        candidate = async_to_sync(license_key_repository.find_superseding_candidate)(
            "device-1", "svc-a", NOW, exclude_id=target.id
        )

        assert candidate is None

    def test_expiry_equal_to_now_is_candidate(self, license_key_repository, make_license_key):
        """Test a key expiring exactly now still counts."""
        key = make_license_key()
        _bind(key, "device-1", NOW - timedelta(days=1), NOW)

        candidate = async_to_sync(license_key_repository.find_superseding_candidate)(
            "device-1", "svc-a", NOW
        )

        assert candidate.id == key.id


@pytest.mark.django_db
@pytest.mark.integration
class TestCommitActivation:
    """Integration tests for the atomic activation commit."""

    def _chain(self, repository, make_license_key):
        candidate = make_license_key()
        _bind(candidate, "device-1", NOW - timedelta(days=10), NOW + timedelta(days=20))
        candidate = async_to_sync(repository.find_by_id)(candidate.id)
        target = make_license_key()
        return candidate, target, LicenseActivator.activate(target, "device-1", NOW, candidate)

    def test_commit_both(self, license_key_repository, make_license_key):
        """Test activation and truncation are both stored."""
        candidate, target, result = self._chain(license_key_repository, make_license_key)

        saved = async_to_sync(license_key_repository.commit_activation)(
            result.activated, result.superseded
        )

        assert saved.identifier == "device-1"
        assert saved.activated_at == NOW
        assert saved.expires_at == result.activated.expires_at
        assert saved.version == 1
        stored_candidate = LicenseKeyModel.objects.get(id=candidate.id)
        assert stored_candidate.expires_at == NOW
        assert stored_candidate.version == candidate.version + 1

    def test_target_already_active_rolls_back_truncation(
        self, license_key_repository, make_license_key
    ):
        """Test a failed target write leaves the candidate untouched."""
        candidate, target, result = self._chain(license_key_repository, make_license_key)
        _bind(target, "device-9", NOW, NOW + timedelta(days=5))

        with pytest.raises(LicenseAlreadyActiveError):
            async_to_sync(license_key_repository.commit_activation)(
                result.activated, result.superseded
            )

        stored_candidate = LicenseKeyModel.objects.get(id=candidate.id)
        assert stored_candidate.expires_at == NOW + timedelta(days=20)
        assert stored_candidate.version == candidate.version

    def test_stale_candidate(self, license_key_repository, make_license_key):
        """Test a candidate changed since it was read is not overwritten."""
        candidate, target, result = self._chain(license_key_repository, make_license_key)
        LicenseKeyModel.objects.filter(id=candidate.id).update(version=F("version") + 1)

        with pytest.raises(StaleCandidateError):
            async_to_sync(license_key_repository.commit_activation)(
                result.activated, result.superseded
            )

        stored_target = LicenseKeyModel.objects.get(id=target.id)
        assert stored_target.activated_at is None
        assert stored_target.identifier is None

    def test_second_commit_of_same_target_fails(self, license_key_repository, db_license_key):
        """Test two activations of one target cannot both succeed."""
        first = LicenseActivator.activate(db_license_key, "device-1", NOW)
        second = LicenseActivator.activate(db_license_key, "device-2", NOW)

        async_to_sync(license_key_repository.commit_activation)(first.activated)
        with pytest.raises(LicenseAlreadyActiveError):
            async_to_sync(license_key_repository.commit_activation)(second.activated)

        assert LicenseKeyModel.objects.get(id=db_license_key.id).identifier == "device-1"


@pytest.mark.django_db
@pytest.mark.integration
class TestListLicenseKeys:
    """Integration tests for license key listing."""

    @pytest.fixture
    def keys(self, make_license_key, db_monthly_plan):
        issued = make_license_key()
        active = make_license_key(plan=db_monthly_plan)
        expired = make_license_key(service_id="svc-b")
        _bind(active, "device-1", NOW, NOW + timedelta(days=30))
        _bind(expired, "device-2", NOW - timedelta(days=60), NOW - timedelta(days=30))
        return {"issued": issued, "active": active, "expired": expired}

    def _list(self, repository, page=1, limit=25, sort="-created_at", **filters):
        return async_to_sync(repository.list)(
            LicenseKeyFilter(**filters), now=NOW, page=page, limit=limit, sort=sort
        )

    @pytest.mark.parametrize(
        "state", [LicenseKeyState.ISSUED, LicenseKeyState.ACTIVE, LicenseKeyState.EXPIRED]
    )
    def test_filter_by_state(self, license_key_repository, keys, state):
        """Test each state filter returns exactly its key."""
        page = self._list(license_key_repository, state=state)

        assert page.total == 1
        assert page.items[0].id == keys[state.value].id

    def test_filter_by_service_and_plan(self, license_key_repository, keys):
        """Test service and plan alias filters."""
        assert self._list(license_key_repository, service_id="svc-b").total == 1
        page = self._list(license_key_repository, plan="monthly")
        assert [item.id for item in page.items] == [keys["active"].id]

    def test_filter_by_identifier(self, license_key_repository, keys):
        """Test identifier filter."""
        page = self._list(license_key_repository, identifier="device-2")
        assert [item.id for item in page.items] == [keys["expired"].id]

    def test_pagination(self, license_key_repository, keys):
        """Test page, limit and page count."""
        page = self._list(license_key_repository, page=2, limit=2, sort="value")

        assert page.total == 3
        assert page.pages == 2
        assert len(page.items) == 1
        expected_last = sorted(key.value for key in keys.values())[-1]
        assert page.items[0].value == expected_last

    def test_unknown_sort(self, license_key_repository, keys):
        """Test sort is restricted to known fields."""
        with pytest.raises(ValueError):
            self._list(license_key_repository, sort="identifier")
