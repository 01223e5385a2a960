"""
Unit tests for LicenseKey domain entity.
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from core.domain.exceptions import LicenseAlreadyActiveError
from core.domain.value_objects import LicenseKeyState
from licenses.domain.license_key import LicenseKey

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


class TestLicenseKey:
    """Tests for LicenseKey entity."""

    def test_create_is_issued(self, annual_plan):
        """Test a new key is issued and unbound."""
        key = LicenseKey.create(value="AAAAA-BBBBB", service_id="svc-a", plan=annual_plan)

        assert isinstance(key.id, uuid.UUID)
        assert key.identifier is None
        assert key.activated_at is None
        assert key.expires_at is None
        assert key.extra == {}
        assert key.version == 0
        assert key.is_activated is False
        assert key.state(NOW) == LicenseKeyState.ISSUED

    @pytest.mark.parametrize("service_id", ["", "undefined"])
    def test_create_requires_service_id(self, annual_plan, service_id):
        """Test the owning service is mandatory."""
        with pytest.raises(ValueError):
            LicenseKey.create(value="AAAAA", service_id=service_id, plan=annual_plan)

    def test_create_requires_value(self, annual_plan):
        """Test an empty value is rejected."""
        with pytest.raises(ValueError, match="cannot be empty"):
            LicenseKey.create(value=" ", service_id="svc-a", plan=annual_plan)

    def test_activate(self, sample_license_key):
        """Test activation binds the key and returns a new instance."""
        expires_at = NOW + timedelta(days=365)

        activated = sample_license_key.activate("device-1", NOW, expires_at, {"seats": 3})

        assert activated is not sample_license_key
        assert sample_license_key.identifier is None
        assert activated.identifier == "device-1"
        assert activated.activated_at == NOW
        assert activated.expires_at == expires_at
        assert activated.extra == {"seats": 3}
        assert activated.state(NOW) == LicenseKeyState.ACTIVE

    def test_activate_merges_extra(self, sample_license_key):
        """Test activation merges metadata key by key."""
        from dataclasses import replace

        key = replace(sample_license_key, extra={"a": 1, "b": 2})

        activated = key.activate("device-1", NOW, NOW + timedelta(days=1), {"b": 3, "c": None})

        assert activated.extra == {"a": 1, "b": 3, "c": None}

    def test_activate_twice(self, sample_license_key):
        """Test a key activates at most once."""
        activated = sample_license_key.activate("device-1", NOW, NOW + timedelta(days=1))

        with pytest.raises(LicenseAlreadyActiveError) as exc_info:
            activated.activate("device-2", NOW, NOW + timedelta(days=1))
        assert exc_info.value.code == "LICENSE_ALREADY_ACTIVE"

    def test_activate_with_only_identifier_set(self, sample_license_key):
        """Test a record with identifier but no activated_at counts as activated."""
        from dataclasses import replace

        half_bound = replace(sample_license_key, identifier="device-1")

        with pytest.raises(LicenseAlreadyActiveError):
            half_bound.activate("device-1", NOW, NOW + timedelta(days=1))

    def test_expired_state(self, sample_license_key):
        """Test a key past its expiry is expired; the boundary is still active."""
        activated = sample_license_key.activate("device-1", NOW, NOW + timedelta(days=1))

        assert activated.state(NOW + timedelta(days=1)) == LicenseKeyState.ACTIVE
        assert activated.state(NOW + timedelta(days=1, seconds=1)) == LicenseKeyState.EXPIRED

    def test_truncate(self, sample_license_key):
        """Test truncation moves expiry back to now."""
        activated = sample_license_key.activate("device-1", NOW, NOW + timedelta(days=30))
        later = NOW + timedelta(days=10)

        truncated = activated.truncate(later)

        assert truncated.expires_at == later
        assert truncated.activated_at == NOW
        assert truncated.identifier == "device-1"

    def test_truncate_never_extends(self, sample_license_key):
        """Test truncation of an already expired key is a no-op."""
        activated = sample_license_key.activate("device-1", NOW, NOW + timedelta(days=1))

        assert activated.truncate(NOW + timedelta(days=5)) is activated
