"""
Unit tests for license key domain services.
"""

import re
from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from core.domain.exceptions import (
    IdentifierMismatchError,
    LicenseAlreadyActiveError,
    LicenseExpiredError,
    LicenseNotActiveError,
    NoPlanToLicenseError,
)
from licenses.domain.license_key import LicenseKey
from licenses.domain.services import LicenseActivator, LicenseKeyGenerator, LicenseValidator

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def _issued(plan, service_id="svc-a"):
    return LicenseKey.create(
        value=LicenseKeyGenerator.generate(service_id), service_id=service_id, plan=plan
    )


class TestLicenseKeyGenerator:
    """Tests for LicenseKeyGenerator service."""

    def test_format(self):
        """Test values are five dash separated groups of base32 text."""
        value = LicenseKeyGenerator.generate("svc-a")
        assert re.fullmatch(r"[A-Z2-7]{5}(-[A-Z2-7]{5}){4}", value)

    def test_uniqueness(self):
        """Test many values for one service never repeat."""
        values = {LicenseKeyGenerator.generate("svc-a") for _ in range(2000)}
        assert len(values) == 2000


class TestLicenseActivator:
    """Tests for LicenseActivator service."""

    def test_activate_without_candidate(self, annual_plan):
        """Test a fresh activation starts now."""
        result = LicenseActivator.activate(_issued(annual_plan), "device-1", NOW)

        assert result.chained is False
        assert result.superseded is None
        assert result.activated.activated_at == NOW
        assert result.activated.expires_at == datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)

    def test_leap_day_activation(self, annual_plan):
        """Test a one year plan activated on Feb 29 ends on Feb 28."""
        leap_day = datetime(2024, 2, 29, tzinfo=timezone.utc)

        result = LicenseActivator.activate(_issued(annual_plan), "device-1", leap_day)

        assert result.activated.expires_at == datetime(2025, 2, 28, tzinfo=timezone.utc)

    def test_chaining(self, annual_plan, monthly_plan):
        """Test the new window starts where the candidate's ends."""
        first = LicenseActivator.activate(_issued(annual_plan), "device-1", NOW).activated
        later = NOW + timedelta(days=100)

        result = LicenseActivator.activate(_issued(monthly_plan), "device-1", later, candidate=first)

        assert result.chained is True
        assert result.superseded_from is first
        assert result.superseded.expires_at == later
        assert result.activated.expires_at == datetime(2025, 4, 1, 12, 0, tzinfo=timezone.utc)

    def test_chaining_preserves_total_coverage(self, annual_plan):
        """Test covered time is additive across a chain."""
        first = LicenseActivator.activate(_issued(annual_plan), "device-1", NOW).activated
        later = NOW + timedelta(days=30)

        result = LicenseActivator.activate(_issued(annual_plan), "device-1", later, candidate=first)

        remaining_before = first.expires_at - later
        added = annual_plan.duration.add_to(first.expires_at) - first.expires_at
        assert result.activated.expires_at - later == remaining_before + added

    def test_no_plan(self, annual_plan):
        """Test a key without a plan cannot be activated."""
        key = replace(_issued(annual_plan), plan=None)

        with pytest.raises(NoPlanToLicenseError) as exc_info:
            LicenseActivator.activate(key, "device-1", NOW)
        assert exc_info.value.code == "NO_PLAN_TO_LICENSE"

    def test_no_plan_checked_before_already_active(self, annual_plan):
        """Test the plan check comes first."""
        key = replace(
            LicenseActivator.activate(_issued(annual_plan), "device-1", NOW).activated, plan=None
        )

        with pytest.raises(NoPlanToLicenseError):
            LicenseActivator.activate(key, "device-1", NOW)

    def test_already_active(self, annual_plan):
        """Test activating an activated key fails."""
        activated = LicenseActivator.activate(_issued(annual_plan), "device-1", NOW).activated

        with pytest.raises(LicenseAlreadyActiveError):
            LicenseActivator.activate(activated, "device-2", NOW)

    def test_rejects_unrelated_candidate(self, annual_plan):
        """Test a candidate for another identifier is refused."""
        other = LicenseActivator.activate(_issued(annual_plan), "device-2", NOW).activated

        with pytest.raises(ValueError):
            LicenseActivator.activate(_issued(annual_plan), "device-1", NOW, candidate=other)

    def test_rejects_expired_candidate(self, annual_plan):
        """Test an expired candidate is refused."""
        old = LicenseActivator.activate(_issued(annual_plan), "device-1", NOW).activated
        much_later = NOW + timedelta(days=800)

        with pytest.raises(ValueError):
            LicenseActivator.activate(_issued(annual_plan), "device-1", much_later, candidate=old)

    def test_empty_identifier(self, annual_plan):
        """Test the identifier is required."""
        with pytest.raises(ValueError):
            LicenseActivator.activate(_issued(annual_plan), "", NOW)


class TestLicenseValidator:
    """Tests for LicenseValidator service."""

    def test_valid(self, annual_plan):
        """Test an active key bound to the identifier is valid."""
        activated = LicenseActivator.activate(_issued(annual_plan), "device-1", NOW).activated

        assert LicenseValidator.validate(activated, "device-1", NOW) is activated

    def test_not_active(self, annual_plan):
        """Test an issued key is not active."""
        with pytest.raises(LicenseNotActiveError):
            LicenseValidator.validate(_issued(annual_plan), "device-1", NOW)

    def test_identifier_mismatch(self, annual_plan):
        """Test identifiers match exactly and case-sensitively."""
        activated = LicenseActivator.activate(_issued(annual_plan), "device-1", NOW).activated

        with pytest.raises(IdentifierMismatchError):
            LicenseValidator.validate(activated, "DEVICE-1", NOW)

    def test_expired(self, annual_plan):
        """Test a key past its expiry is expired."""
        activated = LicenseActivator.activate(_issued(annual_plan), "device-1", NOW).activated

        with pytest.raises(LicenseExpiredError):
            LicenseValidator.validate(activated, "device-1", activated.expires_at + timedelta(seconds=1))

    def test_mismatch_reported_before_expiry(self, annual_plan):
        """Test an expired key for another identifier reports the mismatch."""
        activated = LicenseActivator.activate(_issued(annual_plan), "device-1", NOW).activated

        with pytest.raises(IdentifierMismatchError):
            LicenseValidator.validate(activated, "device-2", NOW + timedelta(days=800))

    def test_superseded_key_expires_at_truncation(self, annual_plan):
        """Test a truncated key is valid at the truncation instant and expired after."""
        first = LicenseActivator.activate(_issued(annual_plan), "device-1", NOW).activated
        later = NOW + timedelta(days=10)
        result = LicenseActivator.activate(_issued(annual_plan), "device-1", later, candidate=first)

        assert LicenseValidator.validate(result.superseded, "device-1", later)
        with pytest.raises(LicenseExpiredError):
            LicenseValidator.validate(result.superseded, "device-1", later + timedelta(seconds=1))
