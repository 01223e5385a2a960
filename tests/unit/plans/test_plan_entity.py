"""
Unit tests for Plan domain entity.
"""

import uuid

import pytest

from core.domain.exceptions import InvalidDurationError, InvalidParametersError
from plans.domain.duration import Duration, DurationUnit
from plans.domain.plan import Plan


class TestPlan:
    """Tests for Plan entity."""

    def test_create_from_text_duration(self):
        """Test creating a plan parses its duration."""
        plan = Plan.create(alias="annual", duration="1 year", name="Annual")

        assert plan.id is not None
        assert plan.alias == "annual"
        assert plan.name == "Annual"
        assert plan.duration == Duration(1, DurationUnit.YEARS)
        assert plan.created_at is not None

    def test_name_defaults_to_alias(self):
        """Test missing name falls back to the alias."""
        plan = Plan.create(alias="trial-14d", duration="14 days")
        assert plan.name == "trial-14d"

    def test_keeps_given_id(self):
        """Test an explicit id is kept."""
        plan_id = uuid.uuid4()
        plan = Plan.create(alias="annual", duration="1 year", plan_id=plan_id)
        assert plan.id == plan_id

    def test_invalid_duration(self):
        """Test a malformed duration is rejected at creation."""
        with pytest.raises(InvalidDurationError):
            Plan.create(alias="broken", duration="forever")

    @pytest.mark.parametrize("alias", ["", "Annual", "-lead", "has space", "a" * 101])
    def test_invalid_alias(self, alias):
        """Test alias must be a lowercase slug."""
        with pytest.raises(InvalidParametersError):
            Plan.create(alias=alias, duration="1 year")

    def test_immutable(self):
        """Test plans are frozen."""
        plan = Plan.create(alias="annual", duration="1 year")
        with pytest.raises(AttributeError):
            plan.alias = "other"
