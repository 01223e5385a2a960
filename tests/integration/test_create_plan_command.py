"""
Integration tests for the create_plan management command.
"""

from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from plans.infrastructure.models import Plan as PlanModel


@pytest.mark.django_db
@pytest.mark.integration
class TestCreatePlanCommand:
    """Integration tests for create_plan."""

    def test_create(self):
        """Test a plan is created with a parsed duration."""
        out = StringIO()

        call_command("create_plan", "annual", "1 Year", "--name", "Annual", stdout=out)

        plan = PlanModel.objects.get(alias="annual")
        assert plan.name == "Annual"
        assert plan.duration_quantity == 1
        assert plan.duration_unit == "years"
        assert "Created plan annual" in out.getvalue()

    def test_update_keeps_id_and_name(self):
        """Test re-running for an alias updates the same plan."""
        call_command("create_plan", "monthly", "1 month", "--name", "Monthly", stdout=StringIO())
        plan_id = PlanModel.objects.get(alias="monthly").id
        out = StringIO()

        call_command("create_plan", "monthly", "30 days", stdout=out)

        plan = PlanModel.objects.get(alias="monthly")
        assert plan.id == plan_id
        assert plan.name == "Monthly"
        assert (plan.duration_quantity, plan.duration_unit) == (30, "days")
        assert "Updated plan monthly" in out.getvalue()

    def test_invalid_duration(self):
        """Test a malformed duration is rejected and nothing is stored."""
        with pytest.raises(CommandError, match="INVALID_DURATION"):
            call_command("create_plan", "forever", "until the end", stdout=StringIO())

        assert not PlanModel.objects.exists()

    def test_duration_too_long(self):
        """Test a duration past the limit is rejected."""
        with pytest.raises(CommandError, match="INVALID_DURATION"):
            call_command("create_plan", "forever", "10000 years", stdout=StringIO())

        assert not PlanModel.objects.exists()
