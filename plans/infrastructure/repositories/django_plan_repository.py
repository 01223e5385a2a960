"""
Django implementation of PlanRepository port.

This adapter converts between domain entities and Django ORM models.
"""
import uuid
from typing import Optional

from asgiref.sync import sync_to_async
from django.db.models import Q

from core.infrastructure.database import translate_database_errors
from plans.domain.duration import Duration, DurationUnit
from plans.domain.plan import Plan
from plans.infrastructure.models import Plan as PlanModel
from plans.ports.plan_repository import PlanRepository


def plan_to_domain(model: PlanModel) -> Plan:
    """
    Convert Django model to domain entity.

    Args:
        model: Django Plan model

    Returns:
        Plan domain entity
    """
    return Plan(
        id=model.id,
        alias=model.alias,
        name=model.name,
        duration=Duration(model.duration_quantity, DurationUnit(model.duration_unit)),
        created_at=model.created_at,
    )


def plan_lookup(reference: str, prefix: str = "") -> Q:
    """Build the id-or-alias filter for a plan reference, optionally across a relation."""
    alias = Q(**{f"{prefix}alias": reference})
    try:
        return Q(**{f"{prefix}id": uuid.UUID(str(reference))}) | alias
    except ValueError:
        return alias


class DjangoPlanRepository(PlanRepository):
    """Django ORM implementation of PlanRepository."""

    @sync_to_async
    @translate_database_errors
    def save(self, plan: Plan) -> Plan:
        """
        Save a plan entity.

        Args:
            plan: Plan entity to save

        Returns:
            Saved plan entity
        """
        model, _ = PlanModel.objects.update_or_create(
            id=plan.id,
            defaults={
                "alias": plan.alias,
                "name": plan.name,
                "duration_quantity": plan.duration.quantity,
                "duration_unit": plan.duration.unit.value,
            },
        )
        return plan_to_domain(model)

    @sync_to_async
    @translate_database_errors
    def find_by_id_or_alias(self, reference: str) -> Optional[Plan]:
        """
        Resolve a plan by its UUID or its alias.

        Args:
            reference: Plan UUID (as text) or alias

        Returns:
            Plan entity or None if nothing matches
        """
        if not reference:
            return None
        model = PlanModel.objects.filter(plan_lookup(reference)).order_by("alias").first()
        return plan_to_domain(model) if model else None
