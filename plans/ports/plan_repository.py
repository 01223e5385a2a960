"""
Plan repository port (interface).

This defines the contract for the plan catalog.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from typing import Optional

from plans.domain.plan import Plan


class PlanRepository(ABC):
    """Abstract repository for Plan entities."""

    @abstractmethod
    async def save(self, plan: Plan) -> Plan:
        """
        Save a plan entity.

        Args:
            plan: Plan entity to save

        Returns:
            Saved plan entity
        """
        pass

    @abstractmethod
    async def find_by_id_or_alias(self, reference: str) -> Optional[Plan]:
        """
        Resolve a plan by its UUID or its alias.

        Args:
            reference: Plan UUID (as text) or alias

        Returns:
            Plan entity or None if nothing matches
        """
        pass
