"""
Plan domain entity.

A plan is a named duration policy a license key is issued under.
"""
import re
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Union

from core.domain.exceptions import InvalidParametersError
from plans.domain.duration import Duration

_ALIAS_PATTERN = re.compile(r"^[a-z0-9][a-z0-9_-]*$")


@dataclass(frozen=True)
class Plan:
    """
    Plan domain entity.

    ``alias`` is a secondary unique key; either ``id`` or ``alias``
    resolves a plan.
    """

    id: uuid.UUID
    alias: str
    name: str
    duration: Duration
    created_at: datetime

    def __post_init__(self):
        """Validate plan entity."""
        if not self.alias or not _ALIAS_PATTERN.match(self.alias):
            raise InvalidParametersError(f"Invalid plan alias: {self.alias!r}")
        if len(self.alias) > 100:
            raise InvalidParametersError("Plan alias too long")
        if not isinstance(self.duration, Duration):
            raise InvalidParametersError("Plan duration is required")

    @classmethod
    def create(
        cls,
        alias: str,
        duration: Union[Duration, str],
        name: Optional[str] = None,
        plan_id: Optional[uuid.UUID] = None,
    ) -> "Plan":
        """
        Create a new Plan entity.

        The duration is validated here, so a stored plan always carries a
        usable duration.

        Args:
            alias: Unique slug, e.g. ``"annual"``
            duration: Duration value object or text such as ``"1 year"``
            name: Optional display name (defaults to the alias)
            plan_id: Optional UUID (generated if not provided)

        Returns:
            Plan entity instance

        Raises:
            InvalidDurationError: If the duration text is malformed
        """
        if isinstance(duration, str):
            duration = Duration.parse(duration)

        return cls(
            id=plan_id or uuid.uuid4(),
            alias=alias,
            name=name or alias,
            duration=duration,
            created_at=datetime.now(timezone.utc),
        )
