"""
Plan duration value object.

A duration is a positive quantity of one calendar unit. Month based
units are added on the calendar (the day is clamped to the last day of
the target month), shorter units are added as exact time deltas.
"""

import calendar
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum

from core.domain.exceptions import InvalidDurationError
from core.domain.value_objects import ValueObject


class DurationUnit(Enum):
    """Closed set of calendar units a plan duration may use."""

    MINUTES = "minutes"
    HOURS = "hours"
    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"
    QUARTERS = "quarters"
    YEARS = "years"

    def __str__(self) -> str:
        """Return unit as string."""
        return self.value

    @classmethod
    def parse(cls, text: str) -> "DurationUnit":
        """
        Resolve a unit name, singular or plural, ignoring case.

        Raises:
            InvalidDurationError: If the unit is not supported
        """
        normalized = text.strip().lower()
        for unit in cls:
            if normalized in (unit.value, unit.value[:-1]):
                return unit
        raise InvalidDurationError(f"Unsupported duration unit: {text!r}")


_MONTHS_PER_UNIT = {
    DurationUnit.MONTHS: 1,
    DurationUnit.QUARTERS: 3,
    DurationUnit.YEARS: 12,
}

_DELTA_PER_UNIT = {
    DurationUnit.MINUTES: timedelta(minutes=1),
    DurationUnit.HOURS: timedelta(hours=1),
    DurationUnit.DAYS: timedelta(days=1),
    DurationUnit.WEEKS: timedelta(weeks=1),
}

# Longest window a single plan may grant, per unit (about a century).
MAX_QUANTITY_PER_UNIT = {
    DurationUnit.MINUTES: 100 * 366 * 24 * 60,
    DurationUnit.HOURS: 100 * 366 * 24,
    DurationUnit.DAYS: 100 * 366,
    DurationUnit.WEEKS: 100 * 53,
    DurationUnit.MONTHS: 100 * 12,
    DurationUnit.QUARTERS: 100 * 4,
    DurationUnit.YEARS: 100,
}


def add_months(moment: datetime, months: int) -> datetime:
    """
    Add calendar months to a datetime.

    The day of month is clamped, so Jan 31 + 1 month is the last day of
    February and Feb 29 + 12 months is Feb 28 in a non-leap year.
    """
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


@dataclass(frozen=True)
class Duration(ValueObject):
    """Duration of a plan, e.g. ``Duration(15, DurationUnit.YEARS)``."""

    quantity: int
    unit: DurationUnit

    def __post_init__(self):
        """Validate duration."""
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise InvalidDurationError("Duration quantity must be an integer")
        if self.quantity < 1:
            raise InvalidDurationError("Duration quantity must be at least 1")
        if not isinstance(self.unit, DurationUnit):
            raise InvalidDurationError(f"Unsupported duration unit: {self.unit!r}")
        if self.quantity > MAX_QUANTITY_PER_UNIT[self.unit]:
            raise InvalidDurationError(
                f"Duration may be at most {MAX_QUANTITY_PER_UNIT[self.unit]} {self.unit.value}"
            )

    @classmethod
    def parse(cls, text: str) -> "Duration":
        """
        Parse a duration written as ``"<quantity> <unit>"``.

        Args:
            text: Duration text, e.g. ``"30 days"`` or ``"1 year"``

        Returns:
            Duration value object

        Raises:
            InvalidDurationError: If the text is malformed
        """
        if not isinstance(text, str):
            raise InvalidDurationError("Duration must be a string")

        parts = text.split()
        if len(parts) != 2:
            raise InvalidDurationError(
                f"Duration must look like '<quantity> <unit>', got {text!r}"
            )

        quantity_text, unit_text = parts
        if not quantity_text.isdecimal():
            raise InvalidDurationError(f"Duration quantity must be a whole number, got {text!r}")

        return cls(quantity=int(quantity_text), unit=DurationUnit.parse(unit_text))

    def add_to(self, moment: datetime) -> datetime:
        """
        Return ``moment`` shifted forward by this duration.

        Args:
            moment: Start of the window

        Returns:
            End of the window, with the same tzinfo as ``moment``

        Raises:
            InvalidDurationError: If the end falls outside the supported date range
        """
        try:
            if self.unit in _MONTHS_PER_UNIT:
                return add_months(moment, self.quantity * _MONTHS_PER_UNIT[self.unit])
            return moment + self.quantity * _DELTA_PER_UNIT[self.unit]
        except (ValueError, OverflowError) as exc:
            raise InvalidDurationError(
                f"{self} from {moment.isoformat()} falls outside the supported date range"
            ) from exc

    def __str__(self) -> str:
        """Return duration in its text form."""
        unit = self.unit.value[:-1] if self.quantity == 1 else self.unit.value
        return f"{self.quantity} {unit}"
