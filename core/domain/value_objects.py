"""
Value objects for the domain.

Value objects are immutable objects that are defined by their attributes
rather than their identity. They have no identity and are compared by value.
"""
from abc import ABC
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

ExtraValue = Union[str, int, float, bool, None]


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects.

    Value objects are immutable and compared by value.
    """

    def __eq__(self, other):
        """Compare value objects by their attributes."""
        if not isinstance(other, self.__class__):
            return False
        return self.__dict__ == other.__dict__

    def __hash__(self):
        """Make value objects hashable."""
        return hash(tuple(sorted(self.__dict__.items())))


@dataclass(frozen=True)
class ServiceId(ValueObject):
    """Identifier of the service that owns a license key."""

    value: str

    def __post_init__(self):
        """Validate service id."""
        if not self.value or not self.value.strip() or self.value == "undefined":
            raise ValueError("Service id cannot be empty")
        if len(self.value) > 255:
            raise ValueError("Service id too long")

    def __str__(self) -> str:
        """Return service id as string."""
        return self.value


@dataclass(frozen=True)
class Identifier(ValueObject):
    """Binding target of an activation (device id, user id, ...)."""

    value: str

    def __post_init__(self):
        """Validate identifier."""
        if not self.value or len(self.value.strip()) == 0:
            raise ValueError("Identifier cannot be empty")
        if len(self.value) > 500:
            raise ValueError("Identifier too long")

    def __str__(self) -> str:
        """Return identifier as string."""
        return self.value


class LicenseKeyState(Enum):
    """Derived lifecycle state of a license key."""

    ISSUED = "issued"
    ACTIVE = "active"
    EXPIRED = "expired"

    def __str__(self) -> str:
        """Return state as string."""
        return self.value


def clean_extra(extra: Optional[Mapping[str, Any]]) -> Dict[str, ExtraValue]:
    """
    Check that activation metadata is a flat map of scalar values.

    Args:
        extra: Caller supplied metadata (may be None)

    Returns:
        A plain dict copy of the metadata

    Raises:
        ValueError: If a key is not a string or a value is not a scalar
    """
    if extra is None:
        return {}
    if not isinstance(extra, Mapping):
        raise ValueError("Extra metadata must be an object")

    cleaned = {}
    for key, value in extra.items():
        if not isinstance(key, str):
            raise ValueError("Extra metadata keys must be strings")
        if value is not None and not isinstance(value, (str, int, float, bool)):
            raise ValueError(f"Extra metadata value for '{key}' must be a scalar")
        cleaned[key] = value
    return cleaned
