"""
ValidateLicenseKeyQuery.

Query to check that a license key is active for an identifier.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class ValidateLicenseKeyQuery:
    """Query to validate a license key."""

    value: str
    identifier: Optional[str]
    now: Optional[datetime] = None
