"""
GetLicenseKeyQuery.

Query to fetch a single license key by UUID or value.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class GetLicenseKeyQuery:
    """Query to get one license key."""

    reference: str
    now: Optional[datetime] = None
