"""
ListLicenseKeysQuery.

Query to list license keys with filters and pagination.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class ListLicenseKeysQuery:
    """
    Query to list license keys.

    ``status`` is one of issued, active, expired. ``sort`` is a stored
    field name, ``-`` prefixed for descending order.
    """

    status: Optional[str] = None
    service_id: Optional[str] = None
    plan: Optional[str] = None
    identifier: Optional[str] = None
    page: int = 1
    limit: Optional[int] = None
    sort: str = "-created_at"
    now: Optional[datetime] = None
