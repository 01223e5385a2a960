"""
ActivateLicenseKeyCommand.

Command to bind an issued license key to an identifier.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass
class ActivateLicenseKeyCommand:
    """Command to activate a license key."""

    value: str
    identifier: Optional[str]
    extra: Optional[Dict[str, Any]] = None
    now: Optional[datetime] = None  # Defaults to the current time
