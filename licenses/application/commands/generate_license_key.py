"""
GenerateLicenseKeyCommand.

Command to issue a new license key for a service under a plan.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class GenerateLicenseKeyCommand:
    """
    Command to issue a license key.

    ``plan`` is a plan UUID or alias; it is resolved when the command
    is handled.
    """

    service_id: Optional[str]
    plan: Optional[str]
    now: Optional[datetime] = None
