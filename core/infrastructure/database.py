"""
Database utilities.
"""

import functools
import logging

from django.db import DatabaseError, IntegrityError

from core.domain.exceptions import InfrastructureError

logger = logging.getLogger(__name__)


def translate_database_errors(func):
    """
    Re-raise Django ``DatabaseError`` from a repository method as ``InfrastructureError``.

    ``IntegrityError`` is left to the caller, which knows which
    constraint it was relying on.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except IntegrityError:
            raise
        except DatabaseError as exc:
            logger.error("Record store failure in %s: %s", func.__qualname__, exc, exc_info=True)
            raise InfrastructureError() from exc

    return wrapper
