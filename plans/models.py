from plans.infrastructure.models import Plan  # noqa: F401
