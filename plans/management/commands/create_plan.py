"""
Django management command to add a plan to the catalog.

The duration is parsed and validated here, at plan-creation time, so
activation never meets a malformed duration.
"""

import logging

from asgiref.sync import async_to_sync
from django.core.management.base import BaseCommand, CommandError

from core.domain.exceptions import DomainException
from plans.domain.plan import Plan
from plans.infrastructure.repositories.django_plan_repository import DjangoPlanRepository

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Command to create or update a plan."""

    help = 'Create a plan, e.g. create_plan annual "1 year" --name "Annual"'

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument("alias", type=str, help="Unique plan alias")
        parser.add_argument("duration", type=str, help='Duration such as "30 days" or "1 year"')
        parser.add_argument("--name", type=str, default=None, help="Display name")

    def handle(self, *args, **options):
        """Execute the command."""
        repository = DjangoPlanRepository()

        existing = async_to_sync(repository.find_by_id_or_alias)(options["alias"])
        try:
            plan = Plan.create(
                alias=options["alias"],
                duration=options["duration"],
                name=options["name"] or (existing.name if existing else None),
                plan_id=existing.id if existing else None,
            )
        except DomainException as e:
            raise CommandError(f"{e.code}: {e.message}") from e

        saved = async_to_sync(repository.save)(plan)
        logger.info("Plan %s saved with duration %s", saved.alias, saved.duration)

        verb = "Updated" if existing else "Created"
        # pylint: disable=no-member
        self.stdout.write(self.style.SUCCESS(f"{verb} plan {saved.alias} ({saved.duration}) id={saved.id}"))
