"""
Plan model.
"""
import uuid

from django.core.exceptions import ValidationError
from django.db import models

from core.domain.exceptions import InvalidDurationError
from plans.domain.duration import Duration, DurationUnit


class Plan(models.Model):
    """A named duration policy license keys are issued under."""

    UNIT_CHOICES = [(unit.value, unit.value.capitalize()) for unit in DurationUnit]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    alias = models.SlugField(max_length=100, unique=True)
    name = models.CharField(max_length=255)
    duration_quantity = models.PositiveIntegerField()
    duration_unit = models.CharField(max_length=16, choices=UNIT_CHOICES)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "plans"
        ordering = ["alias"]

    def __str__(self):
        return f"{self.alias} ({self.duration_quantity} {self.duration_unit})"

    def clean(self):
        """Reject durations the lifecycle engine could not apply."""
        try:
            Duration(self.duration_quantity or 0, DurationUnit(self.duration_unit))
        except (InvalidDurationError, ValueError) as exc:
            raise ValidationError({"duration_quantity": str(exc)}) from exc
