"""
LicenseKey model.
"""
import uuid

from django.db import models


class LicenseKey(models.Model):
    """
    An issued license key.

    Starts unbound; activation sets identifier, activated_at and
    expires_at together. ``version`` is bumped by every committed
    mutation and guards conditional updates.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    value = models.CharField(max_length=100, unique=True)
    service_id = models.CharField(max_length=255, db_index=True)
    plan = models.ForeignKey(
        "plans.Plan",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="license_keys",
    )
    identifier = models.CharField(max_length=500, null=True, blank=True)
    activated_at = models.DateTimeField(null=True, blank=True)
    expires_at = models.DateTimeField(null=True, blank=True)
    extra = models.JSONField(default=dict, blank=True, help_text="Activation metadata")
    version = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "license_keys"
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["identifier", "service_id", "expires_at"],
                name="license_key_identif_6a1c2e_idx",
            ),
            models.Index(
                fields=["service_id", "created_at"],
                name="license_key_service_b84f0d_idx",
            ),
        ]

    def __str__(self):
        return self.value
