import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("plans", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="LicenseKey",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4, editable=False, primary_key=True, serialize=False
                    ),
                ),
                ("value", models.CharField(max_length=100, unique=True)),
                ("service_id", models.CharField(db_index=True, max_length=255)),
                ("identifier", models.CharField(blank=True, max_length=500, null=True)),
                ("activated_at", models.DateTimeField(blank=True, null=True)),
                ("expires_at", models.DateTimeField(blank=True, null=True)),
                (
                    "extra",
                    models.JSONField(blank=True, default=dict, help_text="Activation metadata"),
                ),
                ("version", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "plan",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="license_keys",
                        to="plans.plan",
                    ),
                ),
            ],
            options={
                "db_table": "license_keys",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["identifier", "service_id", "expires_at"],
                        name="license_key_identif_6a1c2e_idx",
                    ),
                    models.Index(
                        fields=["service_id", "created_at"],
                        name="license_key_service_b84f0d_idx",
                    ),
                ],
            },
        ),
    ]
