"""
Django admin configuration for plans app.
"""
from django.contrib import admin

from plans.infrastructure.models import Plan


@admin.register(Plan)
class PlanAdmin(admin.ModelAdmin):
    """Admin interface for Plan model."""

    list_display = ["alias", "name", "duration_quantity", "duration_unit", "created_at"]
    list_filter = ["duration_unit"]
    search_fields = ["alias", "name"]
    readonly_fields = ["id", "created_at"]
