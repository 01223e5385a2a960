"""
Django admin configuration for licenses app.
"""
from django.contrib import admin
from django.utils import timezone
from django.utils.html import format_html

from licenses.infrastructure.models import LicenseKey


@admin.register(LicenseKey)
class LicenseKeyAdmin(admin.ModelAdmin):
    """Admin interface for LicenseKey model."""

    list_display = [
        "value",
        "service_id",
        "plan",
        "identifier",
        "status_display",
        "activated_at",
        "expires_at",
        "created_at",
    ]
    list_filter = ["plan", "activated_at", "expires_at", "created_at"]
    search_fields = ["value", "service_id", "identifier", "plan__alias"]
    readonly_fields = [
        "id",
        "value",
        "identifier",
        "activated_at",
        "version",
        "created_at",
        "updated_at",
    ]
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("id", "value", "service_id", "plan"),
            },
        ),
        (
            "Activation",
            {
                "fields": ("identifier", "activated_at", "expires_at", "extra"),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("version", "created_at", "updated_at"),
                "classes": ("collapse",),
            },
        ),
    )

    def status_display(self, obj):
        """Display derived state with color coding."""
        if obj.activated_at is None:
            status, color = "issued", "gray"
        elif obj.expires_at and obj.expires_at < timezone.now():
            status, color = "expired", "red"
        else:
            status, color = "active", "green"
        return format_html(
            '<span style="color: {}; font-weight: bold;">{}</span>',
            color,
            status.upper(),
        )

    status_display.short_description = "Status"

    def get_queryset(self, request):
        """Optimize queryset."""
        return super().get_queryset(request).select_related("plan")
