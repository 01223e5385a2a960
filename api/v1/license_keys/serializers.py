"""
Serializers for license key API endpoints.

Field names on the wire are camelCase.
"""

from rest_framework import serializers

# Wire name -> stored field name.
SORT_FIELDS = {
    "createdAt": "created_at",
    "activatedAt": "activated_at",
    "expiresAt": "expires_at",
    "value": "value",
    "serviceId": "service_id",
}
SORT_CHOICES = [name for field in SORT_FIELDS for name in (field, f"-{field}")]


class GenerateLicenseKeyRequestSerializer(serializers.Serializer):
    """Serializer for generate license key request."""

    # Presence is checked by the handler so a missing field maps to MISSING_PARAMETERS.
    serviceId = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    plan = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class ActivateLicenseKeyRequestSerializer(serializers.Serializer):
    """Serializer for activate license key request."""

    identifier = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, trim_whitespace=False
    )
    extra = serializers.DictField(required=False, allow_null=True)


class ValidateLicenseKeyRequestSerializer(serializers.Serializer):
    """Serializer for validate license key request."""

    identifier = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, trim_whitespace=False
    )


class LicenseKeyListParamsSerializer(serializers.Serializer):
    """Serializer for list query parameters."""

    status = serializers.ChoiceField(choices=["issued", "active", "expired"], required=False)
    serviceId = serializers.CharField(required=False)
    plan = serializers.CharField(required=False)
    identifier = serializers.CharField(required=False, trim_whitespace=False)
    page = serializers.IntegerField(required=False, min_value=1, default=1)
    limit = serializers.IntegerField(required=False, min_value=1)
    sort = serializers.ChoiceField(choices=SORT_CHOICES, required=False, default="-createdAt")


class PlanSerializer(serializers.Serializer):
    """Serializer for PlanDTO."""

    id = serializers.UUIDField()
    alias = serializers.CharField()
    name = serializers.CharField()
    duration = serializers.CharField()


class LicenseKeySerializer(serializers.Serializer):
    """Serializer for LicenseKeyDTO."""

    id = serializers.UUIDField()
    value = serializers.CharField()
    serviceId = serializers.CharField(source="service_id")
    plan = PlanSerializer(allow_null=True)
    identifier = serializers.CharField(allow_null=True)
    activatedAt = serializers.DateTimeField(source="activated_at", allow_null=True)
    expiresAt = serializers.DateTimeField(source="expires_at", allow_null=True)
    extra = serializers.DictField()
    status = serializers.CharField()
    createdAt = serializers.DateTimeField(source="created_at", allow_null=True)


class LicenseKeyPageSerializer(serializers.Serializer):
    """Serializer for LicenseKeyPageDTO."""

    results = LicenseKeySerializer(many=True)
    total = serializers.IntegerField()
    page = serializers.IntegerField()
    limit = serializers.IntegerField()
    pages = serializers.IntegerField()
