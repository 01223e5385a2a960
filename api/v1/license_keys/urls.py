"""
URL configuration for license key API endpoints.
"""

from django.urls import path

from api.v1.license_keys import views

urlpatterns = [
    path(
        "keys",
        views.LicenseKeyCollectionView.as_view(),
        name="license-keys",
    ),
    path(
        "keys/<str:reference>",
        views.LicenseKeyDetailView.as_view(),
        name="license-key-detail",
    ),
    path(
        "keys/<str:value>/activate",
        views.ActivateLicenseKeyView.as_view(),
        name="activate-license-key",
    ),
    path(
        "keys/<str:value>/validate",
        views.ValidateLicenseKeyView.as_view(),
        name="validate-license-key",
    ),
]
