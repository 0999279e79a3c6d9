"""
URL configuration for the HOMER study tracker.

``/admin/`` is the Django admin for study staff; everything the frontend uses
lives under ``/api/`` (see ``web_api.urls``).
"""
from django.contrib import admin
from django.contrib.auth.views import LogoutView
from django.urls import include, path

admin.site.logout = LogoutView.as_view(next_page="/admin/")

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/", include("web_api.urls", namespace="web_api")),
]
