"""Admin site configuration for the HOMER study tracker."""

from django.conf import settings
from django.contrib.admin import AdminSite
from django.contrib.admin.apps import AdminConfig


class HomerAdminSite(AdminSite):
    site_header = "HOMER Study Administration"
    site_title = "HOMER"
    index_title = "Study operations"

    def get_app_list(self, request, app_label=None):
        app_dict = self._build_app_dict(request, app_label)
        ordered_list = []
        preferred_order = getattr(settings, "ADMIN_APP_ORDER", [])

        for label in preferred_order:
            app_config = app_dict.pop(label, None)
            if app_config:
                ordered_list.append(app_config)

        # Remaining apps follow alphabetically.
        ordered_list.extend(sorted(app_dict.values(), key=lambda app: app["name"].lower()))
        return ordered_list


class HomerAdminConfig(AdminConfig):
    default_site = "homer.admin_site.HomerAdminSite"
