from django.apps import AppConfig


class UsersConfig(AppConfig):
    """Staff accounts, enrolled patients and the audit trail."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "users"
    verbose_name = "Users & patients"
