from django.contrib import admin

from core.models import ControlSession, InterventionSession


class BaseSessionAdmin(admin.ModelAdmin):
    list_display = ("patient", "session_date", "study_day", "duration_minutes", "logged_by")
    search_fields = ("patient__patient_code",)
    date_hierarchy = "session_date"
    raw_id_fields = ("patient", "logged_by")
    readonly_fields = ("created_at", "updated_at")


@admin.register(InterventionSession)
class InterventionSessionAdmin(BaseSessionAdmin):
    list_display = BaseSessionAdmin.list_display + ("robotic_assessment_score",)


@admin.register(ControlSession)
class ControlSessionAdmin(BaseSessionAdmin):
    pass
