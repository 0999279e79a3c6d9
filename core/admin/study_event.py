from django.contrib import admin, messages

from core.models import PatientExercise, StudyEvent, choices


@admin.register(StudyEvent)
class StudyEventAdmin(admin.ModelAdmin):
    list_display = (
        "patient",
        "study_day",
        "event_name",
        "event_type",
        "scheduled_date",
        "status",
        "completion_date",
    )
    list_filter = ("status", "event_type", "patient__group_type")
    search_fields = ("patient__patient_code", "event_name")
    date_hierarchy = "scheduled_date"
    ordering = ("scheduled_date", "study_day")
    raw_id_fields = ("patient", "completed_by")
    readonly_fields = ("created_at", "updated_at")
    actions = ("mark_skipped",)

    @admin.action(description="Mark selected pending events as skipped")
    def mark_skipped(self, request, queryset):
        updated = queryset.filter(status=choices.EventStatus.PENDING).update(
            status=choices.EventStatus.SKIPPED
        )
        self.message_user(request, f"{updated} event(s) marked as skipped.", messages.SUCCESS)


@admin.register(PatientExercise)
class PatientExerciseAdmin(admin.ModelAdmin):
    list_display = ("patient", "group_type", "study_day", "is_current", "created_at")
    list_filter = ("group_type", "is_current")
    search_fields = ("patient__patient_code",)
    raw_id_fields = ("patient", "created_by")
