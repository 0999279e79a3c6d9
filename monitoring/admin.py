from django.contrib import admin

from monitoring.models import AdverseEvent, IssueLog, Reminder


@admin.register(AdverseEvent)
class AdverseEventAdmin(admin.ModelAdmin):
    list_display = ("patient", "event_date", "event_type", "severity", "reported_to_pi", "requires_dropout")
    list_filter = ("severity", "reported_to_pi", "requires_dropout")
    search_fields = ("patient__patient_code", "event_type", "description")
    date_hierarchy = "event_date"
    raw_id_fields = ("patient", "logged_by")


@admin.register(IssueLog)
class IssueLogAdmin(admin.ModelAdmin):
    list_display = ("patient", "contact_date", "contact_type", "issue_type", "follow_up_required", "follow_up_date")
    list_filter = ("issue_type", "contact_type", "follow_up_required")
    search_fields = ("patient__patient_code", "issue_description")
    raw_id_fields = ("patient", "logged_by")


@admin.register(Reminder)
class ReminderAdmin(admin.ModelAdmin):
    list_display = ("title", "reminder_type", "patient", "due_date", "is_completed")
    list_filter = ("reminder_type", "is_completed")
    search_fields = ("title", "description", "patient__patient_code")
    date_hierarchy = "due_date"
    raw_id_fields = ("patient", "study_event", "sim_card", "issue_log")
