"""Patient admin configuration."""

from django.contrib import admin

from users.models import Patient


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = (
        "patient_code",
        "name",
        "group_type",
        "status",
        "study_start_date",
        "schedule_status",
        "created_at",
    )
    list_filter = ("group_type", "status", "schedule_status", "affected_hand")
    search_fields = ("patient_code", "name", "phone_number")
    readonly_fields = ("schedule_status", "schedule_error", "created_by", "created_at", "updated_at")
    fieldsets = (
        (
            "Enrollment",
            {
                "fields": (
                    "patient_code",
                    "group_type",
                    "vcg_assignment",
                    "enrollment_date",
                    "study_start_date",
                    "a0_date",
                )
            },
        ),
        (
            "Demographics",
            {"fields": ("name", "gender", "age", "affected_hand", "phone_number")},
        ),
        (
            "Status",
            {
                "fields": (
                    "status",
                    "dropout_date",
                    "dropout_reason",
                    "dropout_reason_type",
                    "schedule_status",
                    "schedule_error",
                )
            },
        ),
        (
            "Other",
            {"fields": ("created_by", "created_at", "updated_at")},
        ),
    )

    def has_delete_permission(self, request, obj=None):
        # Deletion must go through PatientService to return loaned devices.
        return False
