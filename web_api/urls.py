from django.urls import path

from users.choices import GroupType
from web_api.views import auth, clinical, events, inventory, monitoring, patients, reports

app_name = "web_api"

urlpatterns = [
    path("health", reports.health, name="health"),
    # Auth
    path("auth/csrf", auth.csrf, name="auth_csrf"),
    path("auth/login", auth.login, name="auth_login"),
    path("auth/logout", auth.logout, name="auth_logout"),
    path("auth/me", auth.me, name="auth_me"),
    # Patients
    path("patients/", patients.patient_collection, name="patients"),
    path("patients/next-id", patients.next_patient_code, name="patient_next_id"),
    path("patients/<int:pk>", patients.patient_detail, name="patient_detail"),
    path("patients/<int:pk>/dropout", patients.patient_dropout, name="patient_dropout"),
    path("patients/<int:pk>/complete", patients.patient_complete, name="patient_complete"),
    path("patients/<int:pk>/timeline", patients.patient_timeline, name="patient_timeline"),
    path("patients/<int:pk>/retry-schedule", patients.retry_patient_schedule, name="patient_retry_schedule"),
    # Study events
    path("events/", events.event_collection, name="events"),
    path("events/<int:pk>", events.event_detail, name="event_detail"),
    path("events/<int:pk>/cancel", events.event_cancel, name="event_cancel"),
    # Device sets
    path("devices/", inventory.device_collection, name="devices"),
    path("devices/<int:pk>", inventory.device_detail, name="device_detail"),
    path("devices/<int:pk>/assign", inventory.device_assign, name="device_assign"),
    path("devices/<int:pk>/return", inventory.device_return, name="device_return"),
    path("devices/<int:pk>/swap-actigraphs", inventory.device_swap_actigraphs, name="device_swap_actigraphs"),
    # Watches
    path("watches/", inventory.watch_collection, name="watches"),
    path("watches/<int:pk>", inventory.watch_detail, name="watch_detail"),
    path("watches/<int:pk>/assign", inventory.watch_assign, name="watch_assign"),
    path("watches/<int:pk>/unassign", inventory.watch_unassign, name="watch_unassign"),
    path("watches/<int:pk>/swap", inventory.watch_swap, name="watch_swap"),
    # SIM cards
    path("sims/", inventory.sim_collection, name="sims"),
    path("sims/expiring", inventory.sim_expiring, name="sims_expiring"),
    path("sims/<int:pk>", inventory.sim_detail, name="sim_detail"),
    path("sims/<int:pk>/recharge", inventory.sim_recharge, name="sim_recharge"),
    # Sessions
    path(
        "sessions/intervention",
        clinical.session_create,
        {"group_type": GroupType.INTERVENTION},
        name="intervention_sessions",
    ),
    path(
        "sessions/intervention/patient/<int:patient_id>",
        clinical.session_list,
        {"group_type": GroupType.INTERVENTION},
        name="intervention_sessions_for_patient",
    ),
    path(
        "sessions/intervention/<int:pk>",
        clinical.session_detail,
        {"group_type": GroupType.INTERVENTION},
        name="intervention_session_detail",
    ),
    path("sessions/control", clinical.session_create, {"group_type": GroupType.CONTROL}, name="control_sessions"),
    path(
        "sessions/control/patient/<int:patient_id>",
        clinical.session_list,
        {"group_type": GroupType.CONTROL},
        name="control_sessions_for_patient",
    ),
    path(
        "sessions/control/<int:pk>",
        clinical.session_detail,
        {"group_type": GroupType.CONTROL},
        name="control_session_detail",
    ),
    # Exercises
    path("exercises/", clinical.exercise_create, name="exercises"),
    path("exercises/patient/<int:patient_id>", clinical.exercise_list, name="exercises_for_patient"),
    path("exercises/<int:pk>", clinical.exercise_detail, name="exercise_detail"),
    # Adverse events and issues
    path("adverse-events/", clinical.adverse_event_collection, name="adverse_events"),
    path("adverse-events/<int:pk>", clinical.adverse_event_detail, name="adverse_event_detail"),
    path("issues/", clinical.issue_collection, name="issues"),
    path("issues/<int:pk>", clinical.issue_detail, name="issue_detail"),
    # Reminders
    path("reminders/", monitoring.reminder_collection, name="reminders"),
    path("reminders/today", monitoring.reminders_today, name="reminders_today"),
    path("reminders/overdue", monitoring.reminders_overdue, name="reminders_overdue"),
    path("reminders/<int:pk>", monitoring.reminder_detail, name="reminder_detail"),
    path("reminders/<int:pk>/complete", monitoring.reminder_complete, name="reminder_complete"),
    # Dashboard
    path("dashboard/stats", monitoring.dashboard_stats, name="dashboard_stats"),
    path("dashboard/actions", monitoring.dashboard_actions, name="dashboard_actions"),
    # Export
    path("export/patients", reports.export_csv, {"kind": "patients"}, name="export_patients"),
    path("export/adverse-events", reports.export_csv, {"kind": "adverse-events"}, name="export_adverse_events"),
    path("export/dropouts", reports.export_csv, {"kind": "dropouts"}, name="export_dropouts"),
    path("export/devices", reports.export_csv, {"kind": "devices"}, name="export_devices"),
    path("export/patient/<int:pk>", reports.export_patient, name="export_patient"),
    # Sync and backups
    path("sync/all", reports.sync_all, name="sync_all"),
    path("sync/import", reports.sync_import, name="sync_import"),
    path("sync/backups", reports.backup_collection, name="sync_backups"),
    path("sync/backups/download", reports.backup_download, name="sync_backup_download"),
]
