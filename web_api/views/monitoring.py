"""Reminders and the dashboard."""

from dataclasses import asdict

from monitoring.services import dashboard
from monitoring.services import reminders as reminder_service
from users.decorators import api_login_required
from web_api.serializers import serialize_event_with_patient, serialize_reminder, serialize_sim
from web_api.views.common import api_view, json_ok, parse_bool_param, parse_int_param


@api_view("GET")
@api_login_required
def reminder_collection(request):
    reminders = reminder_service.list_reminders(
        patient_id=parse_int_param(request.GET.get("patient_id"), name="patient_id", default=0, min_value=0) or None,
        reminder_type=request.GET.get("reminder_type") or None,
        is_completed=parse_bool_param(request.GET.get("is_completed")),
    )
    return json_ok([serialize_reminder(item) for item in reminders])


@api_view("GET")
@api_login_required
def reminders_today(request):
    return json_ok([serialize_reminder(item) for item in reminder_service.reminders_due_today()])


@api_view("GET")
@api_login_required
def reminders_overdue(request):
    return json_ok([serialize_reminder(item) for item in reminder_service.overdue_reminders()])


@api_view("PUT", "POST")
@api_login_required
def reminder_complete(request, pk: int):
    return json_ok(serialize_reminder(reminder_service.complete_reminder(pk)))


@api_view("DELETE")
@api_login_required
def reminder_detail(request, pk: int):
    reminder_service.delete_reminder(pk)
    return json_ok()


@api_view("GET")
@api_login_required
def dashboard_stats(request):
    return json_ok(asdict(dashboard.get_dashboard_stats()))


@api_view("GET")
@api_login_required
def dashboard_actions(request):
    actions = dashboard.get_action_list()
    return json_ok(
        {
            "upcoming_events": [serialize_event_with_patient(event) for event in actions.upcoming_events],
            "overdue_events": [serialize_event_with_patient(event) for event in actions.overdue_events],
            "expiring_sims": [serialize_sim(sim) for sim in actions.expiring_sims],
        }
    )
