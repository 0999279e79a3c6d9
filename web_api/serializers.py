"""Model to JSON dict conversion for the API responses."""

from __future__ import annotations

from datetime import date
from typing import Any, Callable, Iterable, Optional

from django.core.paginator import Page

from inventory.service.sim import sim_expiry_flags


def _iso(value) -> Optional[str]:
    return value.isoformat() if value else None


def _fields(obj, names: Iterable[str]) -> dict[str, Any]:
    data: dict[str, Any] = {"id": obj.pk}
    for name in names:
        value = getattr(obj, name)
        data[name] = _iso(value) if hasattr(value, "isoformat") else value
    return data


def serialize_user(user) -> dict:
    return {
        "id": user.pk,
        "email": user.email,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "role": user.role,
    }


def serialize_patient_brief(patient) -> Optional[dict]:
    if patient is None:
        return None
    return {
        "id": patient.pk,
        "patient_code": patient.patient_code,
        "name": patient.name,
        "group_type": patient.group_type,
    }


PATIENT_FIELDS = (
    "patient_code",
    "name",
    "gender",
    "age",
    "affected_hand",
    "group_type",
    "vcg_assignment",
    "a0_date",
    "study_start_date",
    "enrollment_date",
    "phone_number",
    "status",
    "dropout_date",
    "dropout_reason",
    "dropout_reason_type",
    "schedule_status",
    "schedule_error",
    "created_at",
    "updated_at",
)


def serialize_patient(patient, today: Optional[date] = None) -> dict:
    data = _fields(patient, PATIENT_FIELDS)
    data["study_day"] = patient.get_study_day(today)
    return data


def serialize_event(event) -> dict:
    data = _fields(
        event,
        ("event_name", "event_type", "study_day", "scheduled_date", "status", "completion_date", "notes"),
    )
    data["patient_id"] = event.patient_id
    data["completed_by_id"] = event.completed_by_id
    return data


def serialize_event_with_patient(event) -> dict:
    data = serialize_event(event)
    data["patient"] = serialize_patient_brief(event.patient)
    return data


def serialize_watch(watch) -> dict:
    data = _fields(watch, ("name", "left_serial", "right_serial", "is_backup", "assignment_date"))
    data["assigned_patient"] = serialize_patient_brief(watch.assigned_patient)
    return data


def serialize_device_set(device) -> dict:
    data = _fields(
        device,
        (
            "set_number",
            "mars_device_id",
            "pluto_device_id",
            "laptop_number",
            "modem_serial",
            "status",
            "assignment_date",
            "expected_return_date",
            "return_date",
            "notes",
        ),
    )
    data["assigned_patient"] = serialize_patient_brief(device.assigned_patient)
    return data


def serialize_sim(sim, today: Optional[date] = None) -> dict:
    data = _fields(
        sim,
        (
            "sim_number",
            "provider",
            "modem_number",
            "recharge_date",
            "recharge_duration_days",
            "expiry_date",
            "is_active",
        ),
    )
    data["linked_device_set_id"] = sim.linked_device_set_id
    data["is_expired"], data["is_expiring_soon"] = sim_expiry_flags(sim.expiry_date, today)
    return data


def serialize_recharge(history) -> dict:
    data = _fields(history, ("recharge_date", "duration_days", "expiry_date", "created_at"))
    data["sim_card_id"] = history.sim_card_id
    return data


SESSION_FIELDS = (
    "session_date",
    "study_day",
    "duration_minutes",
    "adl_training_given",
    "patient_feedback",
    "therapist_notes",
)


def serialize_intervention_session(session) -> dict:
    data = _fields(
        session,
        SESSION_FIELDS
        + ("robotic_assessment_score", "exercises_performed", "mechanisms_used", "device_performance_notes"),
    )
    data["patient_id"] = session.patient_id
    return data


def serialize_control_session(session) -> dict:
    data = _fields(session, SESSION_FIELDS + ("manual_exercises_given",))
    data["patient_id"] = session.patient_id
    return data


def serialize_adverse_event(event) -> dict:
    data = _fields(
        event,
        (
            "event_date",
            "study_day",
            "event_type",
            "severity",
            "description",
            "action_taken",
            "reported_to_pi",
            "requires_dropout",
            "created_at",
        ),
    )
    data["patient"] = serialize_patient_brief(event.patient)
    return data


def serialize_issue(issue) -> dict:
    data = _fields(
        issue,
        (
            "contact_date",
            "contact_type",
            "duration_minutes",
            "issue_type",
            "issue_description",
            "root_cause",
            "solution_provided",
            "follow_up_required",
            "follow_up_date",
            "created_at",
        ),
    )
    data["patient"] = serialize_patient_brief(issue.patient)
    return data


def serialize_reminder(reminder) -> dict:
    data = _fields(reminder, ("reminder_type", "title", "description", "due_date", "is_completed"))
    data["patient"] = serialize_patient_brief(reminder.patient)
    data["related_id"] = reminder.study_event_id or reminder.sim_card_id or reminder.issue_log_id
    return data


def serialize_exercise(exercise) -> dict:
    data = _fields(
        exercise,
        (
            "group_type",
            "mars_mechanisms",
            "pluto_mechanisms",
            "control_exercises",
            "adl_notes",
            "notes",
            "study_day",
            "is_current",
            "created_at",
        ),
    )
    data["patient_id"] = exercise.patient_id
    return data


def serialize_page(page: Page, serializer: Callable[[Any], dict]) -> dict:
    return {
        "items": [serializer(item) for item in page.object_list],
        "pagination": {
            "page": page.number,
            "page_size": page.paginator.per_page,
            "total": page.paginator.count,
            "total_pages": page.paginator.num_pages,
        },
    }
