"""
CSV reports for the study team.

Every export returns the CSV text; the view layer adds the download headers.
Dates are written as ISO ``YYYY-MM-DD`` and missing values as empty cells.
"""

from __future__ import annotations

import csv
import io
from datetime import date, datetime
from typing import Iterable, Sequence

from django.utils import timezone

from core.models import ControlSession, InterventionSession, StudyEvent
from inventory.models import ActigraphWatch, DeviceSet
from monitoring.models import AdverseEvent, IssueLog
from users import choices as user_choices
from users.models import Patient
from users.services.patient import PatientNotFoundError

PATIENT_HEADER = (
    "Patient ID",
    "Age",
    "Affected Hand",
    "Group",
    "VCG Assignment",
    "Study Start",
    "Enrollment Date",
    "Phone",
    "Status",
)
ADVERSE_EVENT_HEADER = ("Patient ID", "Event Date", "Study Day", "Event Type", "Severity", "Description")
DROPOUT_HEADER = ("Patient ID", "Age", "Group", "Study Start Date", "Dropout Date", "Dropout Reason")
DEVICE_HEADER = (
    "Set Number",
    "MARS ID",
    "PLUTO ID",
    "Laptop",
    "Modem",
    "Actigraph Left",
    "Actigraph Right",
    "Status",
    "Patient ID",
)


def _cell(value) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return timezone.localtime(value).date().isoformat() if timezone.is_aware(value) else value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def _render(header: Sequence[str], rows: Iterable[Sequence]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(header)
    for row in rows:
        writer.writerow([_cell(value) for value in row])
    return buffer.getvalue()


def _patient_row(patient: Patient) -> tuple:
    return (
        patient.patient_code,
        patient.age,
        patient.affected_hand,
        patient.group_type,
        patient.vcg_assignment,
        patient.study_start_date,
        patient.enrollment_date,
        patient.phone_number,
        patient.status,
    )


def export_patients_csv() -> str:
    patients = Patient.objects.order_by("-created_at", "-id")
    return _render(PATIENT_HEADER, (_patient_row(patient) for patient in patients))


def export_adverse_events_csv() -> str:
    events = AdverseEvent.objects.select_related("patient").order_by("-event_date", "-id")
    return _render(
        ADVERSE_EVENT_HEADER,
        (
            (
                event.patient.patient_code,
                event.event_date,
                event.study_day,
                event.event_type,
                event.severity,
                event.description,
            )
            for event in events
        ),
    )


def export_dropouts_csv() -> str:
    patients = Patient.objects.filter(status=user_choices.PatientStatus.DROPPED_OUT).order_by("-dropout_date", "-id")
    return _render(
        DROPOUT_HEADER,
        (
            (
                patient.patient_code,
                patient.age,
                patient.group_type,
                patient.study_start_date,
                patient.dropout_date,
                patient.dropout_reason,
            )
            for patient in patients
        ),
    )


def export_devices_csv() -> str:
    """Device sets with the actigraph pair currently worn by the set's patient."""

    devices = DeviceSet.objects.select_related("assigned_patient").order_by("set_number")
    watches = {
        watch.assigned_patient_id: watch
        for watch in ActigraphWatch.objects.filter(assigned_patient__isnull=False).order_by("-assignment_date")
    }

    rows = []
    for device in devices:
        watch = watches.get(device.assigned_patient_id) if device.assigned_patient_id else None
        rows.append(
            (
                device.set_number,
                device.mars_device_id,
                device.pluto_device_id,
                device.laptop_number,
                device.modem_serial,
                watch.left_serial if watch else "",
                watch.right_serial if watch else "",
                device.status,
                device.assigned_patient.patient_code if device.assigned_patient else "",
            )
        )
    return _render(DEVICE_HEADER, rows)


def export_patient_csv(patient_id: int) -> tuple[str, str]:
    """
    Multi-section report for one patient.

    Sections, separated by a blank line: demographics, study events, therapy
    sessions, adverse events, issue logs.

    Returns:
        ``(patient_code, csv_text)``.
    """

    patient = Patient.objects.filter(pk=patient_id).first()
    if patient is None:
        raise PatientNotFoundError("Patient not found")

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")

    def section(title: str, header: Sequence[str], rows: Iterable[Sequence]) -> None:
        writer.writerow([title])
        writer.writerow(header)
        for row in rows:
            writer.writerow([_cell(value) for value in row])
        writer.writerow([])

    section(
        "PATIENT DEMOGRAPHICS",
        PATIENT_HEADER + ("A0 Date", "Dropout Date", "Dropout Reason"),
        [_patient_row(patient) + (patient.a0_date, patient.dropout_date, patient.dropout_reason)],
    )
    section(
        "STUDY EVENTS",
        ("Study Day", "Event", "Type", "Scheduled Date", "Status", "Completion Date", "Notes"),
        (
            (e.study_day, e.event_name, e.event_type, e.scheduled_date, e.status, e.completion_date, e.notes)
            for e in StudyEvent.objects.filter(patient=patient).order_by("study_day", "id")
        ),
    )

    if patient.group_type == user_choices.GroupType.INTERVENTION:
        section(
            "INTERVENTION SESSIONS",
            ("Session Date", "Study Day", "Duration (min)", "Robotic Score", "Exercises", "Mechanisms", "Notes"),
            (
                (
                    s.session_date,
                    s.study_day,
                    s.duration_minutes,
                    s.robotic_assessment_score,
                    s.exercises_performed,
                    s.mechanisms_used,
                    s.therapist_notes,
                )
                for s in InterventionSession.objects.filter(patient=patient).order_by("session_date", "id")
            ),
        )
    else:
        section(
            "CONTROL SESSIONS",
            ("Session Date", "Study Day", "Duration (min)", "Manual Exercises", "ADL Training", "Notes"),
            (
                (
                    s.session_date,
                    s.study_day,
                    s.duration_minutes,
                    s.manual_exercises_given,
                    s.adl_training_given,
                    s.therapist_notes,
                )
                for s in ControlSession.objects.filter(patient=patient).order_by("session_date", "id")
            ),
        )

    section(
        "ADVERSE EVENTS",
        ("Event Date", "Study Day", "Event Type", "Severity", "Description", "Action Taken", "Reported to PI"),
        (
            (a.event_date, a.study_day, a.event_type, a.severity, a.description, a.action_taken, a.reported_to_pi)
            for a in AdverseEvent.objects.filter(patient=patient).order_by("event_date", "id")
        ),
    )
    section(
        "ISSUE LOGS",
        ("Contact Date", "Contact Type", "Issue Type", "Description", "Solution", "Follow-up Date"),
        (
            (
                i.contact_date,
                i.contact_type,
                i.issue_type,
                i.issue_description,
                i.solution_provided,
                i.follow_up_date,
            )
            for i in IssueLog.objects.filter(patient=patient).order_by("contact_date", "id")
        ),
    )
    return patient.patient_code, buffer.getvalue()
