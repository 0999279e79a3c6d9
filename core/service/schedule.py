"""Study schedule generation.

Turns a patient's enrollment parameters (arm, study start date, optional A0
date) into the dated list of study milestones, and keeps that list consistent
when the dates change.

Conventions:
- ``study_day`` is an offset in calendar days from ``study_start_date``;
  the intervention baseline sits at day -1.
- Dates are compared at day granularity; no timezone shifting is applied.
- Only ``pending`` events are ever regenerated or cancelled. Completed,
  skipped and cancelled rows are historical and never touched here.
- Generation at patient creation is best-effort: the patient row is committed
  first and a failed generation is recorded on the patient
  (``schedule_status=failed``) so it can be retried.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Optional

from django.db import transaction
from django.utils import timezone

from core.models import StudyEvent, choices
from users import choices as user_choices
from users.models import Patient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EventTemplate:
    event_name: str
    event_type: str
    study_day: int


@dataclass(frozen=True)
class PlannedEvent:
    event_name: str
    event_type: str
    study_day: int
    scheduled_date: date


INTERVENTION_TEMPLATE: tuple[EventTemplate, ...] = (
    EventTemplate("Baseline Assessment", choices.EventType.ASSESSMENT, -1),
    EventTemplate("Device Installation", choices.EventType.DEVICE_INSTALL, 0),
    EventTemplate("Robotic Therapy + ADL", choices.EventType.THERAPY, 1),
    EventTemplate("Robotic Therapy + ADL", choices.EventType.THERAPY, 2),
    EventTemplate("Robotic Therapy + ADL", choices.EventType.THERAPY, 3),
    EventTemplate("Follow-up Phone Call", choices.EventType.PHONE_CALL, 7),
    EventTemplate("Watch Swap Reminder + Follow-up Call", choices.EventType.REMINDER, 14),
    EventTemplate("Home Visit + Watch Swap", choices.EventType.HOME_VISIT, 15),
    EventTemplate("Follow-up Phone Call", choices.EventType.PHONE_CALL, 21),
    EventTemplate("Trial Completion", choices.EventType.COMPLETION, 28),
    EventTemplate("Device & Watch Retrieval", choices.EventType.RETRIEVAL, 29),
    EventTemplate("Follow-up Assessment", choices.EventType.ASSESSMENT, 30),
    EventTemplate("Final Assessment", choices.EventType.ASSESSMENT, 180),
)

CONTROL_TEMPLATE: tuple[EventTemplate, ...] = (
    EventTemplate("Baseline Assessment", choices.EventType.ASSESSMENT, 0),
    EventTemplate("Manual Exercise + ADL", choices.EventType.THERAPY, 1),
    EventTemplate("Manual Exercise + ADL", choices.EventType.THERAPY, 2),
    EventTemplate("Manual Exercise + ADL", choices.EventType.THERAPY, 3),
    EventTemplate("Follow-up Phone Call", choices.EventType.PHONE_CALL, 7),
    EventTemplate("Watch Swap Reminder + Follow-up Call", choices.EventType.REMINDER, 14),
    EventTemplate("Watch Swap Visit", choices.EventType.HOME_VISIT, 15),
    EventTemplate("Follow-up Phone Call", choices.EventType.PHONE_CALL, 21),
    EventTemplate("Trial Completion", choices.EventType.COMPLETION, 28),
    EventTemplate("Watch Retrieval", choices.EventType.RETRIEVAL, 29),
    EventTemplate("Follow-up Assessment", choices.EventType.ASSESSMENT, 30),
    EventTemplate("Final Assessment", choices.EventType.ASSESSMENT, 180),
)


def get_template(group_type: str) -> tuple[EventTemplate, ...]:
    if group_type == user_choices.GroupType.INTERVENTION:
        return INTERVENTION_TEMPLATE
    if group_type == user_choices.GroupType.CONTROL:
        return CONTROL_TEMPLATE
    raise ValueError(f"Unknown group type: {group_type!r}")


def resolve_scheduled_date(
    template: EventTemplate,
    study_start_date: date,
    a0_date: Optional[date],
    group_type: str,
) -> date:
    """
    Compute the calendar date of one template entry.

    Default: ``study_start_date + study_day``. Assessments are anchored
    differently:

    - day -1: the A0 date, else the day before study start;
    - day 0 in the control arm: the A0 date, else study start;
    - day 30: study start + 30 (A0 is ignored);
    - day 180: A0 + 180 when A0 is set, else study start + 180.
    """

    default = study_start_date + timedelta(days=template.study_day)
    if template.event_type != choices.EventType.ASSESSMENT:
        return default

    if template.study_day == -1:
        return a0_date or study_start_date - timedelta(days=1)
    if template.study_day == 0 and group_type == user_choices.GroupType.CONTROL:
        return a0_date or study_start_date
    if template.study_day == 30:
        return study_start_date + timedelta(days=30)
    if template.study_day == 180:
        anchor = a0_date or study_start_date
        return anchor + timedelta(days=180)
    return default


def build_schedule(
    study_start_date: date,
    group_type: str,
    a0_date: Optional[date] = None,
) -> list[PlannedEvent]:
    """
    Resolve the full template for one arm without touching the database.

    The result keeps template order, which is ascending ``study_day`` with the
    template position breaking ties.
    """

    template = get_template(group_type)
    indexed = sorted(enumerate(template), key=lambda pair: (pair[1].study_day, pair[0]))
    return [
        PlannedEvent(
            event_name=entry.event_name,
            event_type=entry.event_type,
            study_day=entry.study_day,
            scheduled_date=resolve_scheduled_date(entry, study_start_date, a0_date, group_type),
        )
        for _, entry in indexed
    ]


def generate_study_events(
    patient: Patient,
    study_start_date: date,
    group_type: str,
    a0_date: Optional[date] = None,
) -> list[StudyEvent]:
    """Bulk-insert one ``pending`` StudyEvent per template entry."""

    planned = build_schedule(study_start_date, group_type, a0_date)
    events = [
        StudyEvent(
            patient=patient,
            event_name=item.event_name,
            event_type=item.event_type,
            study_day=item.study_day,
            scheduled_date=item.scheduled_date,
            status=choices.EventStatus.PENDING,
        )
        for item in planned
    ]
    created = StudyEvent.objects.bulk_create(events)
    logger.info("Generated %s study events for patient %s", len(created), patient.pk)
    return created


@transaction.atomic
def regenerate_study_events(
    patient: Patient,
    study_start_date: date,
    group_type: str,
    a0_date: Optional[date] = None,
) -> list[StudyEvent]:
    """
    Replace the patient's pending events with a freshly resolved set.

    Non-pending events are left exactly as they are (same id, status, dates).
    """

    deleted, _ = StudyEvent.objects.filter(
        patient=patient,
        status=choices.EventStatus.PENDING,
    ).delete()
    logger.info("Removed %s pending events for patient %s before regeneration", deleted, patient.pk)
    return generate_study_events(patient, study_start_date, group_type, a0_date)


def cancel_future_events(patient: Patient | int, as_of_date: date) -> int:
    """
    Cancel every pending event scheduled strictly after ``as_of_date``.

    Events on or before the cutoff keep their status, whatever it is.

    Returns:
        Number of events transitioned to ``cancelled``.
    """

    patient_id = patient.pk if isinstance(patient, Patient) else patient
    return StudyEvent.objects.filter(
        patient_id=patient_id,
        status=choices.EventStatus.PENDING,
        scheduled_date__gt=as_of_date,
    ).update(status=choices.EventStatus.CANCELLED, updated_at=timezone.now())


def generate_schedule_best_effort(patient: Patient) -> bool:
    """
    Generate the schedule for an already committed patient.

    A failure does not propagate: it is logged, recorded on the patient as
    ``schedule_status=failed`` with the error text, and reported through the
    return value so the caller can surface a warning.
    """

    try:
        with transaction.atomic():
            generate_study_events(
                patient,
                patient.study_start_date,
                patient.group_type,
                patient.a0_date,
            )
    except Exception as exc:  # noqa: BLE001
        logger.exception("Study event generation failed for patient %s", patient.pk)
        patient.schedule_status = user_choices.ScheduleStatus.FAILED
        patient.schedule_error = str(exc)[:1000]
        patient.save(update_fields=["schedule_status", "schedule_error", "updated_at"])
        return False

    patient.schedule_status = user_choices.ScheduleStatus.GENERATED
    patient.schedule_error = ""
    patient.save(update_fields=["schedule_status", "schedule_error", "updated_at"])
    return True


def retry_failed_schedules(patients: Iterable[Patient] | None = None) -> tuple[int, int]:
    """
    Retry generation for patients whose schedule previously failed.

    Pending rows left behind by a partial attempt are replaced, so retrying is
    safe to repeat.

    Returns:
        ``(succeeded, failed)`` counts.
    """

    if patients is None:
        patients = Patient.objects.filter(schedule_status=user_choices.ScheduleStatus.FAILED)

    succeeded = failed = 0
    for patient in patients:
        StudyEvent.objects.filter(patient=patient, status=choices.EventStatus.PENDING).delete()
        if generate_schedule_best_effort(patient):
            succeeded += 1
        else:
            failed += 1
    return succeeded, failed


def get_study_day(study_start_date: date, today: Optional[date] = None) -> int:
    """Whole days since ``study_start_date``, clamped at 0."""

    today = today or timezone.localdate()
    return max(0, (today - study_start_date).days)
