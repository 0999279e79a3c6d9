"""Study event queries and status transitions."""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Optional

from django.core.paginator import Page, Paginator
from django.db import transaction
from django.utils import timezone

from core.exceptions import ConflictError, NotFoundError
from core.models import StudyEvent, choices
from users import choices as user_choices
from users.models import CustomUser, Patient

logger = logging.getLogger(__name__)


class StudyEventNotFoundError(NotFoundError):
    pass


class EventTransitionError(ConflictError):
    pass


def list_study_events(
    *,
    patient_id: int | None = None,
    status: str | None = None,
    overdue: bool = False,
    page: int = 1,
    page_size: int = 50,
    today: Optional[date] = None,
) -> Page:
    """
    Paginated event list ordered by scheduled date.

    ``overdue`` narrows to pending events scheduled before today and overrides
    any ``status`` filter.
    """

    qs = StudyEvent.objects.select_related("patient")
    if patient_id:
        qs = qs.filter(patient_id=patient_id)
    if status:
        qs = qs.filter(status=status)
    if overdue:
        today = today or timezone.localdate()
        qs = qs.filter(status=choices.EventStatus.PENDING, scheduled_date__lt=today)

    qs = qs.order_by("scheduled_date", "study_day", "id")
    return Paginator(qs, page_size).get_page(page)


def get_patient_timeline(patient_id: int) -> list[StudyEvent]:
    """All events of a patient in ascending study day order."""

    if not Patient.objects.filter(pk=patient_id).exists():
        raise NotFoundError("Patient not found")
    return list(StudyEvent.objects.filter(patient_id=patient_id).order_by("study_day", "id"))


def update_study_event(
    event_id: int,
    *,
    status: str,
    notes: str | None = None,
    completion_date: date | None = None,
    user: CustomUser | None = None,
) -> StudyEvent:
    """
    Record the outcome of a pending event.

    Rules:
    - ``pending`` may move to ``completed``, ``skipped`` or ``cancelled``;
      terminal events only accept note edits (same status).
    - Completing without a completion date uses today.
    - Completing an event deletes the reminders that point at it.
    """

    from monitoring.services.reminders import delete_reminders_for_event

    with transaction.atomic():
        try:
            event = StudyEvent.objects.select_for_update().get(pk=event_id)
        except StudyEvent.DoesNotExist as exc:
            raise StudyEventNotFoundError("Event not found") from exc

        if not event.is_pending and status != event.status:
            raise EventTransitionError(
                f"Event is already {event.status} and cannot move to {status}"
            )

        update_fields = ["status", "updated_at"]
        event.status = status
        if notes is not None:
            event.notes = notes
            update_fields.append("notes")

        if status == choices.EventStatus.COMPLETED:
            event.completion_date = completion_date or event.completion_date or timezone.localdate()
            update_fields.append("completion_date")
        elif completion_date:
            event.completion_date = completion_date
            update_fields.append("completion_date")

        if user is not None:
            event.completed_by = user
            update_fields.append("completed_by")

        event.save(update_fields=update_fields)

        if status == choices.EventStatus.COMPLETED:
            removed = delete_reminders_for_event(event.pk)
            if removed:
                logger.info("Deleted %s reminder(s) for completed event %s", removed, event.pk)

    return event


def cancel_study_event(event_id: int) -> StudyEvent:
    """Cancel a single pending event."""

    return update_study_event(event_id, status=choices.EventStatus.CANCELLED)


def upcoming_events(today: date, days: int = 3, limit: int = 20) -> list[StudyEvent]:
    """Pending events of active patients due within ``days`` from today."""

    return list(
        StudyEvent.objects.select_related("patient")
        .filter(
            status=choices.EventStatus.PENDING,
            scheduled_date__gte=today,
            scheduled_date__lt=today + timedelta(days=days),
            patient__status=user_choices.PatientStatus.ACTIVE,
        )
        .order_by("scheduled_date", "id")[:limit]
    )


def overdue_events(today: date, limit: int = 20) -> list[StudyEvent]:
    """Pending events of active patients scheduled before today."""

    return list(
        StudyEvent.objects.select_related("patient")
        .filter(
            status=choices.EventStatus.PENDING,
            scheduled_date__lt=today,
            patient__status=user_choices.PatientStatus.ACTIVE,
        )
        .order_by("scheduled_date", "id")[:limit]
    )
