"""
Reminder queries and the side effects other services trigger on reminders.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Optional

from django.utils import timezone

from core.exceptions import NotFoundError
from inventory.models import SimCard
from monitoring.choices import ReminderType
from monitoring.models import FollowUpRef, IssueLog, Reminder, ReminderRef, SimRechargeRef

logger = logging.getLogger(__name__)


class ReminderNotFoundError(NotFoundError):
    pass


def _base_queryset():
    return Reminder.objects.select_related("patient")


def list_reminders(
    *,
    patient_id: int | None = None,
    reminder_type: str | None = None,
    is_completed: bool = False,
):
    qs = _base_queryset().filter(is_completed=is_completed)
    if patient_id:
        qs = qs.filter(patient_id=patient_id)
    if reminder_type:
        qs = qs.filter(reminder_type=reminder_type)
    return qs.order_by("due_date", "id")


def reminders_due_today(today: Optional[date] = None):
    today = today or timezone.localdate()
    return _base_queryset().filter(is_completed=False, due_date=today).order_by("due_date", "id")


def overdue_reminders(today: Optional[date] = None):
    today = today or timezone.localdate()
    return _base_queryset().filter(is_completed=False, due_date__lt=today).order_by("due_date", "id")


def create_reminder(
    *,
    title: str,
    due_date: date,
    description: str = "",
    patient_id: int | None = None,
    reference: Optional[ReminderRef] = None,
) -> Reminder:
    return Reminder.objects.create(
        title=title,
        description=description,
        due_date=due_date,
        patient_id=patient_id,
        **Reminder.reference_fields(reference),
    )


def complete_reminder(reminder_id: int) -> Reminder:
    reminder = Reminder.objects.filter(pk=reminder_id).first()
    if reminder is None:
        raise ReminderNotFoundError("Reminder not found")
    reminder.is_completed = True
    reminder.save(update_fields=["is_completed", "updated_at"])
    return reminder


def delete_reminder(reminder_id: int) -> None:
    deleted, _ = Reminder.objects.filter(pk=reminder_id).delete()
    if not deleted:
        raise ReminderNotFoundError("Reminder not found")


def delete_reminders_for_event(event_id: int) -> int:
    deleted, _ = Reminder.objects.filter(
        reminder_type=ReminderType.STUDY_EVENT,
        study_event_id=event_id,
    ).delete()
    return deleted


def replace_sim_reminder(
    sim: SimCard,
    expiry_date: date,
    lead_days: int = 2,
    today: Optional[date] = None,
) -> Optional[Reminder]:
    """
    Drop the SIM's existing recharge reminders and schedule a new one.

    The new reminder is due ``lead_days`` before expiry and is only created
    when that date is still after today.
    """

    today = today or timezone.localdate()
    removed, _ = Reminder.objects.filter(
        reminder_type=ReminderType.SIM_RECHARGE,
        sim_card=sim,
    ).delete()
    if removed:
        logger.info("Removed %s recharge reminder(s) for SIM %s", removed, sim.sim_number)

    due_date = expiry_date - timedelta(days=lead_days)
    if due_date <= today:
        return None

    return create_reminder(
        title="SIM Recharge Required",
        description=f"SIM {sim.sim_number} will expire on {expiry_date.isoformat()}",
        due_date=due_date,
        reference=SimRechargeRef(sim.pk),
    )


def create_follow_up_reminder(issue: IssueLog) -> Optional[Reminder]:
    """Follow-up reminder for an issue log, when one is requested with a date."""

    if not (issue.follow_up_required and issue.follow_up_date):
        return None
    return create_reminder(
        title="Follow-up Required",
        description=f"Follow-up for issue: {issue.issue_description or issue.issue_type}",
        due_date=issue.follow_up_date,
        patient_id=issue.patient_id,
        reference=FollowUpRef(issue.pk),
    )
