from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from django.db import models

from monitoring.choices import ReminderType
from users.models.base import TimeStampedModel


@dataclass(frozen=True)
class EventRef:
    event_id: int


@dataclass(frozen=True)
class SimRechargeRef:
    sim_id: int


@dataclass(frozen=True)
class FollowUpRef:
    issue_id: int


ReminderRef = Union[EventRef, SimRechargeRef, FollowUpRef]


class Reminder(TimeStampedModel):
    """
    Dated to-do item for the daily action list.

    The referenced record depends on ``reminder_type``: ``study_event`` points
    at a StudyEvent, ``sim_recharge`` at a SimCard, ``follow_up`` at an
    IssueLog, ``general`` at nothing. A check constraint keeps the other two
    columns empty.
    """

    reminder_type = models.CharField("Type", max_length=20, choices=ReminderType.choices, db_index=True)
    patient = models.ForeignKey(
        "users.Patient",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="reminders",
        verbose_name="Patient",
    )
    study_event = models.ForeignKey(
        "core.StudyEvent",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="reminders",
    )
    sim_card = models.ForeignKey(
        "inventory.SimCard",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="reminders",
    )
    issue_log = models.ForeignKey(
        "monitoring.IssueLog",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="reminders",
    )
    title = models.CharField("Title", max_length=200)
    description = models.TextField("Description", blank=True)
    due_date = models.DateField("Due date", db_index=True)
    is_completed = models.BooleanField("Completed", default=False)

    class Meta:
        db_table = "monitoring_reminders"
        verbose_name = "Reminder"
        verbose_name_plural = "Reminders"
        ordering = ("due_date", "id")
        constraints = [
            models.CheckConstraint(
                condition=(
                    models.Q(
                        reminder_type=ReminderType.STUDY_EVENT,
                        study_event__isnull=False,
                        sim_card__isnull=True,
                        issue_log__isnull=True,
                    )
                    | models.Q(
                        reminder_type=ReminderType.SIM_RECHARGE,
                        study_event__isnull=True,
                        sim_card__isnull=False,
                        issue_log__isnull=True,
                    )
                    | models.Q(
                        reminder_type=ReminderType.FOLLOW_UP,
                        study_event__isnull=True,
                        sim_card__isnull=True,
                        issue_log__isnull=False,
                    )
                    | models.Q(
                        reminder_type=ReminderType.GENERAL,
                        study_event__isnull=True,
                        sim_card__isnull=True,
                        issue_log__isnull=True,
                    )
                ),
                name="reminder_reference_matches_type",
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.title} ({self.due_date})"

    @property
    def reference(self) -> Optional[ReminderRef]:
        if self.reminder_type == ReminderType.STUDY_EVENT:
            return EventRef(self.study_event_id)
        if self.reminder_type == ReminderType.SIM_RECHARGE:
            return SimRechargeRef(self.sim_card_id)
        if self.reminder_type == ReminderType.FOLLOW_UP:
            return FollowUpRef(self.issue_log_id)
        return None

    @staticmethod
    def reference_fields(ref: Optional[ReminderRef]) -> dict:
        """Column values and reminder type for a reference."""

        if isinstance(ref, EventRef):
            return {"reminder_type": ReminderType.STUDY_EVENT, "study_event_id": ref.event_id}
        if isinstance(ref, SimRechargeRef):
            return {"reminder_type": ReminderType.SIM_RECHARGE, "sim_card_id": ref.sim_id}
        if isinstance(ref, FollowUpRef):
            return {"reminder_type": ReminderType.FOLLOW_UP, "issue_log_id": ref.issue_id}
        return {"reminder_type": ReminderType.GENERAL}
