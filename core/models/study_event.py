"""Dated study milestones generated from the per-arm schedule template."""

from django.db import models

from users.models.base import TimeStampedModel

from . import choices


class StudyEvent(TimeStampedModel):
    """
    One scheduled milestone for one patient.

    ``scheduled_date`` is derived from the patient's study start date, A0 date
    and arm; only schedule regeneration rewrites it (by replacing the pending
    rows). Completed, skipped and cancelled rows are kept as history.
    """

    patient = models.ForeignKey(
        "users.Patient",
        on_delete=models.CASCADE,
        related_name="study_events",
        verbose_name="Patient",
    )
    event_name = models.CharField("Event", max_length=100)
    event_type = models.CharField(
        "Event type",
        max_length=20,
        choices=choices.EventType.choices,
    )
    study_day = models.IntegerField(
        "Study day",
        help_text="Offset from the study start date; baseline may be negative.",
    )
    scheduled_date = models.DateField("Scheduled date", db_index=True)
    status = models.CharField(
        "Status",
        max_length=20,
        choices=choices.EventStatus.choices,
        default=choices.EventStatus.PENDING,
        db_index=True,
    )
    completion_date = models.DateField("Completion date", null=True, blank=True)
    notes = models.TextField("Notes", blank=True)
    completed_by = models.ForeignKey(
        "users.CustomUser",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="completed_events",
        verbose_name="Completed by",
    )

    class Meta:
        db_table = "core_study_events"
        verbose_name = "Study event"
        verbose_name_plural = "Study events"
        ordering = ("study_day", "id")
        indexes = [
            models.Index(fields=["patient", "status"], name="core_event_patient_status_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.patient_id}-D{self.study_day} {self.event_name}"

    @property
    def is_pending(self) -> bool:
        return self.status == choices.EventStatus.PENDING
