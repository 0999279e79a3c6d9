from django.db import models

from monitoring.choices import Severity
from users.models.base import TimeStampedModel


class AdverseEvent(TimeStampedModel):
    patient = models.ForeignKey(
        "users.Patient",
        on_delete=models.CASCADE,
        related_name="adverse_events",
        verbose_name="Patient",
    )
    event_date = models.DateField("Event date")
    study_day = models.PositiveIntegerField("Study day")
    event_type = models.CharField("Event type", max_length=100)
    severity = models.CharField("Severity", max_length=20, choices=Severity.choices, db_index=True)
    description = models.TextField("Description", blank=True)
    action_taken = models.TextField("Action taken", blank=True)
    reported_to_pi = models.BooleanField("Reported to PI", default=False)
    requires_dropout = models.BooleanField(
        "Requires dropout",
        default=False,
        help_text="Recording the event also drops the patient out of the study.",
    )
    logged_by = models.ForeignKey(
        "users.CustomUser",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    class Meta:
        db_table = "monitoring_adverse_events"
        verbose_name = "Adverse event"
        verbose_name_plural = "Adverse events"
        ordering = ("-event_date", "-id")

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.patient_id} {self.event_type} ({self.severity})"
