"""Per-visit therapy session logs for both study arms."""

from django.db import models

from users.models.base import TimeStampedModel


class BaseSession(TimeStampedModel):
    patient = models.ForeignKey(
        "users.Patient",
        on_delete=models.CASCADE,
        related_name="%(class)ss",
        verbose_name="Patient",
    )
    session_date = models.DateField("Session date")
    study_day = models.PositiveIntegerField("Study day")
    duration_minutes = models.PositiveIntegerField("Duration (min)", null=True, blank=True)
    adl_training_given = models.TextField("ADL training", blank=True)
    patient_feedback = models.TextField("Patient feedback", blank=True)
    therapist_notes = models.TextField("Therapist notes", blank=True)
    logged_by = models.ForeignKey(
        "users.CustomUser",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        verbose_name="Logged by",
    )

    class Meta:
        abstract = True
        ordering = ("-session_date", "-id")


class InterventionSession(BaseSession):
    """Robotic therapy (MARS/PLUTO) session; intervention arm only."""

    robotic_assessment_score = models.FloatField("Robotic assessment score", null=True, blank=True)
    exercises_performed = models.TextField("Exercises performed", blank=True)
    mechanisms_used = models.TextField("Mechanisms used", blank=True)
    device_performance_notes = models.TextField("Device performance notes", blank=True)

    class Meta(BaseSession.Meta):
        db_table = "core_intervention_sessions"
        verbose_name = "Intervention session"
        verbose_name_plural = "Intervention sessions"


class ControlSession(BaseSession):
    """Manual exercise session; control arm only."""

    manual_exercises_given = models.TextField("Manual exercises", blank=True)

    class Meta(BaseSession.Meta):
        db_table = "core_control_sessions"
        verbose_name = "Control session"
        verbose_name_plural = "Control sessions"
