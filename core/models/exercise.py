from django.db import models

from users import choices as user_choices
from users.models.base import TimeStampedModel


class PatientExercise(TimeStampedModel):
    """
    Home exercise prescription.

    Prescriptions are never edited in place: a new row becomes current and the
    previous one is kept with ``is_current=False``. At most one row per patient
    is current.
    """

    patient = models.ForeignKey(
        "users.Patient",
        on_delete=models.CASCADE,
        related_name="exercises",
        verbose_name="Patient",
    )
    group_type = models.CharField(
        "Group",
        max_length=20,
        choices=user_choices.GroupType.choices,
    )
    mars_mechanisms = models.TextField("MARS mechanisms", blank=True)
    pluto_mechanisms = models.TextField("PLUTO mechanisms", blank=True)
    control_exercises = models.TextField("Control exercises", blank=True)
    adl_notes = models.TextField("ADL notes", blank=True)
    notes = models.TextField("Notes", blank=True)
    study_day = models.PositiveIntegerField("Study day")
    is_current = models.BooleanField("Current", default=True)
    created_by = models.ForeignKey(
        "users.CustomUser",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    class Meta:
        db_table = "core_patient_exercises"
        verbose_name = "Exercise prescription"
        verbose_name_plural = "Exercise prescriptions"
        ordering = ("-created_at", "-id")
        constraints = [
            models.UniqueConstraint(
                fields=["patient"],
                condition=models.Q(is_current=True),
                name="uniq_current_exercise_per_patient",
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.patient_id} D{self.study_day}"
