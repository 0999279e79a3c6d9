from datetime import date

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from users import choices
from users.models.base import TimeStampedModel


class Patient(TimeStampedModel):
    """
    Enrolled study participant.

    Owns the study events, therapy sessions, adverse events, issue logs,
    reminders and exercise prescriptions, all of which are deleted with it.

    Rules:
    - ``group_type`` is fixed once study events have been generated.
    - ``status`` leaves ``active`` exactly once; ``dropped_out`` and
      ``completed`` are terminal.
    - The dropout fields are only filled on the transition to ``dropped_out``.
    """

    patient_code = models.CharField(
        "Patient ID",
        max_length=20,
        unique=True,
        help_text="Human-assigned study identifier, e.g. INT-001.",
    )
    name = models.CharField("Name", max_length=100, blank=True)
    gender = models.CharField(
        "Gender",
        max_length=10,
        choices=choices.Gender.choices,
        blank=True,
    )
    age = models.PositiveSmallIntegerField(
        "Age",
        validators=[MinValueValidator(18), MaxValueValidator(100)],
    )
    affected_hand = models.CharField(
        "Affected hand",
        max_length=10,
        choices=choices.AffectedHand.choices,
    )
    group_type = models.CharField(
        "Group",
        max_length=20,
        choices=choices.GroupType.choices,
        db_index=True,
    )
    vcg_assignment = models.CharField(
        "VCG assignment",
        max_length=10,
        choices=choices.VcgAssignment.choices,
        blank=True,
        help_text="Control arm only: selects the manual exercise protocol.",
    )
    a0_date = models.DateField(
        "A0 (baseline) date",
        null=True,
        blank=True,
    )
    study_start_date = models.DateField("Study start date")
    enrollment_date = models.DateField("Enrollment date")
    phone_number = models.CharField("Phone", max_length=20, blank=True)
    status = models.CharField(
        "Status",
        max_length=20,
        choices=choices.PatientStatus.choices,
        default=choices.PatientStatus.ACTIVE,
        db_index=True,
    )
    dropout_date = models.DateField("Dropout date", null=True, blank=True)
    dropout_reason = models.TextField("Dropout reason", blank=True)
    dropout_reason_type = models.CharField("Dropout reason type", max_length=50, blank=True)
    schedule_status = models.CharField(
        "Schedule generation",
        max_length=20,
        choices=choices.ScheduleStatus.choices,
        default=choices.ScheduleStatus.PENDING,
        help_text="Failed generations stay visible here until retried.",
    )
    schedule_error = models.TextField("Schedule generation error", blank=True)
    created_by = models.ForeignKey(
        "users.CustomUser",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_patients",
        verbose_name="Created by",
    )

    class Meta:
        db_table = "users_patients"
        verbose_name = "Patient"
        verbose_name_plural = "Patients"
        ordering = ("-created_at",)

    def __str__(self) -> str:
        return self.patient_code

    @property
    def is_active(self) -> bool:
        return self.status == choices.PatientStatus.ACTIVE

    def get_study_day(self, today: date | None = None) -> int:
        """Days elapsed since the study start date, never negative."""

        from core.service.schedule import get_study_day

        return get_study_day(self.study_start_date, today)
