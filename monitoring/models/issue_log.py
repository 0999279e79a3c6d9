from django.db import models

from monitoring.choices import ContactType, IssueType
from users.models.base import TimeStampedModel


class IssueLog(TimeStampedModel):
    """Phone call or home visit where a patient problem was handled."""

    patient = models.ForeignKey(
        "users.Patient",
        on_delete=models.CASCADE,
        related_name="issue_logs",
        verbose_name="Patient",
    )
    contact_date = models.DateField("Contact date")
    contact_type = models.CharField("Contact type", max_length=20, choices=ContactType.choices)
    duration_minutes = models.PositiveIntegerField("Duration (min)", null=True, blank=True)
    issue_type = models.CharField("Issue type", max_length=20, choices=IssueType.choices, db_index=True)
    issue_description = models.TextField("Issue", blank=True)
    root_cause = models.TextField("Root cause", blank=True)
    solution_provided = models.TextField("Solution", blank=True)
    follow_up_required = models.BooleanField("Follow-up required", default=False)
    follow_up_date = models.DateField("Follow-up date", null=True, blank=True)
    logged_by = models.ForeignKey(
        "users.CustomUser",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    class Meta:
        db_table = "monitoring_issue_logs"
        verbose_name = "Issue log"
        verbose_name_plural = "Issue logs"
        ordering = ("-contact_date", "-id")

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.patient_id} {self.issue_type} {self.contact_date}"
