"""Issue call / visit logs."""

from __future__ import annotations

from typing import Any

from django.db import transaction

from core.exceptions import NotFoundError
from monitoring.models import IssueLog
from monitoring.services.reminders import create_follow_up_reminder
from users.models import CustomUser, Patient


class IssueNotFoundError(NotFoundError):
    pass


def list_issues(
    *,
    patient_id: int | None = None,
    issue_type: str | None = None,
    follow_up_required: bool = False,
):
    qs = IssueLog.objects.select_related("patient", "logged_by")
    if patient_id:
        qs = qs.filter(patient_id=patient_id)
    if issue_type:
        qs = qs.filter(issue_type=issue_type)
    if follow_up_required:
        qs = qs.filter(follow_up_required=True)
    return qs.order_by("-contact_date", "-id")


@transaction.atomic
def create_issue(patient_id: int, data: dict[str, Any], user: CustomUser | None = None) -> IssueLog:
    """Log an issue; a follow-up with a date also schedules a reminder."""

    if not Patient.objects.filter(pk=patient_id).exists():
        raise NotFoundError("Patient not found")

    issue = IssueLog.objects.create(patient_id=patient_id, logged_by=user, **data)
    create_follow_up_reminder(issue)
    return issue


def update_issue(issue_id: int, data: dict[str, Any]) -> IssueLog:
    issue = IssueLog.objects.filter(pk=issue_id).first()
    if issue is None:
        raise IssueNotFoundError("Issue log not found")
    for field, value in data.items():
        setattr(issue, field, value)
    issue.save()
    return issue


def delete_issue(issue_id: int) -> None:
    deleted, _ = IssueLog.objects.filter(pk=issue_id).delete()
    if not deleted:
        raise IssueNotFoundError("Issue log not found")
