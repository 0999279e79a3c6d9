"""Dashboard counters and the daily action list."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from django.db.models import Count, Q
from django.utils import timezone

from core.service.events import overdue_events, upcoming_events
from inventory.choices import DeviceStatus
from inventory.models import DeviceSet
from inventory.service.sim import expiring_sims
from monitoring.models import Reminder
from users import choices as user_choices
from users.models import Patient

ACTION_WINDOW_DAYS = 3
ACTION_LIST_LIMIT = 20


@dataclass(frozen=True)
class DashboardStats:
    total_patients: int
    active_patients: int
    dropped_out_patients: int
    completed_patients: int
    intervention_count: int
    control_count: int
    today_reminders: int
    overdue_reminders: int
    devices_in_use: int


@dataclass(frozen=True)
class ActionList:
    upcoming_events: list
    overdue_events: list
    expiring_sims: list


def get_dashboard_stats(today: Optional[date] = None) -> DashboardStats:
    today = today or timezone.localdate()
    patient_counts = Patient.objects.aggregate(
        total=Count("id"),
        active=Count("id", filter=Q(status=user_choices.PatientStatus.ACTIVE)),
        dropped_out=Count("id", filter=Q(status=user_choices.PatientStatus.DROPPED_OUT)),
        completed=Count("id", filter=Q(status=user_choices.PatientStatus.COMPLETED)),
        intervention=Count("id", filter=Q(group_type=user_choices.GroupType.INTERVENTION)),
        control=Count("id", filter=Q(group_type=user_choices.GroupType.CONTROL)),
    )
    open_reminders = Reminder.objects.filter(is_completed=False)

    return DashboardStats(
        total_patients=patient_counts["total"],
        active_patients=patient_counts["active"],
        dropped_out_patients=patient_counts["dropped_out"],
        completed_patients=patient_counts["completed"],
        intervention_count=patient_counts["intervention"],
        control_count=patient_counts["control"],
        today_reminders=open_reminders.filter(due_date=today).count(),
        overdue_reminders=open_reminders.filter(due_date__lt=today).count(),
        devices_in_use=DeviceSet.objects.filter(status=DeviceStatus.IN_USE).count(),
    )


def get_action_list(today: Optional[date] = None) -> ActionList:
    """
    What the study team should act on now.

    - pending events of active patients due in the next three days;
    - pending events of active patients already overdue;
    - active SIMs expiring within two days.
    """

    today = today or timezone.localdate()
    return ActionList(
        upcoming_events=upcoming_events(today, days=ACTION_WINDOW_DAYS, limit=ACTION_LIST_LIMIT),
        overdue_events=overdue_events(today, limit=ACTION_LIST_LIMIT),
        expiring_sims=list(expiring_sims(today)),
    )
