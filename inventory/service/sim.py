"""
SIM card lifecycle: registration, recharge tracking and expiry flags.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Optional

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from core.exceptions import ConflictError, NotFoundError, ensure_present
from inventory.models import DeviceSet, SimCard, SimRechargeHistory
from users.models import CustomUser

logger = logging.getLogger(__name__)

EXPIRY_WARNING_DAYS = 2


class SimNotFoundError(NotFoundError):
    pass


class DuplicateSimError(ConflictError):
    pass


@dataclass(frozen=True)
class RechargeResult:
    sim: SimCard
    history: SimRechargeHistory
    reminder_created: bool


def sim_expiry_flags(expiry_date: Optional[date], today: Optional[date] = None) -> tuple[bool, bool]:
    """
    Derived ``(is_expired, is_expiring_soon)`` for an expiry date.

    - expired: the expiry date is before today;
    - expiring soon: today falls within the last ``EXPIRY_WARNING_DAYS`` days
      up to and including the expiry date.

    Both are False when no expiry date is known.
    """

    if expiry_date is None:
        return False, False
    today = today or timezone.localdate()
    is_expired = expiry_date < today
    is_expiring_soon = today <= expiry_date <= today + timedelta(days=EXPIRY_WARNING_DAYS)
    return is_expired, is_expiring_soon


def list_sims(provider: str | None = None, expiring: bool = False, today: Optional[date] = None):
    """
    Active SIMs ordered by number.

    ``expiring`` keeps SIMs whose expiry is at most two days away, already
    expired ones included.
    """

    qs = SimCard.objects.select_related("linked_device_set").filter(is_active=True)
    if provider:
        qs = qs.filter(provider=provider)
    if expiring:
        today = today or timezone.localdate()
        qs = qs.filter(expiry_date__lte=today + timedelta(days=EXPIRY_WARNING_DAYS))
    return qs.order_by("sim_number")


def expiring_sims(today: Optional[date] = None):
    """Active SIMs expiring between today and two days from now, inclusive."""

    today = today or timezone.localdate()
    return (
        SimCard.objects.select_related("linked_device_set")
        .filter(
            is_active=True,
            expiry_date__gte=today,
            expiry_date__lte=today + timedelta(days=EXPIRY_WARNING_DAYS),
        )
        .order_by("expiry_date", "sim_number")
    )


def get_sim(sim_id: int) -> SimCard:
    try:
        return SimCard.objects.select_related("linked_device_set").get(pk=sim_id)
    except SimCard.DoesNotExist as exc:
        raise SimNotFoundError("SIM card not found") from exc


def create_sim(data: dict[str, Any]) -> SimCard:
    if SimCard.objects.filter(sim_number=data.get("sim_number")).exists():
        raise DuplicateSimError("SIM number already exists")
    _check_device(data.get("linked_device_set_id"))
    sim = SimCard.objects.create(**data)
    logger.info("Registered SIM %s", sim.sim_number)
    return sim


def update_sim(sim_id: int, data: dict[str, Any]) -> SimCard:
    sim = get_sim(sim_id)
    ensure_present(data, ("sim_number", "provider"))
    sim_number = data.get("sim_number")
    if sim_number and SimCard.objects.filter(sim_number=sim_number).exclude(pk=sim.pk).exists():
        raise DuplicateSimError("SIM number already exists")
    _check_device(data.get("linked_device_set_id"))

    for field, value in data.items():
        setattr(sim, field, value)
    sim.save()
    return sim


def recharge_sim(
    sim_id: int,
    recharge_date: date,
    duration_days: int,
    user: CustomUser | None = None,
    today: Optional[date] = None,
) -> RechargeResult:
    """
    Record a recharge.

    In one transaction: the SIM gets the new recharge date, duration and
    ``expiry_date = recharge_date + duration_days``; a history row is appended;
    the SIM's recharge reminder is replaced by one due two days before expiry,
    created only when that due date is still in the future.
    """

    from monitoring.services.reminders import replace_sim_reminder

    if duration_days <= 0:
        raise ValueError("duration_days must be positive")

    expiry_date = recharge_date + timedelta(days=duration_days)
    with transaction.atomic():
        sim = SimCard.objects.select_for_update().filter(pk=sim_id).first()
        if sim is None:
            raise SimNotFoundError("SIM card not found")

        sim.recharge_date = recharge_date
        sim.recharge_duration_days = duration_days
        sim.expiry_date = expiry_date
        sim.save(update_fields=["recharge_date", "recharge_duration_days", "expiry_date", "updated_at"])

        history = SimRechargeHistory.objects.create(
            sim_card=sim,
            recharge_date=recharge_date,
            duration_days=duration_days,
            expiry_date=expiry_date,
            logged_by=user,
        )

        lead_days = getattr(settings, "HOMER_SIM_REMINDER_LEAD_DAYS", EXPIRY_WARNING_DAYS)
        reminder = replace_sim_reminder(sim, expiry_date, lead_days=lead_days, today=today)

    logger.info("Recharged SIM %s until %s", sim.sim_number, expiry_date)
    return RechargeResult(sim=sim, history=history, reminder_created=reminder is not None)


def deactivate_sim(sim_id: int) -> SimCard:
    """Soft delete; the recharge history stays."""

    sim = get_sim(sim_id)
    sim.is_active = False
    sim.save(update_fields=["is_active", "updated_at"])
    return sim


def _check_device(device_id: int | None) -> None:
    if device_id and not DeviceSet.objects.filter(pk=device_id).exists():
        raise NotFoundError("Device set not found")
