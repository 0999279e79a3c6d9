"""
Actigraph watch registry and the day-15 backup swap.

Watches are assignable units like device sets. Unassigned watches flagged
``is_backup`` form the backup pool; a swap exchanges the roles of the patient's
watch and one pool member inside a single transaction, so the pool never holds
an assigned watch.
"""

from __future__ import annotations

import logging
from typing import Any

from django.db import transaction
from django.utils import timezone

from core.exceptions import ConflictError, NotFoundError, PoolExhaustedError, ensure_present
from inventory.models import ActigraphWatch
from users.models import Patient

logger = logging.getLogger(__name__)


class WatchNotFoundError(NotFoundError):
    pass


class DuplicateWatchError(ConflictError):
    pass


class WatchAlreadyAssignedError(ConflictError):
    pass


class NoAssignedWatchError(ConflictError):
    pass


class WatchPoolExhaustedError(PoolExhaustedError):
    pass


def list_watches():
    return ActigraphWatch.objects.select_related("assigned_patient").order_by("name")


def create_watch(data: dict[str, Any]) -> ActigraphWatch:
    if ActigraphWatch.objects.filter(name=data.get("name")).exists():
        raise DuplicateWatchError("A watch with this name already exists")
    return ActigraphWatch.objects.create(**data)


@transaction.atomic
def update_watch(watch_id: int, data: dict[str, Any]) -> ActigraphWatch:
    watch = _lock_watch(watch_id)
    ensure_present(data, ("name", "left_serial", "right_serial"))
    name = data.get("name")
    if name and ActigraphWatch.objects.filter(name=name).exclude(pk=watch.pk).exists():
        raise DuplicateWatchError("A watch with this name already exists")
    if data.get("is_backup") and watch.is_assigned:
        raise WatchAlreadyAssignedError("An assigned watch cannot be marked as backup")

    for field, value in data.items():
        setattr(watch, field, value)
    watch.save()
    return watch


def delete_watch(watch_id: int) -> None:
    deleted, _ = ActigraphWatch.objects.filter(pk=watch_id).delete()
    if not deleted:
        raise WatchNotFoundError("Watch not found")


def assign_watch(watch_id: int, patient_id: int) -> ActigraphWatch:
    """Hand an unassigned watch to a patient; a backup leaves the pool."""

    with transaction.atomic():
        watch = _lock_watch(watch_id)
        if watch.is_assigned:
            raise WatchAlreadyAssignedError("Watch is already assigned to a patient")

        patient = Patient.objects.filter(pk=patient_id).first()
        if patient is None:
            raise NotFoundError("Patient not found")

        watch.assigned_patient = patient
        watch.assignment_date = timezone.now()
        watch.is_backup = False
        watch.save(update_fields=["assigned_patient", "assignment_date", "is_backup", "updated_at"])

    logger.info("Assigned watch %s to patient %s", watch.name, patient.pk)
    return watch


def unassign_watch(watch_id: int) -> ActigraphWatch:
    with transaction.atomic():
        watch = _lock_watch(watch_id)
        watch.assigned_patient = None
        watch.assignment_date = None
        watch.save(update_fields=["assigned_patient", "assignment_date", "updated_at"])
    return watch


def swap_watch(watch_id: int) -> tuple[ActigraphWatch, ActigraphWatch]:
    """
    Exchange an assigned watch with the first free backup (by name).

    The previously assigned watch becomes a backup; the backup becomes assigned
    to the same patient.

    Returns:
        ``(old_watch, new_watch)``.
    """

    with transaction.atomic():
        watch = _lock_watch(watch_id)
        if not watch.is_assigned:
            raise NoAssignedWatchError("Watch is not assigned to any patient")

        backup = (
            ActigraphWatch.objects.select_for_update()
            .filter(is_backup=True, assigned_patient__isnull=True)
            .exclude(pk=watch.pk)
            .order_by("name", "id")
            .first()
        )
        if backup is None:
            raise WatchPoolExhaustedError("No backup watch available for swap")

        patient_id = watch.assigned_patient_id
        now = timezone.now()

        watch.assigned_patient = None
        watch.assignment_date = None
        watch.is_backup = True
        watch.save(update_fields=["assigned_patient", "assignment_date", "is_backup", "updated_at"])

        backup.assigned_patient_id = patient_id
        backup.assignment_date = now
        backup.is_backup = False
        backup.save(update_fields=["assigned_patient", "assignment_date", "is_backup", "updated_at"])

    logger.info("Swapped watch %s for backup %s (patient %s)", watch.name, backup.name, patient_id)
    return watch, backup


def release_patient_watches(patient_id: int) -> int:
    """Unassign every watch of a patient; used before deleting the patient."""

    return ActigraphWatch.objects.filter(assigned_patient_id=patient_id).update(
        assigned_patient=None,
        assignment_date=None,
        updated_at=timezone.now(),
    )


def _lock_watch(watch_id: int) -> ActigraphWatch:
    watch = ActigraphWatch.objects.select_for_update().filter(pk=watch_id).first()
    if watch is None:
        raise WatchNotFoundError("Watch not found")
    return watch
