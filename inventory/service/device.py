"""
Device set service layer: registration, loan assignment and return.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Optional

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from core.exceptions import ConflictError, NotFoundError, ensure_present
from inventory.choices import DeviceStatus
from inventory.models import ActigraphWatch, DeviceSet
from inventory.service.allocator import next_available
from users.models import Patient

logger = logging.getLogger(__name__)


class DeviceNotFoundError(NotFoundError):
    pass


class PatientNotFoundError(NotFoundError):
    pass


class DuplicateDeviceError(ConflictError):
    pass


class DeviceUnavailableError(ConflictError):
    pass


class PatientAlreadyEquippedError(ConflictError):
    pass


class DeviceInUseError(ConflictError):
    pass


@dataclass(frozen=True)
class WatchSwapResult:
    device: DeviceSet
    old_watch: ActigraphWatch
    new_watch: ActigraphWatch


def list_device_sets(status: str | None = None):
    qs = DeviceSet.objects.select_related("assigned_patient").prefetch_related("sim_cards")
    if status:
        qs = qs.filter(status=status)
    return qs.order_by("set_number")


def get_device_set(device_id: int) -> DeviceSet:
    try:
        return DeviceSet.objects.select_related("assigned_patient").get(pk=device_id)
    except DeviceSet.DoesNotExist as exc:
        raise DeviceNotFoundError("Device set not found") from exc


def _check_unique_ids(mars_device_id: str | None, pluto_device_id: str | None, exclude_pk=None) -> None:
    qs = DeviceSet.objects.all()
    if exclude_pk is not None:
        qs = qs.exclude(pk=exclude_pk)
    if mars_device_id and qs.filter(mars_device_id=mars_device_id).exists():
        raise DuplicateDeviceError("MARS Device ID already exists")
    if pluto_device_id and qs.filter(pluto_device_id=pluto_device_id).exists():
        raise DuplicateDeviceError("PLUTO Device ID already exists")


@transaction.atomic
def create_device_set(data: dict[str, Any]) -> DeviceSet:
    """
    Register a new device set.

    When ``set_number`` is missing or already taken, the smallest free
    positive number is used instead.
    """

    data = dict(data)
    _check_unique_ids(data.get("mars_device_id"), data.get("pluto_device_id"))

    taken = set(DeviceSet.objects.select_for_update().values_list("set_number", flat=True))
    set_number = data.pop("set_number", None)
    if not set_number or set_number in taken:
        set_number = next_available(taken)

    device = DeviceSet.objects.create(set_number=set_number, **data)
    logger.info("Registered device set %s (set %s)", device.pk, device.set_number)
    return device


@transaction.atomic
def update_device_set(device_id: int, data: dict[str, Any]) -> DeviceSet:
    """Edit identifiers and notes. Status and assignment change only via assign/return."""

    device = _lock_device(device_id)
    ensure_present(data, ("set_number", "mars_device_id", "pluto_device_id"))
    _check_unique_ids(data.get("mars_device_id"), data.get("pluto_device_id"), exclude_pk=device.pk)

    set_number = data.get("set_number")
    if set_number and DeviceSet.objects.filter(set_number=set_number).exclude(pk=device.pk).exists():
        raise DuplicateDeviceError(f"Set number {set_number} is already taken")

    if data.get("status") == DeviceStatus.IN_USE or (
        "status" in data and device.is_in_use and data["status"] != DeviceStatus.IN_USE
    ):
        raise DeviceInUseError("Use assign/return to change the loan status of a device set")

    for field, value in data.items():
        setattr(device, field, value)
    device.save()
    return device


@transaction.atomic
def delete_device_set(device_id: int) -> None:
    device = _lock_device(device_id)
    if device.is_in_use:
        raise DeviceInUseError("Device set is in use; return it before deleting")
    device.delete()
    logger.info("Deleted device set %s", device_id)


def assign_device_set(
    device_id: int,
    patient_id: int,
    expected_return_date: Optional[datetime] = None,
) -> DeviceSet:
    """
    Lend a device set to a patient.

    Rules:
    - The device must exist and be ``available``.
    - The patient must exist and must not already hold an ``in_use`` set.
    - ``expected_return_date`` defaults to now plus the configured loan period.
    """

    now = timezone.now()
    with transaction.atomic():
        device = _lock_device(device_id)
        if device.status != DeviceStatus.AVAILABLE:
            raise DeviceUnavailableError(
                "Device is already in use" if device.is_in_use else f"Device is {device.get_status_display().lower()}"
            )

        patient = Patient.objects.select_for_update().filter(pk=patient_id).first()
        if patient is None:
            raise PatientNotFoundError("Patient not found")

        if DeviceSet.objects.filter(assigned_patient=patient, status=DeviceStatus.IN_USE).exists():
            raise PatientAlreadyEquippedError("Patient already has a device set assigned")

        loan_days = getattr(settings, "HOMER_DEVICE_LOAN_DAYS", 30)
        device.status = DeviceStatus.IN_USE
        device.assigned_patient = patient
        device.assignment_date = now
        device.expected_return_date = expected_return_date or now + timedelta(days=loan_days)
        device.return_date = None
        device.save(
            update_fields=[
                "status",
                "assigned_patient",
                "assignment_date",
                "expected_return_date",
                "return_date",
                "updated_at",
            ]
        )

    logger.info("Assigned device set %s to patient %s", device.pk, patient.pk)
    return device


def return_device_set(device_id: int) -> DeviceSet:
    """
    Take a device set back into the pool.

    Always succeeds for an existing device: status becomes ``available``, the
    patient link is cleared and ``return_date`` is stamped, even if the set was
    not on loan. That case is logged.
    """

    now = timezone.now()
    with transaction.atomic():
        device = _lock_device(device_id)
        if not device.is_in_use:
            logger.warning(
                "Returning device set %s which was not in use (status=%s)", device.pk, device.status
            )
        device.status = DeviceStatus.AVAILABLE
        device.assigned_patient = None
        device.return_date = now
        device.save(update_fields=["status", "assigned_patient", "return_date", "updated_at"])
    return device


def swap_device_actigraphs(device_id: int) -> WatchSwapResult:
    """
    Day-15 swap for the patient holding this device set.

    Delegates to :func:`inventory.service.watch.swap_watch` on the watch pair
    currently assigned to the device's patient.
    """

    from inventory.service.watch import NoAssignedWatchError, swap_watch

    device = get_device_set(device_id)
    if not device.is_in_use:
        raise DeviceUnavailableError("Device set is not assigned to a patient")

    watch = (
        ActigraphWatch.objects.filter(assigned_patient_id=device.assigned_patient_id)
        .order_by("assignment_date", "id")
        .first()
    )
    if watch is None:
        raise NoAssignedWatchError("Patient has no actigraph watch assigned")

    old_watch, new_watch = swap_watch(watch.pk)
    return WatchSwapResult(device=device, old_watch=old_watch, new_watch=new_watch)


def _lock_device(device_id: int) -> DeviceSet:
    device = DeviceSet.objects.select_for_update().filter(pk=device_id).first()
    if device is None:
        raise DeviceNotFoundError("Device set not found")
    return device
