"""
Patient enrollment and lifecycle.

Rules:
- ``patient_code`` is unique and chosen by staff; :meth:`PatientService.suggest_patient_code`
  proposes the next free ``INT-NNN`` / ``CTL-NNN``.
- The study schedule is generated after the patient row is committed. A
  failed generation leaves the patient in place with ``schedule_status=failed``.
- ``group_type`` cannot change once study events exist.
- Dropout and completion only apply to ``active`` patients.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Any, Optional

from django.core.paginator import Page, Paginator
from django.db import transaction
from django.db.models import Q
from django.utils import timezone

from core.exceptions import ConflictError, FieldValidationError, NotFoundError, ensure_present
from core.service import schedule
from inventory.service.allocator import next_available
from users import choices
from users.models import CustomUser, Patient

logger = logging.getLogger(__name__)

PATIENT_CODE_PREFIXES = {
    choices.GroupType.INTERVENTION: "INT",
    choices.GroupType.CONTROL: "CTL",
}

SCHEDULE_FIELDS = ("study_start_date", "a0_date")
REQUIRED_FIELDS = ("patient_code", "age", "affected_hand", "group_type", "study_start_date", "enrollment_date")


class PatientNotFoundError(NotFoundError):
    pass


class DuplicatePatientCodeError(ConflictError):
    pass


class PatientStateError(ConflictError):
    pass


@dataclass(frozen=True)
class PatientCreateResult:
    patient: Patient
    schedule_generated: bool
    warning: Optional[str] = None


class PatientService:

    def get_patient(self, patient_id: int) -> Patient:
        try:
            return Patient.objects.select_related("created_by").get(pk=patient_id)
        except Patient.DoesNotExist as exc:
            raise PatientNotFoundError("Patient not found") from exc

    def list_patients(
        self,
        *,
        status: str | None = None,
        group_type: str | None = None,
        search: str | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> Page:
        qs = Patient.objects.all()
        if status:
            qs = qs.filter(status=status)
        if group_type:
            qs = qs.filter(group_type=group_type)
        if search:
            qs = qs.filter(Q(patient_code__icontains=search) | Q(name__icontains=search))
        return Paginator(qs.order_by("-created_at", "-id"), page_size).get_page(page)

    def suggest_patient_code(self, group_type: str) -> str:
        """Next free code for the arm, filling gaps: ``INT-001``, ``INT-002`` ..."""

        try:
            prefix = PATIENT_CODE_PREFIXES[group_type]
        except KeyError as exc:
            raise ValueError(f"Unknown group type: {group_type!r}") from exc

        pattern = re.compile(rf"^{prefix}-(\d+)$")
        taken = set()
        for code in Patient.objects.filter(patient_code__startswith=f"{prefix}-").values_list(
            "patient_code", flat=True
        ):
            match = pattern.match(code)
            if match:
                taken.add(int(match.group(1)))
        return f"{prefix}-{next_available(taken):03d}"

    def create_patient(self, data: dict[str, Any], created_by: CustomUser | None = None) -> PatientCreateResult:
        """
        Enroll a patient, then generate their schedule.

        The patient is committed before generation runs; a generation failure
        is reported through ``warning`` instead of an exception.
        """

        code = data.get("patient_code")
        with transaction.atomic():
            if Patient.objects.filter(patient_code=code).exists():
                raise DuplicatePatientCodeError(
                    f'Patient ID "{code}" already exists. Please use a different ID.'
                )
            patient = Patient.objects.create(
                created_by=created_by,
                schedule_status=choices.ScheduleStatus.PENDING,
                **data,
            )
        logger.info("Enrolled patient %s (%s)", patient.patient_code, patient.group_type)

        generated = schedule.generate_schedule_best_effort(patient)
        warning = None
        if not generated:
            warning = "Patient created, but the study schedule could not be generated. It can be retried."
        return PatientCreateResult(patient=patient, schedule_generated=generated, warning=warning)

    @transaction.atomic
    def update_patient(self, patient_id: int, data: dict[str, Any]) -> Patient:
        """
        Edit patient fields.

        A change of ``study_start_date`` or ``a0_date`` regenerates the
        pending events; completed, skipped and cancelled ones are kept.
        """

        patient = self._lock_patient(patient_id)
        ensure_present(data, REQUIRED_FIELDS)

        new_group = data.get("group_type")
        if new_group and new_group != patient.group_type and patient.study_events.exists():
            raise PatientStateError("Group type cannot be changed once study events exist")

        group = new_group or patient.group_type
        vcg = data["vcg_assignment"] if "vcg_assignment" in data else patient.vcg_assignment
        if vcg and group == choices.GroupType.INTERVENTION:
            raise FieldValidationError("vcg_assignment", "VCG assignment applies to the control group only.")

        new_code = data.get("patient_code")
        if new_code and new_code != patient.patient_code:
            if Patient.objects.filter(patient_code=new_code).exclude(pk=patient.pk).exists():
                raise DuplicatePatientCodeError(f'Patient ID "{new_code}" already exists.')

        dates_changed = any(
            field in data and data[field] != getattr(patient, field) for field in SCHEDULE_FIELDS
        )

        for field, value in data.items():
            setattr(patient, field, value)

        if dates_changed:
            schedule.regenerate_study_events(
                patient,
                patient.study_start_date,
                patient.group_type,
                patient.a0_date,
            )
            patient.schedule_status = choices.ScheduleStatus.GENERATED
            patient.schedule_error = ""

        patient.save()
        return patient

    @transaction.atomic
    def drop_out_patient(
        self,
        patient_id: int,
        *,
        dropout_date: date,
        reason: str,
        reason_type: str,
    ) -> tuple[Patient, int]:
        """
        Move an active patient to ``dropped_out`` and cancel pending events
        scheduled after ``dropout_date``.

        Returns:
            ``(patient, cancelled_event_count)``.
        """

        patient = self._lock_patient(patient_id)
        if not patient.is_active:
            raise PatientStateError(f"Patient is already {patient.get_status_display().lower()}")

        patient.status = choices.PatientStatus.DROPPED_OUT
        patient.dropout_date = dropout_date
        patient.dropout_reason = reason
        patient.dropout_reason_type = reason_type
        patient.save(
            update_fields=["status", "dropout_date", "dropout_reason", "dropout_reason_type", "updated_at"]
        )

        cancelled = schedule.cancel_future_events(patient, dropout_date)
        logger.info(
            "Patient %s dropped out on %s, %s future event(s) cancelled",
            patient.patient_code,
            dropout_date,
            cancelled,
        )
        return patient, cancelled

    @transaction.atomic
    def complete_patient(self, patient_id: int) -> Patient:
        patient = self._lock_patient(patient_id)
        if not patient.is_active:
            raise PatientStateError(f"Patient is already {patient.get_status_display().lower()}")
        patient.status = choices.PatientStatus.COMPLETED
        patient.save(update_fields=["status", "updated_at"])
        return patient

    @transaction.atomic
    def delete_patient(self, patient_id: int) -> None:
        """
        Remove a patient and everything they own.

        Device sets on loan are returned and watches released first; events,
        sessions, adverse events, issue logs, reminders and exercises cascade.
        """

        from inventory.choices import DeviceStatus
        from inventory.models import DeviceSet
        from inventory.service.watch import release_patient_watches

        patient = self._lock_patient(patient_id)
        returned = DeviceSet.objects.filter(assigned_patient=patient).update(
            status=DeviceStatus.AVAILABLE,
            assigned_patient=None,
            return_date=timezone.now(),
            updated_at=timezone.now(),
        )
        released = release_patient_watches(patient.pk)
        code = patient.patient_code
        patient.delete()
        logger.info(
            "Deleted patient %s (%s device set(s) returned, %s watch(es) released)",
            code,
            returned,
            released,
        )

    def _lock_patient(self, patient_id: int) -> Patient:
        patient = Patient.objects.select_for_update().filter(pk=patient_id).first()
        if patient is None:
            raise PatientNotFoundError("Patient not found")
        return patient
