"""Adverse event logging, including the dropout it may trigger."""

from __future__ import annotations

import logging
from typing import Any

from django.db import transaction

from core.exceptions import NotFoundError
from monitoring.models import AdverseEvent
from users.models import CustomUser, Patient

logger = logging.getLogger(__name__)


class AdverseEventNotFoundError(NotFoundError):
    pass


def list_adverse_events(*, patient_id: int | None = None, severity: str | None = None):
    qs = AdverseEvent.objects.select_related("patient", "logged_by")
    if patient_id:
        qs = qs.filter(patient_id=patient_id)
    if severity:
        qs = qs.filter(severity=severity)
    return qs.order_by("-event_date", "-id")


@transaction.atomic
def create_adverse_event(patient_id: int, data: dict[str, Any], user: CustomUser | None = None) -> AdverseEvent:
    """
    Record an adverse event.

    With ``requires_dropout`` the patient is dropped out as of the event date
    in the same transaction: reason ``Adverse event: <type>``, reason type
    ``Adverse Event``, pending events after that date cancelled. A patient who
    is no longer active keeps their status.
    """

    from users.services.patient import PatientService

    patient = Patient.objects.select_for_update().filter(pk=patient_id).first()
    if patient is None:
        raise NotFoundError("Patient not found")

    event = AdverseEvent.objects.create(patient=patient, logged_by=user, **data)

    if event.requires_dropout:
        if patient.is_active:
            PatientService().drop_out_patient(
                patient.pk,
                dropout_date=event.event_date,
                reason=f"Adverse event: {event.event_type}",
                reason_type="Adverse Event",
            )
        else:
            logger.warning(
                "Adverse event %s requires dropout but patient %s is already %s",
                event.pk,
                patient.pk,
                patient.status,
            )
    return event


def update_adverse_event(event_id: int, data: dict[str, Any]) -> AdverseEvent:
    event = AdverseEvent.objects.filter(pk=event_id).first()
    if event is None:
        raise AdverseEventNotFoundError("Adverse event not found")
    for field, value in data.items():
        setattr(event, field, value)
    event.save()
    return event


def delete_adverse_event(event_id: int) -> None:
    deleted, _ = AdverseEvent.objects.filter(pk=event_id).delete()
    if not deleted:
        raise AdverseEventNotFoundError("Adverse event not found")
