"""Therapy session logging for the two study arms."""

from __future__ import annotations

from typing import Any

from django.db import transaction

from core.exceptions import ConflictError, NotFoundError
from core.models import ControlSession, InterventionSession
from users import choices as user_choices
from users.models import CustomUser, Patient


class SessionNotFoundError(NotFoundError):
    pass


class SessionGroupMismatchError(ConflictError):
    """Session kind does not match the patient's study arm."""


_SESSION_MODELS = {
    user_choices.GroupType.INTERVENTION: InterventionSession,
    user_choices.GroupType.CONTROL: ControlSession,
}


def _session_model(group_type: str):
    try:
        return _SESSION_MODELS[group_type]
    except KeyError as exc:
        raise ValueError(f"Unknown group type: {group_type!r}") from exc


def list_sessions(group_type: str, patient_id: int):
    model = _session_model(group_type)
    return list(
        model.objects.select_related("logged_by")
        .filter(patient_id=patient_id)
        .order_by("-session_date", "-id")
    )


@transaction.atomic
def log_session(group_type: str, patient_id: int, data: dict[str, Any], user: CustomUser | None = None):
    """
    Record a therapy session.

    The patient must exist and belong to the arm matching ``group_type``;
    otherwise nothing is written.
    """

    model = _session_model(group_type)
    patient = Patient.objects.filter(pk=patient_id).first()
    if patient is None:
        raise NotFoundError("Patient not found")
    if patient.group_type != group_type:
        raise SessionGroupMismatchError(f"Patient is not in {group_type} group")

    return model.objects.create(patient=patient, logged_by=user, **data)


def update_session(group_type: str, session_id: int, data: dict[str, Any]):
    model = _session_model(group_type)
    try:
        session = model.objects.get(pk=session_id)
    except model.DoesNotExist as exc:
        raise SessionNotFoundError("Session not found") from exc

    for field, value in data.items():
        setattr(session, field, value)
    session.save()
    return session


def delete_session(group_type: str, session_id: int) -> None:
    model = _session_model(group_type)
    deleted, _ = model.objects.filter(pk=session_id).delete()
    if not deleted:
        raise SessionNotFoundError("Session not found")
