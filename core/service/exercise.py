"""Home exercise prescriptions."""

from __future__ import annotations

from typing import Any

from django.db import transaction

from core.exceptions import NotFoundError
from core.models import PatientExercise
from users.models import CustomUser, Patient


class ExerciseNotFoundError(NotFoundError):
    pass


def list_exercises(patient_id: int) -> list[PatientExercise]:
    return list(
        PatientExercise.objects.select_related("created_by")
        .filter(patient_id=patient_id)
        .order_by("-created_at", "-id")
    )


def get_current_exercise(patient_id: int) -> PatientExercise | None:
    return PatientExercise.objects.filter(patient_id=patient_id, is_current=True).first()


@transaction.atomic
def prescribe_exercise(patient_id: int, data: dict[str, Any], user: CustomUser | None = None) -> PatientExercise:
    """
    Make a new prescription current.

    The previously current row is demoted in the same transaction, keeping at
    most one current prescription per patient.
    """

    patient = Patient.objects.select_for_update().filter(pk=patient_id).first()
    if patient is None:
        raise NotFoundError("Patient not found")

    PatientExercise.objects.filter(patient=patient, is_current=True).update(is_current=False)
    return PatientExercise.objects.create(
        patient=patient,
        is_current=True,
        created_by=user,
        **data,
    )


def delete_exercise(exercise_id: int) -> None:
    deleted, _ = PatientExercise.objects.filter(pk=exercise_id).delete()
    if not deleted:
        raise ExerciseNotFoundError("Exercise not found")


def revise_exercise(exercise_id: int, data: dict[str, Any], user: CustomUser | None = None) -> PatientExercise:
    """Edits never overwrite a prescription; they issue a new current one for the same patient."""

    patient_id = PatientExercise.objects.filter(pk=exercise_id).values_list("patient_id", flat=True).first()
    if patient_id is None:
        raise ExerciseNotFoundError("Exercise not found")
    return prescribe_exercise(patient_id, data, user=user)
