"""
Whole-study JSON snapshot for backup and transfer between installations.

Shape::

    {
        "exportedAt": "2024-01-01T10:00:00+05:30",
        "version": "1.0.0",
        "patients": [{"id": 1, "patient_code": "INT-001", ...}, ...],
        "studyEvents": [...],
        ...
    }

Records are flat dicts of the model's concrete fields with ``id`` as primary
key and foreign keys as raw ids, produced and consumed through Django's
``python`` serializer.

Import modes:
- ``merge``: upsert by primary key, existing rows not in the snapshot stay;
- ``replace``: wipe the snapshot tables (children first), then insert.

Each record is saved in its own savepoint; failures are collected and the rest
of the import proceeds. The whole import is one transaction.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from django.apps import apps
from django.conf import settings
from django.core import serializers
from django.core.exceptions import ValidationError
from django.core.serializers.base import DeserializationError
from django.db import DatabaseError, transaction
from django.utils import timezone

from core.exceptions import ServiceError

logger = logging.getLogger(__name__)

IMPORT_MODES = ("merge", "replace")

# Parents before children; replace mode deletes in reverse.
SNAPSHOT_SECTIONS: tuple[tuple[str, str, tuple[str, ...]], ...] = (
    ("patients", "users.Patient", ("-created_at",)),
    ("studyEvents", "core.StudyEvent", ("-scheduled_date",)),
    ("deviceSets", "inventory.DeviceSet", ("set_number",)),
    ("actigraphWatches", "inventory.ActigraphWatch", ("name",)),
    ("simCards", "inventory.SimCard", ("-created_at",)),
    ("simRechargeHistories", "inventory.SimRechargeHistory", ("-recharge_date",)),
    ("interventionSessions", "core.InterventionSession", ("-session_date",)),
    ("controlSessions", "core.ControlSession", ("-session_date",)),
    ("adverseEvents", "monitoring.AdverseEvent", ("-event_date",)),
    ("issueLogs", "monitoring.IssueLog", ("-contact_date",)),
    ("reminders", "monitoring.Reminder", ("due_date",)),
    ("patientExercises", "core.PatientExercise", ("study_day",)),
)


class SnapshotError(ServiceError):
    pass


@dataclass
class ImportResult:
    mode: str
    imported: dict[str, int] = field(default_factory=dict)
    errors: list[dict[str, Any]] = field(default_factory=list)

    @property
    def total_imported(self) -> int:
        return sum(self.imported.values())


def build_snapshot() -> dict[str, Any]:
    data: dict[str, Any] = {
        "exportedAt": timezone.now().isoformat(),
        "version": getattr(settings, "HOMER_EXPORT_VERSION", "1.0.0"),
    }
    for key, label, ordering in SNAPSHOT_SECTIONS:
        model = apps.get_model(label)
        queryset = model.objects.order_by(*ordering, "pk")
        data[key] = [_flatten(item) for item in serializers.serialize("python", queryset)]
    return data


def import_snapshot(data: dict[str, Any], mode: str = "merge") -> ImportResult:
    if not isinstance(data, dict):
        raise SnapshotError("Snapshot must be a JSON object")
    if mode not in IMPORT_MODES:
        raise SnapshotError(f"Unknown import mode: {mode!r}")

    result = ImportResult(mode=mode)
    with transaction.atomic():
        if mode == "replace":
            _wipe()

        for key, label, _ordering in SNAPSHOT_SECTIONS:
            records = data.get(key)
            if records is None:
                continue
            if not isinstance(records, list):
                result.errors.append({"table": key, "id": None, "error": "Expected a list of records"})
                continue

            model = apps.get_model(label)
            imported = 0
            for record in records:
                error = _import_record(model, record)
                if error is None:
                    imported += 1
                else:
                    result.errors.append({"table": key, "id": _record_id(record), "error": error})
            result.imported[key] = imported

    logger.info(
        "Snapshot import (%s): %s record(s) imported, %s error(s)",
        mode,
        result.total_imported,
        len(result.errors),
    )
    return result


def _flatten(item: dict[str, Any]) -> dict[str, Any]:
    return {"id": item["pk"], **item["fields"]}


def _record_id(record: Any):
    return record.get("id") if isinstance(record, dict) else None


def _wipe() -> None:
    for key, label, _ordering in reversed(SNAPSHOT_SECTIONS):
        deleted, _ = apps.get_model(label).objects.all().delete()
        logger.info("Replace import removed %s row(s) from %s", deleted, key)


def _clean_references(model, fields: dict[str, Any]) -> str | None:
    """
    Null out nullable references to rows that do not exist here (typically
    staff users of another installation). A missing required reference is an
    error.
    """

    for model_field in model._meta.concrete_fields:
        if not model_field.is_relation or model_field.name not in fields:
            continue
        value = fields[model_field.name]
        if value is None:
            continue
        target = model_field.related_model
        try:
            exists = target._default_manager.filter(pk=value).exists()
        except (TypeError, ValueError):
            return f"{model_field.name} has an invalid id {value!r}"
        if exists:
            continue
        if model_field.null:
            fields[model_field.name] = None
        else:
            return f"{model_field.name} references missing {target._meta.label} #{value}"
    return None


def _import_record(model, record: Any) -> str | None:
    if not isinstance(record, dict) or "id" not in record:
        return "Record must be an object with an id"

    fields = {key: value for key, value in record.items() if key != "id"}
    error = _clean_references(model, fields)
    if error:
        return error

    payload = [{"model": model._meta.label_lower, "pk": record["id"], "fields": fields}]
    try:
        with transaction.atomic():
            for obj in serializers.deserialize("python", payload):
                obj.object.full_clean(validate_unique=False, validate_constraints=False)
                obj.save()
    except (DeserializationError, ValidationError, DatabaseError) as exc:
        return str(exc)
    return None
