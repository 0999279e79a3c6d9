"""CSV exports, JSON snapshot sync and backups."""

import logging

from django.db import DatabaseError, connection
from django.http import HttpResponse
from django.utils import timezone

from reports.services import backup, csv_export, snapshot
from users.decorators import WRITE_ROLES, api_login_required, check_writer
from web_api.forms import ImportForm
from web_api.views.common import (
    BadRequest,
    api_view,
    ensure_role,
    form_error,
    json_error,
    json_ok,
    parse_json_body,
)

logger = logging.getLogger(__name__)

CSV_EXPORTS = {
    "patients": csv_export.export_patients_csv,
    "adverse-events": csv_export.export_adverse_events_csv,
    "dropouts": csv_export.export_dropouts_csv,
    "devices": csv_export.export_devices_csv,
}


def _csv_response(content: str, filename: str) -> HttpResponse:
    response = HttpResponse(content, content_type="text/csv; charset=utf-8")
    response["Content-Disposition"] = f'attachment; filename="{filename}"'
    return response


@api_view("GET")
@api_login_required
def export_csv(request, kind: str):
    stamp = timezone.localdate().isoformat()
    return _csv_response(CSV_EXPORTS[kind](), f"homer_{kind.replace('-', '_')}_{stamp}.csv")


@api_view("GET")
@api_login_required
def export_patient(request, pk: int):
    code, content = csv_export.export_patient_csv(pk)
    return _csv_response(content, f"{code}_report.csv")


@api_view("GET")
@api_login_required
def sync_all(request):
    return json_ok(snapshot.build_snapshot())


@api_view("POST")
@check_writer
def sync_import(request):
    """
    Body is a snapshot as produced by ``/sync/all`` plus an optional
    ``"mode": "merge" | "replace"``.
    """

    payload = parse_json_body(request)
    form = ImportForm({"mode": payload.get("mode")})
    if not form.is_valid():
        return form_error(form)

    result = snapshot.import_snapshot(payload, mode=form.cleaned_data["mode"])
    return json_ok(
        {
            "mode": result.mode,
            "imported": result.imported,
            "errors": result.errors,
        },
        message=f"Imported {result.total_imported} records",
    )


@api_view("GET", "POST")
@api_login_required
def backup_collection(request):
    if request.method == "POST":
        ensure_role(request, *WRITE_ROLES)
        path = backup.create_backup()
        return json_ok({"path": path}, status=201, message="Backup uploaded")

    files = backup.get_backup_storage().list()
    return json_ok(
        [
            {
                "name": item.name,
                "path": item.path,
                "size": item.size,
                "modified": item.modified.isoformat() if item.modified else None,
            }
            for item in files
        ]
    )


@api_view("POST")
@check_writer
def backup_download(request):
    """Fetch a backup (newest when no ``filename`` is given) without importing it."""

    filename = parse_json_body(request).get("filename") or None
    if filename is not None and not isinstance(filename, str):
        raise BadRequest("filename must be a string")
    name, data = backup.load_backup(filename=filename)
    return json_ok(data, filename=name)


@api_view("GET")
def health(request):
    try:
        connection.ensure_connection()
    except DatabaseError:
        logger.exception("Health check could not reach the database")
        return json_error("Database unavailable", status=503)
    return json_ok({"status": "ok", "timestamp": timezone.now().isoformat()})
