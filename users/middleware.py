"""Audit trail for successful API mutations."""

import json
import logging

from django.db import DatabaseError

from users import choices
from users.models import AuditLog

logger = logging.getLogger(__name__)

API_PREFIX = "/api/"

METHOD_ACTIONS = {
    "POST": choices.AuditAction.CREATE,
    "PUT": choices.AuditAction.UPDATE,
    "PATCH": choices.AuditAction.UPDATE,
    "DELETE": choices.AuditAction.DELETE,
}


def _client_ip(request):
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR")


def _response_payload(response):
    if response.get("Content-Type", "").startswith("application/json"):
        try:
            return json.loads(response.content or b"null")
        except ValueError:
            return None
    return None


class AuditLogMiddleware:
    """
    Write one AuditLog row per successful POST/PUT/PATCH/DELETE under /api/.

    ``table_name`` is the first path segment after ``/api/``; ``record_id``
    comes from the URL ``pk`` or, for creations, from the response body.
    Auth endpoints are not audited.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        response = self.get_response(request)

        action = METHOD_ACTIONS.get(request.method)
        if (
            action is None
            or not request.path.startswith(API_PREFIX)
            or request.path.startswith(f"{API_PREFIX}auth/")
            or not 200 <= response.status_code < 300
            or not getattr(request.user, "is_authenticated", False)
        ):
            return response

        self._record(request, response, action)
        return response

    def _record(self, request, response, action):
        segments = [part for part in request.path[len(API_PREFIX):].split("/") if part]
        table_name = segments[0] if segments else ""

        payload = _response_payload(response)
        data = payload.get("data") if isinstance(payload, dict) else None
        # Only single-record bodies are kept; snapshots and lists are not copied into the log.
        new_values = data if isinstance(data, dict) and "id" in data else None

        match = getattr(request, "resolver_match", None)
        record_id = match.kwargs.get("pk") if match else None
        if record_id is None and new_values is not None:
            record_id = new_values["id"]

        try:
            AuditLog.objects.create(
                user=request.user,
                table_name=table_name[:50],
                record_id="" if record_id is None else str(record_id),
                action=action,
                path=request.path[:255],
                ip_address=_client_ip(request),
                new_values=new_values,
            )
        except DatabaseError:
            logger.exception("Failed to write audit log for %s %s", request.method, request.path)
