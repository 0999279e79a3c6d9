"""
Shared helpers for the JSON views.

Every view answers ``{"success": true, "data": ...}`` on success and
``{"success": false, "message": ...}`` on failure; validation failures add
``errors`` with the per-field messages.
"""

import json
import logging
from functools import wraps
from typing import Any

from django.http import HttpRequest, JsonResponse
from django.views.decorators.http import require_http_methods

from core.exceptions import ServiceError

logger = logging.getLogger(__name__)


class BadRequest(ValueError):
    """Malformed request body or query parameter."""


def json_error(message: str, *, status: int, errors: dict | None = None) -> JsonResponse:
    payload: dict[str, Any] = {"success": False, "message": message}
    if errors:
        payload["errors"] = errors
    return JsonResponse(payload, status=status)


def json_ok(data: Any = None, *, status: int = 200, **extra) -> JsonResponse:
    payload: dict[str, Any] = {"success": True, "data": data}
    payload.update(extra)
    return JsonResponse(payload, status=status)


def form_error(form) -> JsonResponse:
    errors = {field: [str(message) for message in messages] for field, messages in form.errors.items()}
    return json_error("Validation failed", status=400, errors=errors)


def parse_json_body(request: HttpRequest) -> dict:
    if not request.body:
        return {}
    try:
        payload = json.loads(request.body.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as exc:
        raise BadRequest("Request body is not valid JSON") from exc
    if not isinstance(payload, dict):
        raise BadRequest("Request body must be a JSON object")
    return payload


def parse_int_param(
    value: str | None,
    *,
    name: str,
    default: int,
    min_value: int,
    max_value: int | None = None,
) -> int:
    if value is None or value == "":
        return default
    try:
        parsed = int(value)
    except (TypeError, ValueError) as exc:
        raise BadRequest(f"Invalid {name} parameter") from exc
    if parsed < min_value or (max_value is not None and parsed > max_value):
        raise BadRequest(f"Invalid {name} parameter")
    return parsed


def parse_bool_param(value: str | None) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes"}


def present_fields(form, payload: dict) -> dict:
    """Cleaned values for the keys the client actually sent (partial update)."""

    return {key: value for key, value in form.cleaned_data.items() if key in payload}


def api_view(*methods: str):
    """
    Method guard plus the error boundary of the API.

    ``ServiceError`` subclasses map to their ``status_code``; ``BadRequest`` to
    400; anything else is logged and reported as a generic 500.
    """

    def decorator(view_func):
        @require_http_methods(list(methods))
        @wraps(view_func)
        def _wrapped_view(request: HttpRequest, *args, **kwargs):
            try:
                return view_func(request, *args, **kwargs)
            except BadRequest as exc:
                logger.warning("Bad request %s %s: %s", request.method, request.path, exc)
                return json_error(str(exc), status=400)
            except ServiceError as exc:
                return json_error(str(exc), status=exc.status_code, errors=getattr(exc, "errors", None))
            except Exception:
                logger.exception("Unhandled error in %s %s", request.method, request.path)
                return json_error("Internal server error", status=500)

        return _wrapped_view

    return decorator


class Forbidden(ServiceError):
    status_code = 403


def ensure_role(request: HttpRequest, *roles: str) -> None:
    """Inline role check for views whose methods need different roles."""

    if request.user.role not in roles:
        raise Forbidden("Insufficient permissions")
