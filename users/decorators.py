"""
Role guards for the JSON API.

Unauthenticated requests get 401 and authenticated users outside the allowed
roles get 403, both as ``{"success": false, "message": ...}``. Inactive
accounts are treated as unauthenticated.
"""

from functools import wraps
from typing import Callable

from django.http import HttpRequest, HttpResponse, JsonResponse

from users import choices

ViewFunc = Callable[..., HttpResponse]

WRITE_ROLES = (choices.UserRole.ADMIN, choices.UserRole.THERAPIST)


def _deny(message: str, status: int) -> JsonResponse:
    return JsonResponse({"success": False, "message": message}, status=status)


def api_login_required(view_func: ViewFunc) -> ViewFunc:
    @wraps(view_func)
    def _wrapped_view(request: HttpRequest, *args, **kwargs):
        user = request.user
        if not getattr(user, "is_authenticated", False) or not user.is_active:
            return _deny("Authentication required", 401)
        return view_func(request, *args, **kwargs)

    return _wrapped_view


def require_roles(*roles: str) -> Callable[[ViewFunc], ViewFunc]:
    """
    Restrict a view to the given roles.

    Example: ``@require_roles(UserRole.ADMIN)`` on device registration.
    """

    def decorator(view_func: ViewFunc) -> ViewFunc:
        @wraps(view_func)
        @api_login_required
        def _wrapped_view(request: HttpRequest, *args, **kwargs):
            if request.user.role not in roles:
                return _deny("Insufficient permissions", 403)
            return view_func(request, *args, **kwargs)

        return _wrapped_view

    return decorator


def check_admin(view_func: ViewFunc) -> ViewFunc:
    return require_roles(choices.UserRole.ADMIN)(view_func)


def check_writer(view_func: ViewFunc) -> ViewFunc:
    """Admins and therapists; data entry staff are read-only."""

    return require_roles(*WRITE_ROLES)(view_func)


__all__ = [
    "api_login_required",
    "require_roles",
    "check_admin",
    "check_writer",
]
