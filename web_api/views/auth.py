"""Session login for the single-page frontend."""

import logging

from django.views.decorators.csrf import ensure_csrf_cookie

from users.decorators import api_login_required
from users.services import AuthService
from web_api.forms import LoginForm
from web_api.serializers import serialize_user
from web_api.views.common import api_view, form_error, json_error, json_ok, parse_json_body

logger = logging.getLogger(__name__)


@api_view("GET")
@ensure_csrf_cookie
def csrf(request):
    """Sets the ``csrftoken`` cookie the frontend echoes back in ``X-CSRFToken``."""

    return json_ok()


@api_view("POST")
def login(request):
    form = LoginForm(parse_json_body(request))
    if not form.is_valid():
        return form_error(form)

    ok, result = AuthService().login(request, form.cleaned_data["email"], form.cleaned_data["password"])
    if not ok:
        return json_error(result, status=401)
    return json_ok(serialize_user(result))


@api_view("POST")
def logout(request):
    AuthService().logout(request)
    return json_ok()


@api_view("GET")
@api_login_required
def me(request):
    return json_ok(serialize_user(request.user))
