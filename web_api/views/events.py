"""Study event list and outcome recording."""

from core.service import events as event_service
from users.decorators import api_login_required, check_writer
from web_api.forms import EventUpdateForm
from web_api.serializers import serialize_event, serialize_event_with_patient, serialize_page
from web_api.views.common import (
    api_view,
    form_error,
    json_ok,
    parse_bool_param,
    parse_int_param,
    parse_json_body,
)


@api_view("GET")
@api_login_required
def event_collection(request):
    params = request.GET
    page = event_service.list_study_events(
        patient_id=parse_int_param(params.get("patient_id"), name="patient_id", default=0, min_value=0) or None,
        status=params.get("status") or None,
        overdue=parse_bool_param(params.get("overdue")),
        page=parse_int_param(params.get("page"), name="page", default=1, min_value=1),
        page_size=parse_int_param(params.get("page_size"), name="page_size", default=50, min_value=1, max_value=200),
    )
    return json_ok(serialize_page(page, serialize_event_with_patient))


@api_view("PUT")
@check_writer
def event_detail(request, pk: int):
    form = EventUpdateForm(parse_json_body(request))
    if not form.is_valid():
        return form_error(form)
    data = form.cleaned_data
    event = event_service.update_study_event(
        pk,
        status=data["status"],
        notes=data["notes"] if "notes" in form.data else None,
        completion_date=data["completion_date"],
        user=request.user,
    )
    return json_ok(serialize_event(event))


@api_view("PUT", "POST")
@check_writer
def event_cancel(request, pk: int):
    return json_ok(serialize_event(event_service.cancel_study_event(pk)))
