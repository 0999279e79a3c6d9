"""Patient enrollment, lifecycle and timeline endpoints."""

import logging

from core.service.events import get_patient_timeline
from users import choices
from users.decorators import WRITE_ROLES, api_login_required, check_admin, check_writer
from users.services import PatientService
from web_api.forms import DropoutForm, PatientForm, PatientUpdateForm
from web_api.serializers import serialize_event, serialize_page, serialize_patient
from web_api.views.common import (
    BadRequest,
    api_view,
    ensure_role,
    form_error,
    json_ok,
    parse_int_param,
    parse_json_body,
    present_fields,
)

logger = logging.getLogger(__name__)


@api_view("GET", "POST")
@api_login_required
def patient_collection(request):
    service = PatientService()
    if request.method == "POST":
        ensure_role(request, *WRITE_ROLES)
        form = PatientForm(parse_json_body(request))
        if not form.is_valid():
            return form_error(form)
        result = service.create_patient(form.cleaned_data, created_by=request.user)
        extra = {"warning": result.warning} if result.warning else {}
        return json_ok(serialize_patient(result.patient), status=201, **extra)

    params = request.GET
    page = service.list_patients(
        status=params.get("status") or None,
        group_type=params.get("group_type") or None,
        search=(params.get("search") or "").strip() or None,
        page=parse_int_param(params.get("page"), name="page", default=1, min_value=1),
        page_size=parse_int_param(params.get("page_size"), name="page_size", default=20, min_value=1, max_value=100),
    )
    return json_ok(serialize_page(page, serialize_patient))


@api_view("GET")
@api_login_required
def next_patient_code(request):
    group_type = request.GET.get("group_type", "")
    if group_type not in choices.GroupType.values:
        raise BadRequest("group_type must be intervention or control")
    return json_ok({"patient_code": PatientService().suggest_patient_code(group_type)})


@api_view("GET", "PUT", "DELETE")
@api_login_required
def patient_detail(request, pk: int):
    service = PatientService()
    if request.method == "GET":
        return json_ok(serialize_patient(service.get_patient(pk)))

    ensure_role(request, *WRITE_ROLES)
    if request.method == "DELETE":
        service.delete_patient(pk)
        return json_ok()

    payload = parse_json_body(request)
    form = PatientUpdateForm(payload)
    if not form.is_valid():
        return form_error(form)
    patient = service.update_patient(pk, present_fields(form, payload))
    return json_ok(serialize_patient(patient))


@api_view("POST")
@check_writer
def patient_dropout(request, pk: int):
    form = DropoutForm(parse_json_body(request))
    if not form.is_valid():
        return form_error(form)
    data = form.cleaned_data
    patient, cancelled = PatientService().drop_out_patient(
        pk,
        dropout_date=data["dropout_date"],
        reason=data["dropout_reason"],
        reason_type=data["dropout_reason_type"],
    )
    return json_ok(serialize_patient(patient), cancelled_events=cancelled)


@api_view("POST")
@check_writer
def patient_complete(request, pk: int):
    return json_ok(serialize_patient(PatientService().complete_patient(pk)))


@api_view("GET")
@api_login_required
def patient_timeline(request, pk: int):
    return json_ok([serialize_event(event) for event in get_patient_timeline(pk)])


@api_view("POST")
@check_admin
def retry_patient_schedule(request, pk: int):
    """Re-run a failed schedule generation for one patient."""

    from core.service.schedule import retry_failed_schedules

    patient = PatientService().get_patient(pk)
    succeeded, _failed = retry_failed_schedules([patient])
    patient.refresh_from_db()
    return json_ok(serialize_patient(patient), schedule_generated=bool(succeeded))
