"""Therapy sessions, exercise prescriptions, adverse events and issue logs."""

from core.service import exercise as exercise_service
from core.service import sessions as session_service
from monitoring.services import adverse_events as ae_service
from monitoring.services import issues as issue_service
from users.choices import GroupType, UserRole
from users.decorators import WRITE_ROLES, api_login_required, check_writer
from web_api import forms
from web_api.serializers import (
    serialize_adverse_event,
    serialize_control_session,
    serialize_exercise,
    serialize_intervention_session,
    serialize_issue,
)
from web_api.views.common import (
    api_view,
    ensure_role,
    form_error,
    json_ok,
    parse_bool_param,
    parse_int_param,
    parse_json_body,
    present_fields,
)

SESSION_KINDS = {
    GroupType.INTERVENTION: (
        forms.InterventionSessionForm,
        forms.InterventionSessionUpdateForm,
        serialize_intervention_session,
    ),
    GroupType.CONTROL: (
        forms.ControlSessionForm,
        forms.ControlSessionUpdateForm,
        serialize_control_session,
    ),
}


def _patient_filter(request):
    return parse_int_param(request.GET.get("patient_id"), name="patient_id", default=0, min_value=0) or None


# ---------- Sessions ----------


@api_view("POST")
@check_writer
def session_create(request, group_type: str):
    create_form, _update_form, serializer = SESSION_KINDS[group_type]
    form = create_form(parse_json_body(request))
    if not form.is_valid():
        return form_error(form)
    data = dict(form.cleaned_data)
    patient_id = data.pop("patient_id")
    session = session_service.log_session(group_type, patient_id, data, user=request.user)
    return json_ok(serializer(session), status=201)


@api_view("GET")
@api_login_required
def session_list(request, group_type: str, patient_id: int):
    _create_form, _update_form, serializer = SESSION_KINDS[group_type]
    return json_ok([serializer(item) for item in session_service.list_sessions(group_type, patient_id)])


@api_view("PUT", "DELETE")
@check_writer
def session_detail(request, group_type: str, pk: int):
    _create_form, update_form, serializer = SESSION_KINDS[group_type]
    if request.method == "DELETE":
        ensure_role(request, UserRole.ADMIN)
        session_service.delete_session(group_type, pk)
        return json_ok()

    payload = parse_json_body(request)
    form = update_form(payload)
    if not form.is_valid():
        return form_error(form)
    data = present_fields(form, payload)
    data.pop("patient_id", None)
    return json_ok(serializer(session_service.update_session(group_type, pk, data)))


# ---------- Exercises ----------


@api_view("POST")
@check_writer
def exercise_create(request):
    form = forms.ExerciseForm(parse_json_body(request))
    if not form.is_valid():
        return form_error(form)
    data = dict(form.cleaned_data)
    patient_id = data.pop("patient_id")
    exercise = exercise_service.prescribe_exercise(patient_id, data, user=request.user)
    return json_ok(serialize_exercise(exercise), status=201)


@api_view("GET")
@api_login_required
def exercise_list(request, patient_id: int):
    return json_ok([serialize_exercise(item) for item in exercise_service.list_exercises(patient_id)])


@api_view("PUT", "DELETE")
@check_writer
def exercise_detail(request, pk: int):
    if request.method == "DELETE":
        exercise_service.delete_exercise(pk)
        return json_ok()

    form = forms.ExerciseForm(parse_json_body(request))
    if not form.is_valid():
        return form_error(form)
    data = dict(form.cleaned_data)
    data.pop("patient_id")
    exercise = exercise_service.revise_exercise(pk, data, user=request.user)
    return json_ok(serialize_exercise(exercise), status=201)


# ---------- Adverse events ----------


@api_view("GET", "POST")
@api_login_required
def adverse_event_collection(request):
    if request.method == "POST":
        ensure_role(request, *WRITE_ROLES)
        form = forms.AdverseEventForm(parse_json_body(request))
        if not form.is_valid():
            return form_error(form)
        data = dict(form.cleaned_data)
        patient_id = data.pop("patient_id")
        event = ae_service.create_adverse_event(patient_id, data, user=request.user)
        return json_ok(serialize_adverse_event(event), status=201)

    events = ae_service.list_adverse_events(
        patient_id=_patient_filter(request),
        severity=request.GET.get("severity") or None,
    )
    return json_ok([serialize_adverse_event(event) for event in events])


@api_view("PUT", "DELETE")
@check_writer
def adverse_event_detail(request, pk: int):
    if request.method == "DELETE":
        ae_service.delete_adverse_event(pk)
        return json_ok()

    payload = parse_json_body(request)
    form = forms.AdverseEventUpdateForm(payload)
    if not form.is_valid():
        return form_error(form)
    return json_ok(serialize_adverse_event(ae_service.update_adverse_event(pk, present_fields(form, payload))))


# ---------- Issue logs ----------


@api_view("GET", "POST")
@api_login_required
def issue_collection(request):
    if request.method == "POST":
        ensure_role(request, *WRITE_ROLES)
        form = forms.IssueLogForm(parse_json_body(request))
        if not form.is_valid():
            return form_error(form)
        data = dict(form.cleaned_data)
        patient_id = data.pop("patient_id")
        issue = issue_service.create_issue(patient_id, data, user=request.user)
        return json_ok(serialize_issue(issue), status=201)

    issues = issue_service.list_issues(
        patient_id=_patient_filter(request),
        issue_type=request.GET.get("issue_type") or None,
        follow_up_required=parse_bool_param(request.GET.get("follow_up_required")),
    )
    return json_ok([serialize_issue(issue) for issue in issues])


@api_view("PUT", "DELETE")
@check_writer
def issue_detail(request, pk: int):
    if request.method == "DELETE":
        ensure_role(request, UserRole.ADMIN)
        issue_service.delete_issue(pk)
        return json_ok()

    payload = parse_json_body(request)
    form = forms.IssueLogUpdateForm(payload)
    if not form.is_valid():
        return form_error(form)
    return json_ok(serialize_issue(issue_service.update_issue(pk, present_fields(form, payload))))
