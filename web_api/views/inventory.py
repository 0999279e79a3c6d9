"""
Device sets, actigraph watches and SIM cards.

Registration and removal of device sets and SIMs is reserved for admins;
loans, swaps and recharges are open to therapists as well.
"""


from inventory.service import device as device_service
from inventory.service import sim as sim_service
from inventory.service import watch as watch_service
from users.choices import UserRole
from users.decorators import WRITE_ROLES, api_login_required, check_writer
from web_api.forms import (
    DeviceAssignForm,
    DeviceSetForm,
    DeviceSetUpdateForm,
    SimForm,
    SimRechargeForm,
    SimUpdateForm,
    WatchAssignForm,
    WatchForm,
    WatchUpdateForm,
)
from web_api.serializers import (
    serialize_device_set,
    serialize_recharge,
    serialize_sim,
    serialize_watch,
)
from web_api.views.common import (
    api_view,
    ensure_role,
    form_error,
    json_ok,
    parse_bool_param,
    parse_json_body,
    present_fields,
)


# ---------- Device sets ----------


@api_view("GET", "POST")
@api_login_required
def device_collection(request):
    if request.method == "POST":
        ensure_role(request, UserRole.ADMIN)
        form = DeviceSetForm(parse_json_body(request))
        if not form.is_valid():
            return form_error(form)
        device = device_service.create_device_set(form.cleaned_data)
        return json_ok(serialize_device_set(device), status=201)

    devices = device_service.list_device_sets(status=request.GET.get("status") or None)
    return json_ok([serialize_device_set(device) for device in devices])


@api_view("GET", "PUT", "DELETE")
@api_login_required
def device_detail(request, pk: int):
    if request.method == "GET":
        device = device_service.get_device_set(pk)
        data = serialize_device_set(device)
        data["sim_cards"] = [serialize_sim(sim) for sim in device.sim_cards.filter(is_active=True)]
        return json_ok(data)

    ensure_role(request, UserRole.ADMIN)
    if request.method == "DELETE":
        device_service.delete_device_set(pk)
        return json_ok()

    payload = parse_json_body(request)
    form = DeviceSetUpdateForm(payload)
    if not form.is_valid():
        return form_error(form)
    device = device_service.update_device_set(pk, present_fields(form, payload))
    return json_ok(serialize_device_set(device))


@api_view("POST")
@check_writer
def device_assign(request, pk: int):
    form = DeviceAssignForm(parse_json_body(request))
    if not form.is_valid():
        return form_error(form)
    device = device_service.assign_device_set(
        pk,
        form.cleaned_data["patient_id"],
        expected_return_date=form.cleaned_data["expected_return_date"],
    )
    return json_ok(serialize_device_set(device))


@api_view("POST")
@check_writer
def device_return(request, pk: int):
    return json_ok(serialize_device_set(device_service.return_device_set(pk)))


@api_view("POST")
@check_writer
def device_swap_actigraphs(request, pk: int):
    result = device_service.swap_device_actigraphs(pk)
    return json_ok(
        {
            "device": serialize_device_set(result.device),
            "old_watch": serialize_watch(result.old_watch),
            "new_watch": serialize_watch(result.new_watch),
        }
    )


# ---------- Watches ----------


@api_view("GET", "POST")
@api_login_required
def watch_collection(request):
    if request.method == "POST":
        ensure_role(request, *WRITE_ROLES)
        form = WatchForm(parse_json_body(request))
        if not form.is_valid():
            return form_error(form)
        return json_ok(serialize_watch(watch_service.create_watch(form.cleaned_data)), status=201)

    return json_ok([serialize_watch(watch) for watch in watch_service.list_watches()])


@api_view("PUT", "DELETE")
@check_writer
def watch_detail(request, pk: int):
    if request.method == "DELETE":
        watch_service.delete_watch(pk)
        return json_ok()

    payload = parse_json_body(request)
    form = WatchUpdateForm(payload)
    if not form.is_valid():
        return form_error(form)
    return json_ok(serialize_watch(watch_service.update_watch(pk, present_fields(form, payload))))


@api_view("POST")
@check_writer
def watch_assign(request, pk: int):
    form = WatchAssignForm(parse_json_body(request))
    if not form.is_valid():
        return form_error(form)
    return json_ok(serialize_watch(watch_service.assign_watch(pk, form.cleaned_data["patient_id"])))


@api_view("POST")
@check_writer
def watch_unassign(request, pk: int):
    return json_ok(serialize_watch(watch_service.unassign_watch(pk)))


@api_view("POST")
@check_writer
def watch_swap(request, pk: int):
    old_watch, new_watch = watch_service.swap_watch(pk)
    return json_ok({"old_watch": serialize_watch(old_watch), "new_watch": serialize_watch(new_watch)})


# ---------- SIM cards ----------


@api_view("GET", "POST")
@api_login_required
def sim_collection(request):
    if request.method == "POST":
        ensure_role(request, UserRole.ADMIN)
        form = SimForm(parse_json_body(request))
        if not form.is_valid():
            return form_error(form)
        return json_ok(serialize_sim(sim_service.create_sim(form.cleaned_data)), status=201)

    sims = sim_service.list_sims(
        provider=request.GET.get("provider") or None,
        expiring=parse_bool_param(request.GET.get("expiring")),
    )
    return json_ok([serialize_sim(sim) for sim in sims])


@api_view("GET")
@api_login_required
def sim_expiring(request):
    return json_ok([serialize_sim(sim) for sim in sim_service.expiring_sims()])


@api_view("GET", "PUT", "DELETE")
@api_login_required
def sim_detail(request, pk: int):
    if request.method == "GET":
        sim = sim_service.get_sim(pk)
        data = serialize_sim(sim)
        data["recharge_history"] = [
            serialize_recharge(item) for item in sim.recharge_history.order_by("-recharge_date", "-id")
        ]
        return json_ok(data)

    ensure_role(request, UserRole.ADMIN)
    if request.method == "DELETE":
        sim_service.deactivate_sim(pk)
        return json_ok()

    payload = parse_json_body(request)
    form = SimUpdateForm(payload)
    if not form.is_valid():
        return form_error(form)
    return json_ok(serialize_sim(sim_service.update_sim(pk, present_fields(form, payload))))


@api_view("POST")
@check_writer
def sim_recharge(request, pk: int):
    form = SimRechargeForm(parse_json_body(request))
    if not form.is_valid():
        return form_error(form)
    result = sim_service.recharge_sim(
        pk,
        form.cleaned_data["recharge_date"],
        form.cleaned_data["duration_days"],
        user=request.user,
    )
    return json_ok(
        serialize_sim(result.sim),
        history=serialize_recharge(result.history),
        reminder_created=result.reminder_created,
    )
