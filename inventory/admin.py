from django.contrib import admin, messages

from inventory.models import ActigraphWatch, DeviceSet, SimCard, SimRechargeHistory
from inventory.service.device import return_device_set


@admin.register(DeviceSet)
class DeviceSetAdmin(admin.ModelAdmin):
    actions = ("return_selected",)
    list_display = (
        "set_number",
        "mars_device_id",
        "pluto_device_id",
        "laptop_number",
        "status",
        "assigned_patient",
        "expected_return_date",
    )
    search_fields = (
        "mars_device_id",
        "pluto_device_id",
        "laptop_number",
        "modem_serial",
        "assigned_patient__patient_code",
    )
    list_filter = ("status",)
    readonly_fields = ("status", "assigned_patient", "assignment_date", "return_date", "created_at", "updated_at")

    @admin.action(description="Return selected device sets")
    def return_selected(self, request, queryset):
        returned = 0
        for device in queryset.filter(status="in_use"):
            return_device_set(device.pk)
            returned += 1
        self.message_user(request, f"{returned} device set(s) returned.", messages.SUCCESS)


@admin.register(ActigraphWatch)
class ActigraphWatchAdmin(admin.ModelAdmin):
    list_display = ("name", "left_serial", "right_serial", "is_backup", "assigned_patient", "assignment_date")
    search_fields = ("name", "left_serial", "right_serial", "assigned_patient__patient_code")
    list_filter = ("is_backup",)
    raw_id_fields = ("assigned_patient",)


class SimRechargeHistoryInline(admin.TabularInline):
    model = SimRechargeHistory
    extra = 0
    fields = ("recharge_date", "duration_days", "expiry_date", "logged_by")
    readonly_fields = fields
    can_delete = False


@admin.register(SimCard)
class SimCardAdmin(admin.ModelAdmin):
    list_display = ("sim_number", "provider", "linked_device_set", "expiry_date", "is_active")
    search_fields = ("sim_number", "modem_number")
    list_filter = ("provider", "is_active")
    inlines = [SimRechargeHistoryInline]
