from django.db import models

from inventory.choices import DeviceStatus
from users.models.base import TimeStampedModel


class DeviceSet(TimeStampedModel):
    """
    Robotic therapy bundle (MARS unit, PLUTO unit, laptop, modem) lent to one
    patient at a time.

    Rules:
    - ``assigned_patient`` is set if and only if ``status`` is ``in_use``.
    - A patient holds at most one ``in_use`` set.
    """

    set_number = models.PositiveIntegerField("Set number", unique=True)
    mars_device_id = models.CharField("MARS device ID", max_length=50, unique=True)
    pluto_device_id = models.CharField("PLUTO device ID", max_length=50, unique=True)
    laptop_number = models.CharField("Laptop", max_length=50, blank=True)
    modem_serial = models.CharField("Modem serial", max_length=50, blank=True)
    status = models.CharField(
        "Status",
        max_length=20,
        choices=DeviceStatus.choices,
        default=DeviceStatus.AVAILABLE,
        db_index=True,
    )
    assigned_patient = models.ForeignKey(
        "users.Patient",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="device_sets",
        verbose_name="Assigned patient",
    )
    assignment_date = models.DateTimeField("Assigned at", null=True, blank=True)
    expected_return_date = models.DateTimeField("Expected return", null=True, blank=True)
    return_date = models.DateTimeField("Returned at", null=True, blank=True)
    notes = models.TextField("Notes", blank=True)

    class Meta:
        db_table = "inventory_device_sets"
        verbose_name = "Device set"
        verbose_name_plural = "Device sets"
        ordering = ("set_number",)
        constraints = [
            models.CheckConstraint(
                condition=(
                    models.Q(status=DeviceStatus.IN_USE, assigned_patient__isnull=False)
                    | (~models.Q(status=DeviceStatus.IN_USE) & models.Q(assigned_patient__isnull=True))
                ),
                name="device_assigned_iff_in_use",
            ),
            models.UniqueConstraint(
                fields=["assigned_patient"],
                condition=models.Q(status=DeviceStatus.IN_USE),
                name="uniq_in_use_device_per_patient",
            ),
        ]

    def __str__(self) -> str:
        return f"Set {self.set_number}"

    @property
    def is_in_use(self) -> bool:
        return self.status == DeviceStatus.IN_USE
