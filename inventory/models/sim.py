from datetime import date

from django.db import models

from inventory.choices import SimProvider
from users.models.base import TimeStampedModel


class SimCard(TimeStampedModel):
    """
    Data SIM used by a device set modem.

    ``is_active=False`` is the soft-delete state; recharge history is kept.
    Expiry flags are derived on read, see :func:`inventory.service.sim.sim_expiry_flags`.
    """

    sim_number = models.CharField("SIM number", max_length=30, unique=True)
    provider = models.CharField("Provider", max_length=10, choices=SimProvider.choices)
    modem_number = models.CharField("Modem number", max_length=50, blank=True)
    linked_device_set = models.ForeignKey(
        "inventory.DeviceSet",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sim_cards",
        verbose_name="Device set",
    )
    recharge_date = models.DateField("Last recharge", null=True, blank=True)
    recharge_duration_days = models.PositiveIntegerField("Recharge duration (days)", null=True, blank=True)
    expiry_date = models.DateField("Expiry", null=True, blank=True, db_index=True)
    is_active = models.BooleanField("Active", default=True)

    class Meta:
        db_table = "inventory_sim_cards"
        verbose_name = "SIM card"
        verbose_name_plural = "SIM cards"
        ordering = ("sim_number",)

    def __str__(self) -> str:
        return self.sim_number

    def expiry_flags(self, today: date | None = None) -> tuple[bool, bool]:
        from inventory.service.sim import sim_expiry_flags

        return sim_expiry_flags(self.expiry_date, today)


class SimRechargeHistory(models.Model):
    """Append-only record of every recharge."""

    sim_card = models.ForeignKey(
        SimCard,
        on_delete=models.CASCADE,
        related_name="recharge_history",
    )
    recharge_date = models.DateField("Recharge date")
    duration_days = models.PositiveIntegerField("Duration (days)")
    expiry_date = models.DateField("Expiry")
    logged_by = models.ForeignKey(
        "users.CustomUser",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    created_at = models.DateTimeField("Created at", auto_now_add=True)

    class Meta:
        db_table = "inventory_sim_recharge_history"
        verbose_name = "SIM recharge"
        verbose_name_plural = "SIM recharge history"
        ordering = ("-recharge_date", "-id")

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.sim_card_id} {self.recharge_date}"
