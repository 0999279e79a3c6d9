from django.db import models

from users.models.base import TimeStampedModel


class ActigraphWatch(TimeStampedModel):
    """
    A left/right actigraph pair tracked as one assignable unit.

    Unassigned pairs flagged ``is_backup`` form the pool used for the day-15
    swap. A pair is never a backup and assigned at the same time.
    """

    name = models.CharField("Name", max_length=50, unique=True)
    left_serial = models.CharField("Left serial", max_length=50)
    right_serial = models.CharField("Right serial", max_length=50)
    is_backup = models.BooleanField("Backup", default=False, db_index=True)
    assigned_patient = models.ForeignKey(
        "users.Patient",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="watches",
        verbose_name="Assigned patient",
    )
    assignment_date = models.DateTimeField("Assigned at", null=True, blank=True)

    class Meta:
        db_table = "inventory_actigraph_watches"
        verbose_name = "Actigraph watch"
        verbose_name_plural = "Actigraph watches"
        ordering = ("name",)
        constraints = [
            models.CheckConstraint(
                condition=~models.Q(is_backup=True, assigned_patient__isnull=False),
                name="watch_backup_not_assigned",
            ),
        ]

    def __str__(self) -> str:
        return self.name

    @property
    def is_assigned(self) -> bool:
        return self.assigned_patient_id is not None
