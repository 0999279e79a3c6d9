from django.db import models

from users import choices


class AuditLog(models.Model):
    """Append-only trail of API mutations made by staff users."""

    user = models.ForeignKey(
        "users.CustomUser",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="audit_logs",
    )
    table_name = models.CharField("Table", max_length=50)
    record_id = models.CharField("Record ID", max_length=64, blank=True)
    action = models.CharField("Action", max_length=10, choices=choices.AuditAction.choices)
    path = models.CharField("Path", max_length=255)
    ip_address = models.GenericIPAddressField("IP address", null=True, blank=True)
    new_values = models.JSONField("Payload", null=True, blank=True)
    created_at = models.DateTimeField("Created at", auto_now_add=True, db_index=True)

    class Meta:
        db_table = "users_audit_logs"
        verbose_name = "Audit log"
        verbose_name_plural = "Audit logs"
        ordering = ("-created_at",)

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.action} {self.table_name}#{self.record_id}"
