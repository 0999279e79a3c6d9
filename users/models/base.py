from django.db import models


class TimeStampedModel(models.Model):
    """
    Abstract base adding ``created_at`` / ``updated_at`` audit timestamps.

    Every study record inherits from it so exports and the audit trail can
    tell when a row first appeared and when it last changed.
    """

    created_at = models.DateTimeField(
        "Created at",
        auto_now_add=True,
        db_index=True,
    )
    updated_at = models.DateTimeField(
        "Updated at",
        auto_now=True,
    )

    class Meta:
        abstract = True
