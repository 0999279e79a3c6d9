"""Enumerations shared by the study schedule models."""

from django.db import models


class EventType(models.TextChoices):
    ASSESSMENT = "assessment", "Assessment"
    DEVICE_INSTALL = "device_install", "Device installation"
    THERAPY = "therapy", "Therapy"
    PHONE_CALL = "phone_call", "Phone call"
    REMINDER = "reminder", "Reminder"
    HOME_VISIT = "home_visit", "Home visit"
    COMPLETION = "completion", "Completion"
    RETRIEVAL = "retrieval", "Retrieval"


class EventStatus(models.TextChoices):
    """``pending`` is the only non-terminal status."""

    PENDING = "pending", "Pending"
    COMPLETED = "completed", "Completed"
    SKIPPED = "skipped", "Skipped"
    CANCELLED = "cancelled", "Cancelled"
