from django.db import models


class DeviceStatus(models.TextChoices):
    """Device set lifecycle; only ``available`` sets can be assigned."""

    AVAILABLE = "available", "Available"
    IN_USE = "in_use", "In use"
    UNDER_MAINTENANCE = "under_maintenance", "Under maintenance"


class SimProvider(models.TextChoices):
    AIRTEL = "airtel", "Airtel"
    JIO = "jio", "Jio"
