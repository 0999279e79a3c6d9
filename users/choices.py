from django.db import models


class UserRole(models.TextChoices):
    """Static staff roles. ``CustomUser.role``."""

    ADMIN = "admin", "Administrator"
    THERAPIST = "therapist", "Therapist"
    DATA_ENTRY = "data_entry", "Data entry"


class GroupType(models.TextChoices):
    """Randomised study arm. ``Patient.group_type``."""

    INTERVENTION = "intervention", "Intervention"
    CONTROL = "control", "Control"


class VcgAssignment(models.TextChoices):
    """Control-arm manual exercise protocol."""

    VCG2 = "VCG2", "VCG 2"
    VCG3 = "VCG3", "VCG 3"
    VCG4_5 = "VCG4_5", "VCG 4-5"


class AffectedHand(models.TextChoices):
    LEFT = "left", "Left"
    RIGHT = "right", "Right"


class Gender(models.TextChoices):
    MALE = "male", "Male"
    FEMALE = "female", "Female"
    OTHER = "other", "Other"


class PatientStatus(models.TextChoices):
    """Lifecycle status; ``dropped_out`` and ``completed`` are terminal."""

    ACTIVE = "active", "Active"
    DROPPED_OUT = "dropped_out", "Dropped out"
    COMPLETED = "completed", "Completed"


class ScheduleStatus(models.TextChoices):
    """Outcome of the best-effort study schedule generation."""

    PENDING = "pending", "Pending"
    GENERATED = "generated", "Generated"
    FAILED = "failed", "Failed"


class AuditAction(models.TextChoices):
    CREATE = "create", "Create"
    UPDATE = "update", "Update"
    DELETE = "delete", "Delete"
