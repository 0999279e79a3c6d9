from django.db import models


class Severity(models.TextChoices):
    MINOR = "minor", "Minor"
    MODERATE = "moderate", "Moderate"
    SEVERE = "severe", "Severe"
    LIFE_THREATENING = "life_threatening", "Life threatening"


class ContactType(models.TextChoices):
    PHONE = "phone", "Phone"
    HOME_VISIT = "home_visit", "Home visit"


class IssueType(models.TextChoices):
    TECHNICAL = "technical", "Technical"
    MEDICAL = "medical", "Medical"
    SCHEDULING = "scheduling", "Scheduling"
    OTHER = "other", "Other"


class ReminderType(models.TextChoices):
    """Reminder kind; decides which reference column is filled."""

    STUDY_EVENT = "study_event", "Study event"
    SIM_RECHARGE = "sim_recharge", "SIM recharge"
    FOLLOW_UP = "follow_up", "Follow-up"
    GENERAL = "general", "General"
