from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models

from users import choices
from users.managers import CustomUserManager
from users.models.base import TimeStampedModel


class CustomUser(TimeStampedModel, AbstractBaseUser, PermissionsMixin):
    """
    Staff account for study coordinators.

    Login is by e-mail. Authorization is limited to the three static roles in
    :class:`users.choices.UserRole`; there is no per-object policy.
    """

    email = models.EmailField(
        "Email",
        unique=True,
        help_text="Login identifier.",
    )
    first_name = models.CharField("First name", max_length=50)
    last_name = models.CharField("Last name", max_length=50, blank=True)
    role = models.CharField(
        "Role",
        max_length=20,
        choices=choices.UserRole.choices,
        default=choices.UserRole.DATA_ENTRY,
    )
    is_active = models.BooleanField(
        "Active",
        default=True,
        help_text="Inactive accounts cannot log in.",
    )
    is_staff = models.BooleanField(
        "Admin site access",
        default=False,
    )

    objects = CustomUserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["first_name"]

    class Meta:
        verbose_name = "Staff user"
        verbose_name_plural = "Staff users"

    def __str__(self) -> str:
        return f"{self.display_name} ({self.get_role_display()})"

    def save(self, *args, **kwargs):
        if self.email:
            self.email = self.__class__.objects.normalize_email(self.email).lower()
        super().save(*args, **kwargs)

    @property
    def display_name(self) -> str:
        full_name = f"{self.first_name} {self.last_name}".strip()
        return full_name or self.email
