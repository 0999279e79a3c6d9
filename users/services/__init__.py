"""Service entry points for the users app."""

from .auth import AuthService
from .patient import PatientService

__all__ = ["AuthService", "PatientService"]
