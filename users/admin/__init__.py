"""users admin package imports."""

from .patients import PatientAdmin
from .platform import AuditLogAdmin, StaffUserAdmin

__all__ = [
    "PatientAdmin",
    "StaffUserAdmin",
    "AuditLogAdmin",
]
