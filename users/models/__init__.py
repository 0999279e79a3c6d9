from .custom_user import CustomUser
from .patient import Patient
from .audit_log import AuditLog

__all__ = [
    "CustomUser",
    "Patient",
    "AuditLog",
]
