"""
Exception roots shared by every service module.

Each service defines its own subclasses (``DeviceNotFoundError``,
``WatchPoolExhaustedError`` ...) so callers can catch narrowly, while the API
layer maps the three roots below onto HTTP status codes.
"""


class ServiceError(Exception):
    """Business rule violation detected before any mutation."""

    status_code = 400


class NotFoundError(ServiceError):
    """Referenced patient/device/SIM/event does not exist."""

    status_code = 404


class ConflictError(ServiceError):
    """Uniqueness violation or invalid state transition."""

    status_code = 409


class PoolExhaustedError(ConflictError):
    """No backup item is available in an inventory pool."""


class FieldValidationError(ServiceError):
    """Input rejected on a specific field; ``errors`` maps field to messages."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.errors = {field: [message]}


def ensure_present(data: dict, fields) -> None:
    """Raise for the first of ``fields`` sent in ``data`` as ``None`` or ``""``."""

    for field in fields:
        if field in data and data[field] in (None, ""):
            raise FieldValidationError(field, "This field is required.")
