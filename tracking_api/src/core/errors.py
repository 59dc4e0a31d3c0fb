"""
Error taxonomy shared by repositories, services and routes.

Each error carries the HTTP status and machine-readable type code used by the
global exception handler in src.api.main when building the error envelope.
"""
from __future__ import annotations


class TrackingError(Exception):
    """Base class for all domain errors raised by the service."""

    status_code: int = 500
    error_type: str = "internal_error"

    def __init__(self, message: str = "An unexpected error occurred") -> None:
        super().__init__(message)
        self.message = message


class ValidationError(TrackingError):
    """Malformed or missing request input, or a violated service rule."""

    status_code = 400
    error_type = "validation_error"


class StorageError(TrackingError):
    """Statement execution, scan, or timeout failure in the relational store."""

    status_code = 500
    error_type = "storage_error"

    def __init__(self, message: str = "Storage operation failed") -> None:
        super().__init__(message)


class NotFoundError(StorageError):
    """No row matched the requested identifier."""

    status_code = 404
    error_type = "not_found"


class OrderClosedError(TrackingError):
    """The production order already has an end timestamp."""

    status_code = 409
    error_type = "order_closed"


class FatalStartupError(TrackingError):
    """The service cannot start (missing configuration or unreachable store)."""

    error_type = "fatal_startup_error"
