"""
Custom exceptions for the parcel record store.

Every error raised by the store carries a stable error code and a details
mapping so callers can report failures consistently.
"""

from typing import Any, Dict


class AppException(Exception):
    """Base application exception."""

    def __init__(self, message: str, error_code: str, details: Dict[str, Any] = None):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(message)


class ValidationError(AppException):
    """Raised when a caller supplies a malformed or unrecognized value."""

    def __init__(self, message: str = "Validation error", details: Dict[str, Any] = None):
        super().__init__(
            message=message,
            error_code="ERR_VALIDATION",
            details=details
        )


class NotFoundError(AppException):
    """Raised when requested resource is not found."""

    def __init__(self, resource: str, resource_id: Any = None):
        message = f"{resource} not found"
        if resource_id is not None:
            message = f"{resource} with ID {resource_id} not found"
        super().__init__(
            message=message,
            error_code="ERR_NOT_FOUND_001",
            details={"resource": resource, "id": resource_id}
        )


class ParcelNotFoundError(NotFoundError):
    """Raised when no parcel matches the requested number."""

    def __init__(self, number: int):
        super().__init__(resource="Parcel", resource_id=number)
        self.number = number


class InvalidStateError(AppException):
    """Raised when an operation is not allowed in the record's current state."""

    def __init__(self, message: str, details: Dict[str, Any] = None):
        super().__init__(
            message=message,
            error_code="ERR_STATE_001",
            details=details
        )


class PersistenceError(AppException):
    """Raised when the backing store fails to execute an operation."""

    def __init__(self, operation: str, reason: str):
        super().__init__(
            message=f"Failed to {operation}: {reason}",
            error_code="ERR_PERSISTENCE_001",
            details={"operation": operation}
        )
