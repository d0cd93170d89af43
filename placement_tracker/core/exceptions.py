from typing import Optional

from placement_tracker.dependencies.error_code import ErrorCode, get_http_status


class TrackerError(Exception):
    """Base class for errors raised by the application lifecycle services."""

    default_code = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, code: Optional[ErrorCode] = None):
        self.message = message
        self.code = code or self.default_code
        super().__init__(message)

    @property
    def http_status(self) -> int:
        return get_http_status(self.code)


class ValidationError(TrackerError):
    default_code = ErrorCode.VALIDATION_ERROR


class NotFoundError(TrackerError):
    default_code = ErrorCode.RESOURCE_NOT_FOUND


class ConflictError(TrackerError):
    default_code = ErrorCode.RESOURCE_CONFLICT


class PersistenceError(TrackerError):
    default_code = ErrorCode.DATABASE_ERROR

    def __init__(self, message: str = "Database operation failed", original_error: Optional[Exception] = None):
        self.original_error = original_error
        super().__init__(message)
