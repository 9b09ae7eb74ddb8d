"""Error taxonomy for batch operations."""

from enum import Enum

from pydantic import ValidationError


class ErrorKind(str, Enum):
    """Category of a failed operation."""
    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    ALREADY_EXISTS = "already_exists"
    INVALID_OPERATION = "invalid_operation"
    IO_ERROR = "io_error"
    CANCELLED = "cancelled"


class InvalidOperationError(ValueError):
    """An operation descriptor that cannot be executed as given."""


def classify_error(error: BaseException) -> ErrorKind:
    """Map an exception raised while executing an operation to an ErrorKind."""
    if isinstance(error, FileNotFoundError):
        return ErrorKind.NOT_FOUND
    if isinstance(error, PermissionError):
        return ErrorKind.PERMISSION_DENIED
    if isinstance(error, (FileExistsError, IsADirectoryError)):
        return ErrorKind.ALREADY_EXISTS
    if isinstance(error, (InvalidOperationError, ValidationError, ValueError)):
        return ErrorKind.INVALID_OPERATION
    return ErrorKind.IO_ERROR


def describe_error(error: BaseException) -> str:
    """Human readable message for an exception."""
    if isinstance(error, OSError) and error.strerror:
        if error.filename:
            return f"{error.strerror}: {error.filename}"
        return error.strerror
    return str(error) or type(error).__name__
