"""Exception Bridging and User-Facing Messages

Bridges ``Result``-returning code to code that raises, and decides what an
end user is allowed to see for each failure family.
"""
from __future__ import annotations

from typing import TypeVar

from core.logging import get_logger

from .types import AppError, Err, Ok, Result

log = get_logger("errors.handlers")

T = TypeVar("T")

GENERIC_FAILURE_MESSAGE = "An internal error occurred. Please try again later."


class AppErrorException(Exception):
    """Exception wrapper for AppError.

    Raised by the persistence gateway and repositories, which expose plain
    return values instead of ``Result``.
    """

    def __init__(self, error: AppError):
        self.error = error
        super().__init__(str(error))


def raise_result(result: Result[T, AppError]) -> T:
    """Unwrap a Result, raising AppErrorException on Err."""
    match result:
        case Ok(value):
            return value
        case Err(error):
            raise AppErrorException(error)


def user_message(exc: Exception) -> str:
    """Message that can be shown to the end user for a failed operation.

    Validation failures carry a field-specific message. Hydration failures
    and storage errors are caused by the data store, not by the user, so
    only a generic message is returned and the details are logged.
    """
    from core.validation.errors import HydrationError, ValidationError

    if isinstance(exc, ValidationError):
        return f"{exc.field}: {exc.message}" if exc.field else exc.message

    if isinstance(exc, AppErrorException) and exc.error.code.is_user_error:
        return exc.error.message

    if isinstance(exc, HydrationError):
        log.error("hydration_failure", field=exc.field, reason=exc.reason, record=exc.record)
    elif isinstance(exc, AppErrorException):
        log.error(
            "operation_failure",
            error_code=exc.error.code.name,
            message=exc.error.message,
            error_id=exc.error.error_id,
            origin=exc.error.context.origin,
        )
    else:
        log.error("unexpected_failure", error=str(exc), error_type=type(exc).__name__)
    return GENERIC_FAILURE_MESSAGE
