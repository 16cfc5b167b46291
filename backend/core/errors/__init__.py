"""Monadic Error Handling System

Key components:
- Result[T, E]: Monadic container for success/failure
- AppError: Base error type with context
- ErrorCode: Hierarchical error code taxonomy
- Builder functions: Ergonomic error construction
- DatabaseErrorMapper: SQLAlchemy exceptions to AppError

Usage:
    from core.errors import Ok, Err, Result, AppError

    match coerce_int("42"):
        case Ok(value):
            ...
        case Err(error):
            log.warning(error.message, code=error.code.name)
"""
from .types import (
    Result,
    Ok,
    Err,
    AppError,
    ErrorCode,
    ErrorContext,
)

from .builders import (
    validation_error,
    invalid_format,
    invalid_type,
    db_error,
    duplicate_key,
    db_connection_failed,
    transaction_failed,
    schema_mismatch,
    internal_error,
)

from .boundaries import DatabaseErrorMapper

from .handlers import (
    AppErrorException,
    GENERIC_FAILURE_MESSAGE,
    raise_result,
    user_message,
)

__all__ = [
    # Core types
    "Result",
    "Ok",
    "Err",
    "AppError",
    "ErrorCode",
    "ErrorContext",
    # Builders
    "validation_error",
    "invalid_format",
    "invalid_type",
    "db_error",
    "duplicate_key",
    "db_connection_failed",
    "transaction_failed",
    "schema_mismatch",
    "internal_error",
    # Boundary mapping
    "DatabaseErrorMapper",
    # Handlers
    "AppErrorException",
    "GENERIC_FAILURE_MESSAGE",
    "raise_result",
    "user_message",
]
