"""Error Builders

Ergonomic constructors for typed errors. Each builder returns ``Err`` wrapping
an ``AppError`` with the matching code and context.
"""
from .types import AppError, ErrorCode, ErrorContext, Err


# =============================================================================
# Validation Errors (E2xxx)
# =============================================================================

def validation_error(
    message: str,
    *,
    code: ErrorCode = ErrorCode.E2000_VALIDATION_GENERIC,
    field: str | None = None,
    origin: str = "",
    **metadata,
) -> Err[AppError]:
    meta = {"field": field, **metadata}
    return Err(AppError(
        code=code,
        message=message,
        context=ErrorContext(origin=origin),
        metadata={k: v for k, v in meta.items() if v is not None},
    ))


def invalid_format(value: str, target: str, origin: str = "") -> Err[AppError]:
    return validation_error(
        f"Cannot coerce '{value}' to {target}",
        code=ErrorCode.E2002_INVALID_FORMAT,
        origin=origin,
        value=value,
        target=target,
    )


def invalid_type(value: object, target: str, origin: str = "") -> Err[AppError]:
    return validation_error(
        f"Cannot coerce {type(value).__name__} to {target}",
        code=ErrorCode.E2004_INVALID_TYPE,
        origin=origin,
        source_type=type(value).__name__,
        target=target,
    )


# =============================================================================
# Database Errors (E4xxx)
# =============================================================================

def db_error(
    message: str,
    *,
    code: ErrorCode = ErrorCode.E4000_DATABASE_GENERIC,
    table: str | None = None,
    origin: str = "",
    cause: Exception | None = None,
) -> Err[AppError]:
    return Err(AppError(
        code=code,
        message=message,
        context=ErrorContext(origin=origin),
        metadata={"table": table} if table else {},
        cause=cause,
    ))


def duplicate_key(table: str, origin: str = "") -> Err[AppError]:
    return db_error(f"Duplicate key in '{table}'", code=ErrorCode.E4011_DUPLICATE_KEY, table=table, origin=origin)


def db_connection_failed(reason: str = "", origin: str = "") -> Err[AppError]:
    msg = "Database connection failed"
    if reason:
        msg += f": {reason}"
    return db_error(msg, code=ErrorCode.E4001_CONNECTION_FAILED, origin=origin)


def transaction_failed(reason: str = "", origin: str = "") -> Err[AppError]:
    msg = "Database transaction failed"
    if reason:
        msg += f": {reason}"
    return db_error(msg, code=ErrorCode.E4003_TRANSACTION_FAILED, origin=origin)


def schema_mismatch(record: str, field: str, reason: str, origin: str = "") -> Err[AppError]:
    """A stored row cannot be mapped onto ``record``. Details stay in metadata."""
    return Err(AppError(
        code=ErrorCode.E4021_SCHEMA_MISMATCH,
        message="Stored record could not be loaded",
        context=ErrorContext(origin=origin),
        metadata={"record": record, "field": field, "reason": reason},
    ))


# =============================================================================
# Internal Errors (E9xxx)
# =============================================================================

def internal_error(message: str, *, origin: str = "", cause: Exception | None = None) -> Err[AppError]:
    return Err(AppError(
        code=ErrorCode.E9000_INTERNAL_GENERIC,
        message=message,
        context=ErrorContext(origin=origin),
        cause=cause,
    ))
