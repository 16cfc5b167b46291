"""Error Boundary Mappers

The persistence gateway is the only module that talks to SQLAlchemy; its
exceptions are mapped to ``AppError`` here so nothing above the gateway has
to know about driver-specific failures.
"""
from __future__ import annotations

from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError

from .types import AppError, ErrorCode, ErrorContext
from .builders import (
    db_connection_failed,
    duplicate_key,
    internal_error,
    transaction_failed,
)


class DatabaseErrorMapper:
    """Maps SQLAlchemy exceptions to application errors."""

    def __init__(self, origin: str = "database"):
        self.origin = origin

    def map_exception(self, exc: Exception, table: str = "record") -> AppError:
        if isinstance(exc, IntegrityError):
            return self._map_integrity_error(exc, table)
        if isinstance(exc, OperationalError):
            return self._map_operational_error(exc)
        if isinstance(exc, SQLAlchemyError):
            return transaction_failed(str(exc), origin=self.origin).error.with_metadata(table=table)

        return internal_error(f"Database error: {exc}", origin=self.origin, cause=exc).error

    def _map_integrity_error(self, exc: IntegrityError, table: str) -> AppError:
        message = str(exc.orig) if exc.orig else str(exc)

        if "duplicate" in message.lower() or "unique constraint" in message.lower():
            return duplicate_key(table, origin=self.origin).error

        return AppError(
            code=ErrorCode.E4013_CHECK_CONSTRAINT,
            message=f"Constraint violation: {message}",
            context=ErrorContext(origin=self.origin),
            metadata={"table": table},
            cause=exc,
        )

    def _map_operational_error(self, exc: OperationalError) -> AppError:
        message = str(exc.orig) if exc.orig else str(exc)

        if "connect" in message.lower():
            return db_connection_failed(message, origin=self.origin).error

        return transaction_failed(message, origin=self.origin).error
