"""Validation and Hydration Errors

Two exception families leave the validation core:

- ``ValidationError``: a single field failed its contract. Raised by the
  field validators and propagated unchanged by record setters. Recoverable
  by the caller; its message is safe to show next to the offending field.
- ``HydrationError``: a stored row could not be turned into a record because
  a required column is missing or cannot be coerced. This is a data
  integrity problem in the store, never a user mistake.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from core.errors import AppError, ErrorCode, schema_mismatch


class ValidationKind(str, Enum):
    """Machine-readable reason a field was rejected."""
    EMPTY = "empty"
    TOO_LONG = "too_long"
    OUT_OF_RANGE = "out_of_range"
    INVALID_NUMBER = "invalid_number"
    INVALID_EMAIL = "invalid_email"
    INVALID_DATETIME = "invalid_datetime"
    INVALID_ENUM_VALUE = "invalid_enum_value"

    @property
    def error_code(self) -> ErrorCode:
        return _KIND_CODES[self]


_KIND_CODES = {
    ValidationKind.EMPTY: ErrorCode.E2001_REQUIRED_FIELD_MISSING,
    ValidationKind.TOO_LONG: ErrorCode.E2006_TOO_LONG,
    ValidationKind.OUT_OF_RANGE: ErrorCode.E2003_OUT_OF_RANGE,
    ValidationKind.INVALID_NUMBER: ErrorCode.E2007_INVALID_NUMBER,
    ValidationKind.INVALID_EMAIL: ErrorCode.E2010_INVALID_EMAIL,
    ValidationKind.INVALID_DATETIME: ErrorCode.E2012_INVALID_DATE,
    ValidationKind.INVALID_ENUM_VALUE: ErrorCode.E2005_CONSTRAINT_VIOLATION,
}


@dataclass(eq=False)
class ValidationError(Exception):
    """A field value violated its contract."""
    kind: ValidationKind
    message: str
    field: str | None = None

    def __post_init__(self):
        self.kind = ValidationKind(self.kind)
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.field:
            return f"{self.field}: {self.message} ({self.kind.value})"
        return f"{self.message} ({self.kind.value})"

    def with_field(self, field: str) -> ValidationError:
        """Copy of this error tagged with ``field``."""
        return ValidationError(kind=self.kind, message=self.message, field=field)

    def to_app_error(self) -> AppError:
        """Convert to AppError for the error handling system."""
        metadata = {"kind": self.kind.value}
        if self.field:
            metadata["field"] = self.field
        return AppError(code=self.kind.error_code, message=self.message, metadata=metadata)


@dataclass(eq=False)
class HydrationError(Exception):
    """A stored row cannot be mapped onto a record.

    ``reason`` is ``"missing"`` when the column is absent or null and
    ``"uncoercible"`` when a value is present but has the wrong shape.
    """
    field: str
    reason: str
    record: str = ""

    def __post_init__(self):
        super().__init__(f"{self.record or 'record'}.{self.field}: {self.reason}")

    def to_app_error(self) -> AppError:
        """Convert to AppError. The message carries no field detail."""
        return schema_mismatch(self.record, self.field, self.reason, origin="hydration").error
