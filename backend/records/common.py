"""Helpers shared by the domain records.

Records compose these with the field validators instead of inheriting from
a common base class.
"""
from __future__ import annotations

from datetime import datetime

from core.validation import FieldSpec, FieldType, parse_datetime, validate_varchar

ID_FIELD = FieldSpec("id", FieldType.SERIAL, required=True)
TIMESTAMP_FIELDS = (
    FieldSpec("created_at", FieldType.STR),
    FieldSpec("updated_at", FieldType.STR),
)


def stored_timestamp(value: str | None, field: str) -> datetime | None:
    """Parse a persisted timestamp; None while the record has not been stored."""
    if value is None:
        return None
    return parse_datetime(value, field=field)


def is_blank(value: str | None) -> bool:
    return value is None or not str(value).strip()


def optional_varchar(value: str | None, max_len: int, field: str) -> str | None:
    """Validate an optional text column. Blank input clears it."""
    if is_blank(value):
        return None
    return validate_varchar(value, max_len, field=field)
