"""Field Validators

Pure functions enforcing one field's contract before a value enters a
record. Each returns the cleaned value or raises ``ValidationError``; none
of them touch shared state or perform I/O.

Every validator takes an optional ``field`` keyword that tags the raised
error, so setters can propagate it unchanged.
"""
from __future__ import annotations

import math
import re
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, localcontext
from enum import Enum
from typing import TypeVar

from .errors import ValidationError, ValidationKind
from .normalizer import ELLIPSIS, sanitize

EnumT = TypeVar("EnumT", bound=Enum)

SERIAL_MAX = "18446744073709551615"  # 2**64 - 1
SERIAL_MAX_DIGITS = len(SERIAL_MAX)

DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

_NON_DIGITS = re.compile(r"[^0-9]")
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f-\x9f]+")
_DATETIME_SHAPE = re.compile(r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}")

# Dot-atom local part (max 64) @ dot-separated hostname labels
_EMAIL_PATTERN = re.compile(
    r"(?=[^@]{1,64}@)"
    r"[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+(?:\.[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+)*"
    r"@"
    r"(?:[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?\.)+"
    r"[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?"
)

# A stable result is reached in one or two passes
_MAX_SANITIZE_PASSES = 3


def _fail(kind: ValidationKind, message: str, field: str | None) -> ValidationError:
    return ValidationError(kind=kind, message=message, field=field)


def validate_serial(raw: str | int, *, field: str | None = "id") -> str:
    """Clean an unsigned 64-bit identifier kept as a decimal string.

    Non-digits are dropped and leading zeros stripped (all zeros gives "0").
    The value is compared against 2**64 - 1 digit by digit, which equals
    numeric order for digit strings of the same length.
    """
    serial = _NON_DIGITS.sub("", str(raw).strip())
    if not serial:
        raise _fail(ValidationKind.EMPTY, "Serial cannot be empty", field)

    serial = serial.lstrip("0") or "0"

    if len(serial) > SERIAL_MAX_DIGITS:
        raise _fail(ValidationKind.TOO_LONG, f"Serial too long (max {SERIAL_MAX_DIGITS} digits)", field)
    if len(serial) == SERIAL_MAX_DIGITS and serial > SERIAL_MAX:
        raise _fail(ValidationKind.OUT_OF_RANGE, f"Serial exceeds the maximum allowed value ({SERIAL_MAX})", field)

    return serial


def validate_varchar(text: str, max_len: int, *, field: str | None = None) -> str:
    """Normalize free text and enforce a maximum length in code points.

    Values longer than ``max_len`` are rejected, never truncated. Sanitizing
    is repeated until the text stops changing so that validating an
    already-validated value returns it unchanged.
    """
    if text is None:
        raise _fail(ValidationKind.EMPTY, "Value cannot be empty", field)

    cleaned = sanitize(str(text), max_length=None)
    for _ in range(_MAX_SANITIZE_PASSES):
        again = sanitize(cleaned, max_length=None)
        if again == cleaned:
            break
        cleaned = again

    if not cleaned:
        raise _fail(ValidationKind.EMPTY, "Value cannot be empty", field)
    if len(cleaned) > max_len:
        raise _fail(ValidationKind.TOO_LONG, f"Value too long (max {max_len} chars)", field)

    return _CONTROL_CHARS.sub("", cleaned)


def round_half_away(value: float, digits: int) -> float:
    """Round to ``digits`` places, ties away from zero.

    Works on the shortest decimal representation of the float, so 2.675
    rounds to 2.68 even though its binary value is slightly below.
    """
    with localcontext() as ctx:
        ctx.prec = 400
        quantum = Decimal(1).scaleb(-digits)
        rounded = Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    return float(rounded)


def validate_price(value: float, digits: int = 2, *, field: str | None = "price") -> float:
    """Reject negative or non-finite amounts and round the rest."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise _fail(ValidationKind.INVALID_NUMBER, "Price must be a number", field)

    value = float(value)
    if not math.isfinite(value) or value < 0.0:
        raise _fail(ValidationKind.INVALID_NUMBER, "Price must be a non-negative finite number", field)

    return round_half_away(value, digits)


def validate_email(value: str, max_len: int = 255, *, field: str | None = "email") -> str:
    """Trim, check grammar and lower-case an email address."""
    email = "" if value is None else str(value).strip().replace(" ", "")

    if not email:
        raise _fail(ValidationKind.EMPTY, "Email cannot be empty", field)
    if len(email) > max_len:
        raise _fail(ValidationKind.TOO_LONG, f"Email too long (max {max_len} chars)", field)
    if not _EMAIL_PATTERN.fullmatch(email):
        raise _fail(ValidationKind.INVALID_EMAIL, "Invalid email address", field)

    email = _CONTROL_CHARS.sub("", email)
    return email.lower()


def parse_datetime(value: str, *, field: str | None = None) -> datetime:
    """Parse a stored ``YYYY-MM-DD HH:MM:SS`` timestamp as UTC."""
    if not isinstance(value, str) or not _DATETIME_SHAPE.fullmatch(value):
        raise _fail(ValidationKind.INVALID_DATETIME, f"Invalid datetime format: {value!r}", field)
    try:
        parsed = datetime.strptime(value, DATETIME_FORMAT)
    except ValueError as e:
        raise _fail(ValidationKind.INVALID_DATETIME, f"Invalid datetime: {e}", field) from e
    return parsed.replace(tzinfo=timezone.utc)


def format_datetime(dt: datetime) -> str:
    """Inverse of ``parse_datetime``. Aware values are converted to UTC first."""
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)
    return dt.strftime(DATETIME_FORMAT)


def validate_enum(value: str | EnumT, enum_cls: type[EnumT], *, field: str | None = None) -> EnumT:
    """Look up ``value`` among the member values of ``enum_cls``."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        valid = ", ".join(str(m.value) for m in enum_cls)
        raise _fail(
            ValidationKind.INVALID_ENUM_VALUE,
            f"Invalid value {value!r} (expected one of: {valid})",
            field,
        ) from None


def ellipsis_preserve_words(text: str, limit: int = 24) -> str:
    """Shorten ``text`` to ``limit`` code points without splitting a word."""
    if len(text) <= limit:
        return text
    cut = text[:limit]
    last_space = cut.rfind(" ")
    if last_space != -1:
        cut = cut[:last_space]
    return cut.rstrip() + ELLIPSIS
