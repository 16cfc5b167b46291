"""Record Hydrator

Turns an untyped row from the data store into a typed record. Each record
type declares an explicit, ordered table of ``FieldSpec`` descriptors; the
hydrator looks every declared field up in the row, coerces it, applies the
declared default and refuses to build the record when a required field is
still null.

Hydration is the trusted path: it sets identifiers and timestamps and does
not run the record setters. Call ``record.validate()`` afterwards to check
stored values against the current field contracts.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Protocol, Sequence, TypeVar

from core.errors import Err, Ok
from core.logging import validation_logger

from .coercion import CoercionRule, PassThrough, ToBool, ToComposite, ToFloat, ToInt, ToSerial, ToStr
from .errors import HydrationError

log = validation_logger()

RecordT = TypeVar("RecordT", bound="Hydratable")


class FieldType(Enum):
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    STR = "str"
    SERIAL = "serial"
    COMPOSITE = "composite"
    ANY = "any"


_RULES: dict[FieldType, CoercionRule] = {
    FieldType.INT: ToInt(),
    FieldType.FLOAT: ToFloat(),
    FieldType.BOOL: ToBool(),
    FieldType.STR: ToStr(),
    FieldType.SERIAL: ToSerial(),
    FieldType.COMPOSITE: ToComposite(),
    FieldType.ANY: PassThrough(),
}


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """One column of a record: name, declared type, nullability and default."""
    name: str
    type: FieldType = FieldType.ANY
    required: bool = False
    default: Any = None


class Hydratable(Protocol):
    TABLE_NAME: str
    FIELDS: Sequence[FieldSpec]

    def __init__(self, **values: Any) -> None: ...


def coerce_field(spec: FieldSpec, raw: Any) -> tuple[Any, bool]:
    """Coerce one raw value. Returns ``(value, coerced)``.

    ``coerced`` is False when a value was present but its rule rejected it.
    """
    if raw is None:
        return spec.default, True

    match _RULES[spec.type](raw):
        case Ok(value):
            return value, True
        case Err(_):
            return spec.default, False


def hydrate_values(record_name: str, fields: Sequence[FieldSpec], row: Mapping[str, Any]) -> dict[str, Any]:
    """Coerce ``row`` against ``fields`` into constructor keyword arguments."""
    values: dict[str, Any] = {}
    for spec in fields:
        value, coerced = coerce_field(spec, row.get(spec.name))
        if spec.required and value is None:
            reason = "missing" if coerced else "uncoercible"
            log.error("hydration_failed", record=record_name, field=spec.name, reason=reason)
            raise HydrationError(field=spec.name, reason=reason, record=record_name)
        values[spec.name] = value
    return values


def hydrate(record_cls: type[RecordT], row: Mapping[str, Any]) -> RecordT:
    """Build a ``record_cls`` from a raw row.

    Raises:
        HydrationError: a required field is missing or cannot be coerced.
    """
    values = hydrate_values(record_cls.__name__, record_cls.FIELDS, row)
    return record_cls(**values)
