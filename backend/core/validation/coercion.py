"""Coercion Rules for Raw Storage Values

Rows coming out of the data store are loosely typed: identifiers and
numbers may arrive as strings, booleans as "1"/"0". Each rule converts one
raw value to its declared type and returns a ``Result``; the hydrator turns
an ``Err`` into null and decides whether that is acceptable.
"""
from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from core.errors import AppError, Ok, Result, invalid_format, invalid_type

from .errors import ValidationError
from .validators import validate_serial

T = TypeVar("T")

_NUMERIC = re.compile(r"\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*")
_INTEGER = re.compile(r"\s*[+-]?\d+\s*")


def is_numeric(value: Any) -> bool:
    """True for ints, floats and numeric strings. Booleans do not count."""
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    return isinstance(value, str) and _NUMERIC.fullmatch(value) is not None


@dataclass(frozen=True, slots=True)
class CoercionRule(ABC, Generic[T]):
    """Base class for coercion rules."""

    @property
    @abstractmethod
    def target(self) -> str:
        """Name of the produced type, used in error messages."""

    @abstractmethod
    def coerce(self, value: Any) -> Result[T, AppError]:
        """Coerce value to the target type."""

    def __call__(self, value: Any) -> Result[T, AppError]:
        return self.coerce(value)


@dataclass(frozen=True, slots=True)
class ToInt(CoercionRule[int]):
    """Numeric value to int. A fractional part is truncated."""

    @property
    def target(self) -> str:
        return "int"

    def coerce(self, value: Any) -> Result[int, AppError]:
        if not is_numeric(value):
            return invalid_format(str(value), self.target, origin="coercion")
        if isinstance(value, str):
            if _INTEGER.fullmatch(value):
                return Ok(int(value))
            value = float(value)
        try:
            return Ok(int(value))
        except (OverflowError, ValueError):
            return invalid_format(str(value), self.target, origin="coercion")


@dataclass(frozen=True, slots=True)
class ToFloat(CoercionRule[float]):
    """Numeric value to float."""

    @property
    def target(self) -> str:
        return "float"

    def coerce(self, value: Any) -> Result[float, AppError]:
        if not is_numeric(value):
            return invalid_format(str(value), self.target, origin="coercion")
        return Ok(float(value))


@dataclass(frozen=True, slots=True)
class ToBool(CoercionRule[bool]):
    """Permissive boolean parse.

    Truthy: "1", "true", "yes", "on"
    Falsy: "0", "false", "no", "off", ""
    Matching is case-insensitive after trimming. Native bools pass through.
    """
    true_values: frozenset[str] = frozenset({"1", "true", "yes", "on"})
    false_values: frozenset[str] = frozenset({"0", "false", "no", "off", ""})

    @property
    def target(self) -> str:
        return "bool"

    def coerce(self, value: Any) -> Result[bool, AppError]:
        if isinstance(value, bool):
            return Ok(value)
        if not isinstance(value, (str, int)):
            return invalid_type(value, self.target, origin="coercion")

        token = str(value).strip().lower()
        if token in self.true_values:
            return Ok(True)
        if token in self.false_values:
            return Ok(False)
        return invalid_format(str(value), self.target, origin="coercion")


@dataclass(frozen=True, slots=True)
class ToStr(CoercionRule[str]):
    @property
    def target(self) -> str:
        return "str"

    def coerce(self, value: Any) -> Result[str, AppError]:
        return Ok(str(value))


@dataclass(frozen=True, slots=True)
class ToComposite(CoercionRule[Any]):
    """Structured values (dict, list, tuple) pass through; scalars do not."""

    @property
    def target(self) -> str:
        return "composite"

    def coerce(self, value: Any) -> Result[Any, AppError]:
        if isinstance(value, (dict, list, tuple)):
            return Ok(value)
        return invalid_type(value, self.target, origin="coercion")


@dataclass(frozen=True, slots=True)
class ToSerial(CoercionRule[str]):
    """Stored identifier to a cleaned digit string in [0, 2**64 - 1]."""

    @property
    def target(self) -> str:
        return "serial"

    def coerce(self, value: Any) -> Result[str, AppError]:
        if isinstance(value, bool) or not isinstance(value, (str, int)):
            return invalid_type(value, self.target, origin="coercion")
        try:
            return Ok(validate_serial(value))
        except ValidationError:
            return invalid_format(str(value), self.target, origin="coercion")


@dataclass(frozen=True, slots=True)
class PassThrough(CoercionRule[Any]):
    @property
    def target(self) -> str:
        return "any"

    def coerce(self, value: Any) -> Result[Any, AppError]:
        return Ok(value)


def coerce_or_none(rule: CoercionRule[T], value: Any) -> T | None:
    """Apply ``rule`` and return None on failure."""
    return rule(value).unwrap_or(None)
