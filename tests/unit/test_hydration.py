"""
Tests for coercion rules and the record hydrator.

Checked invariants:
1. Coercion rules return Ok/Err, never raise
2. The boolean token list is fixed: 1/true/yes/on and 0/false/no/off/""
3. Required fields that end up null raise HydrationError
4. Optional fields degrade to null (or their default) without error
"""

import pytest

from core.errors import Err, ErrorCode, Ok
from core.validation import (
    FieldSpec,
    FieldType,
    HydrationError,
    PassThrough,
    ToBool,
    ToComposite,
    ToFloat,
    ToInt,
    ToSerial,
    ToStr,
    coerce_or_none,
    hydrate,
    is_numeric,
)


class Gadget:
    TABLE_NAME = "gadgets"
    FIELDS = (
        FieldSpec("id", FieldType.STR),
        FieldSpec("count", FieldType.INT, required=True),
        FieldSpec("ratio", FieldType.FLOAT, default=1.0),
        FieldSpec("active", FieldType.BOOL),
        FieldSpec("tags", FieldType.COMPOSITE),
        FieldSpec("extra"),
    )

    def __init__(self, **values):
        self.values = values


# =============================================================================
# Coercion rules
# =============================================================================


class TestIsNumeric:
    @pytest.mark.parametrize("value", ["42", " 7 ", "-3.5", "+1", ".5", "5.", "1e3", "2E-2", 3, 2.5])
    def test_numeric(self, value):
        assert is_numeric(value)

    @pytest.mark.parametrize("value", ["", "abc", "1,5", "0x1A", "nan", "inf", "1e", None, True, [1]])
    def test_not_numeric(self, value):
        assert not is_numeric(value)


class TestToInt:
    @pytest.mark.parametrize("raw, expected", [
        ("42", 42),
        ("  7 ", 7),
        ("-12", -12),
        ("3.9", 3),
        ("-2.5", -2),
        ("1e3", 1000),
        (5, 5),
        (2.7, 2),
    ])
    def test_numeric_values(self, raw, expected):
        assert ToInt()(raw) == Ok(expected)

    def test_large_digit_string_is_exact(self):
        assert ToInt()("18446744073709551615").unwrap() == 18446744073709551615

    @pytest.mark.parametrize("raw", ["abc", "", True, "1e999"])
    def test_rejected(self, raw):
        result = ToInt()(raw)
        assert result.is_err()
        assert result.unwrap_err().code is ErrorCode.E2002_INVALID_FORMAT


class TestToFloat:
    @pytest.mark.parametrize("raw, expected", [("2.5", 2.5), (".5", 0.5), ("10", 10.0), (3, 3.0)])
    def test_numeric_values(self, raw, expected):
        assert ToFloat()(raw) == Ok(expected)

    @pytest.mark.parametrize("raw", ["x", "nan", ""])
    def test_rejected(self, raw):
        assert ToFloat()(raw).is_err()


class TestToBool:
    @pytest.mark.parametrize("raw", ["1", "true", "TRUE", " yes ", "On", True, 1])
    def test_truthy(self, raw):
        assert ToBool()(raw) == Ok(True)

    @pytest.mark.parametrize("raw", ["0", "false", "No", "OFF", "", "  ", False, 0])
    def test_falsy(self, raw):
        assert ToBool()(raw) == Ok(False)

    @pytest.mark.parametrize("raw", ["maybe", "y", "n", "2", 2])
    def test_unknown_tokens(self, raw):
        result = ToBool()(raw)
        assert result.is_err()
        assert result.unwrap_err().code is ErrorCode.E2002_INVALID_FORMAT

    def test_wrong_type(self):
        result = ToBool()([1])
        assert result.unwrap_err().code is ErrorCode.E2004_INVALID_TYPE


class TestOtherRules:
    def test_to_str(self):
        assert ToStr()(7) == Ok("7")
        assert ToStr()("x") == Ok("x")

    def test_composite_passes_structures(self):
        assert ToComposite()({"a": 1}) == Ok({"a": 1})
        assert ToComposite()([1, 2]) == Ok([1, 2])

    def test_composite_rejects_scalars(self):
        result = ToComposite()("a,b")
        assert isinstance(result, Err)
        assert result.unwrap_err().code is ErrorCode.E2004_INVALID_TYPE

    def test_pass_through(self):
        marker = object()
        assert PassThrough()(marker).unwrap() is marker

    def test_serial_cleans_identifiers(self):
        assert ToSerial()("0007") == Ok("7")
        assert ToSerial()(12) == Ok("12")
        assert ToSerial()("18446744073709551615") == Ok("18446744073709551615")

    @pytest.mark.parametrize("value", ["abc", "", "18446744073709551616", "9" * 21])
    def test_serial_rejects_malformed(self, value):
        result = ToSerial()(value)
        assert isinstance(result, Err)
        assert result.unwrap_err().code is ErrorCode.E2002_INVALID_FORMAT

    @pytest.mark.parametrize("value", [True, 1.5, None])
    def test_serial_rejects_other_types(self, value):
        assert ToSerial()(value).unwrap_err().code is ErrorCode.E2004_INVALID_TYPE

    def test_coerce_or_none(self):
        assert coerce_or_none(ToInt(), "12") == 12
        assert coerce_or_none(ToInt(), "twelve") is None


# =============================================================================
# hydrate
# =============================================================================


class TestHydrate:
    """hydrate: descriptor-driven row to record mapping."""

    def test_coerces_each_declared_field(self):
        gadget = hydrate(Gadget, {"id": 7, "count": "3", "active": "on", "tags": ["a"], "extra": b"raw"})
        assert gadget.values == {
            "id": "7",
            "count": 3,
            "ratio": 1.0,
            "active": True,
            "tags": ["a"],
            "extra": b"raw",
        }

    def test_missing_optional_fields_are_null(self):
        gadget = hydrate(Gadget, {"count": 1})
        assert gadget.values["id"] is None
        assert gadget.values["active"] is None
        assert gadget.values["tags"] is None

    def test_default_applies_to_null(self):
        assert hydrate(Gadget, {"count": 1, "ratio": None}).values["ratio"] == 1.0
        assert hydrate(Gadget, {"count": 1, "ratio": "0.25"}).values["ratio"] == 0.25

    def test_uncoercible_optional_degrades(self):
        gadget = hydrate(Gadget, {"count": 1, "active": "maybe", "tags": "a,b", "ratio": "lots"})
        assert gadget.values["active"] is None
        assert gadget.values["tags"] is None
        assert gadget.values["ratio"] == 1.0

    def test_undeclared_columns_ignored(self):
        gadget = hydrate(Gadget, {"count": 1, "unexpected": "x"})
        assert "unexpected" not in gadget.values

    def test_missing_required(self):
        with pytest.raises(HydrationError) as exc_info:
            hydrate(Gadget, {"id": "1"})
        err = exc_info.value
        assert (err.field, err.reason, err.record) == ("count", "missing", "Gadget")

    def test_null_required(self):
        with pytest.raises(HydrationError) as exc_info:
            hydrate(Gadget, {"count": None})
        assert exc_info.value.reason == "missing"

    def test_uncoercible_required(self):
        with pytest.raises(HydrationError) as exc_info:
            hydrate(Gadget, {"count": "three"})
        assert exc_info.value.field == "count"
        assert exc_info.value.reason == "uncoercible"

    def test_hydration_error_maps_to_schema_mismatch(self):
        with pytest.raises(HydrationError) as exc_info:
            hydrate(Gadget, {})
        app_error = exc_info.value.to_app_error()
        assert app_error.code is ErrorCode.E4021_SCHEMA_MISMATCH
        assert "count" not in app_error.message
        assert app_error.metadata["field"] == "count"
