"""Record Validation and Hydration

- Field validators: pure functions guarding each column's contract
- Text normalizer: whitespace/punctuation cleanup and filter pipeline
- Coercion rules: raw storage values to declared types, as ``Result``
- Hydrator: rows to typed records via explicit field descriptor tables
"""
from .errors import HydrationError, ValidationError, ValidationKind
from .normalizer import SanitizeOptions, normalize, sanitize
from .validators import (
    DATETIME_FORMAT,
    SERIAL_MAX,
    ellipsis_preserve_words,
    format_datetime,
    parse_datetime,
    round_half_away,
    validate_email,
    validate_enum,
    validate_price,
    validate_serial,
    validate_varchar,
)
from .coercion import (
    CoercionRule,
    PassThrough,
    ToBool,
    ToComposite,
    ToFloat,
    ToInt,
    ToSerial,
    ToStr,
    coerce_or_none,
    is_numeric,
)
from .hydration import FieldSpec, FieldType, hydrate, hydrate_values

__all__ = [
    # Errors
    "HydrationError",
    "ValidationError",
    "ValidationKind",
    # Normalizer
    "SanitizeOptions",
    "normalize",
    "sanitize",
    # Validators
    "DATETIME_FORMAT",
    "SERIAL_MAX",
    "ellipsis_preserve_words",
    "format_datetime",
    "parse_datetime",
    "round_half_away",
    "validate_email",
    "validate_enum",
    "validate_price",
    "validate_serial",
    "validate_varchar",
    # Coercion
    "CoercionRule",
    "PassThrough",
    "ToBool",
    "ToComposite",
    "ToFloat",
    "ToInt",
    "ToSerial",
    "ToStr",
    "coerce_or_none",
    "is_numeric",
    # Hydration
    "FieldSpec",
    "FieldType",
    "hydrate",
    "hydrate_values",
]
