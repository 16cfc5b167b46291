"""Monadic Error Handling Types

Result/Either types used wherever a failure is an expected outcome rather
than an exceptional one (coercion of raw storage values, database boundary
mapping). Exceptions are still raised at the edges: validators raise
``ValidationError`` and the hydrator raises ``HydrationError``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Generic, Iterator, NoReturn, TypeVar, Union, final
from uuid import uuid4

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E", bound="AppError")
F = TypeVar("F", bound="AppError")


class ErrorCode(Enum):
    """Hierarchical error code taxonomy.

    E2xxx: Validation errors (user input)
    E4xxx: Database / storage errors
    E9xxx: Internal/Unknown errors
    """
    # Validation (E2xxx)
    E2000_VALIDATION_GENERIC = 2000
    E2001_REQUIRED_FIELD_MISSING = 2001
    E2002_INVALID_FORMAT = 2002
    E2003_OUT_OF_RANGE = 2003
    E2004_INVALID_TYPE = 2004
    E2005_CONSTRAINT_VIOLATION = 2005
    E2006_TOO_LONG = 2006
    E2007_INVALID_NUMBER = 2007
    E2010_INVALID_EMAIL = 2010
    E2012_INVALID_DATE = 2012

    # Database (E4xxx)
    E4000_DATABASE_GENERIC = 4000
    E4001_CONNECTION_FAILED = 4001
    E4002_QUERY_FAILED = 4002
    E4003_TRANSACTION_FAILED = 4003
    E4010_NOT_FOUND = 4010
    E4011_DUPLICATE_KEY = 4011
    E4013_CHECK_CONSTRAINT = 4013
    E4021_SCHEMA_MISMATCH = 4021

    # Internal (E9xxx)
    E9000_INTERNAL_GENERIC = 9000

    @property
    def category(self) -> str:
        """Human-readable error category."""
        code = self.value
        if 2000 <= code < 3000:
            return "validation"
        if 4000 <= code < 5000:
            return "database"
        return "internal"

    @property
    def is_user_error(self) -> bool:
        """True when the failure stems from caller input and can be shown field by field."""
        return self.category == "validation"


@dataclass(frozen=True, slots=True)
class ErrorContext:
    """Immutable context for error tracing and debugging."""
    correlation_id: str = field(default_factory=lambda: str(uuid4())[:8])
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    origin: str = ""

    def with_origin(self, origin: str) -> ErrorContext:
        return ErrorContext(correlation_id=self.correlation_id, timestamp=self.timestamp, origin=origin)


@dataclass(frozen=True, slots=True)
class AppError:
    """Base application error with context.

    All errors carry:
    - Typed error code from taxonomy
    - Human-readable message
    - Structured metadata for debugging
    - Optional cause for error chaining
    """
    code: ErrorCode
    message: str
    context: ErrorContext = field(default_factory=ErrorContext)
    metadata: dict = field(default_factory=dict)
    cause: Exception | None = None

    @property
    def error_id(self) -> str:
        """Unique identifier for this error instance."""
        return f"{self.code.name}:{self.context.correlation_id}"

    def with_origin(self, origin: str) -> AppError:
        return AppError(code=self.code, message=self.message, context=self.context.with_origin(origin),
            metadata=self.metadata, cause=self.cause)

    def with_metadata(self, **kwargs) -> AppError:
        """Create new error with additional metadata."""
        return AppError(code=self.code, message=self.message, context=self.context,
            metadata={**self.metadata, **kwargs}, cause=self.cause)

    def to_dict(self) -> dict:
        return {
            "error": {
                "code": self.code.name,
                "code_num": self.code.value,
                "message": self.message,
                "category": self.code.category,
                "correlation_id": self.context.correlation_id,
                "timestamp": self.context.timestamp.isoformat(),
                "metadata": self.metadata,
            }
        }

    def __str__(self) -> str:
        return f"[{self.code.name}] {self.message} (correlation_id={self.context.correlation_id})"


@final
@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Success variant of Result."""
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    def map(self, f: Callable[[T], U]) -> Result[U, AppError]:
        return Ok(f(self.value))

    def and_then(self, f: Callable[[T], Result[U, AppError]]) -> Result[U, AppError]:
        return f(self.value)

    def __iter__(self) -> Iterator[T]:
        yield self.value


@final
@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failure variant of Result. Wraps an AppError."""
    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        raise ValueError(f"Called unwrap on Err: {self.error}")

    def unwrap_or(self, default: T) -> T:
        return default

    def unwrap_err(self) -> E:
        return self.error

    def map(self, f: Callable[[T], U]) -> Result[U, E]:
        return self  # type: ignore

    def and_then(self, f: Callable[[T], Result[U, E]]) -> Result[U, E]:
        return self  # type: ignore

    def __iter__(self) -> Iterator:
        return iter([])


Result = Union[Ok[T], Err[E]]
