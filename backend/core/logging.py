"""Structured Logging for the Plumelet Backend

- Colored, human-readable dev output
- JSON structured production output
- Operation correlation IDs bound through contextvars
- Redaction of credentials (plaintext passwords and their hashes)
"""
import logging
import sys
from uuid import uuid4

import structlog
from structlog.types import EventDict, Processor

SENSITIVE_KEYS = frozenset({
    "password",
    "plain_password",
    "password_plain",
    "password_hash",
    "hashed_password",
    "secret",
    "token",
})


def _censor_sensitive_keys(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Processor that redacts credentials, including inside nested rows."""

    def _redact(obj, depth: int = 0):
        if depth > 5:
            return obj
        if isinstance(obj, dict):
            return {
                k: "[REDACTED]" if str(k).lower() in SENSITIVE_KEYS else _redact(v, depth + 1)
                for k, v in obj.items()
            }
        if isinstance(obj, list):
            return [_redact(item, depth + 1) for item in obj]
        return obj

    return _redact(event_dict)


def _add_service_info(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    event_dict.setdefault("service", "plumelet-backend")
    event_dict.setdefault("version", "0.1.0")
    return event_dict


def get_shared_processors() -> list[Processor]:
    """Processors used in both dev and prod configurations."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        _add_service_info,
        _censor_sensitive_keys,
    ]


def configure_logging(
    level: str = "INFO",
    json_logs: bool = False,
    log_sql: bool = False,
) -> None:
    """Configure the logging system.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: If True, output JSON format (for production). If False, colored console output.
        log_sql: If True, enable SQLAlchemy SQL statement logging.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    shared_processors = get_shared_processors()

    if json_logs:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.plain_traceback,
        )

    # Formatter for stdlib loggers (SQLAlchemy, aiosqlite)
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(log_level)

    logging.getLogger("aiosqlite").setLevel(logging.WARNING)

    sa_level = logging.DEBUG if log_sql else logging.WARNING
    logging.getLogger("sqlalchemy.engine").setLevel(sa_level)
    logging.getLogger("sqlalchemy.pool").setLevel(logging.WARNING)


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


def generate_correlation_id() -> str:
    return str(uuid4())[:8]


def bind_context(**kwargs) -> None:
    """Bind key-value pairs to the current logging context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


class LoggerRegistry:
    """Registry of pre-configured loggers for different application domains."""

    _loggers: dict[str, structlog.stdlib.BoundLogger] = {}

    @classmethod
    def get(cls, name: str) -> structlog.stdlib.BoundLogger:
        if name not in cls._loggers:
            cls._loggers[name] = get_logger(f"plumelet.{name}")
        return cls._loggers[name]


def db_logger() -> structlog.stdlib.BoundLogger:
    """Logger for the persistence gateway."""
    return LoggerRegistry.get("db")


def repo_logger() -> structlog.stdlib.BoundLogger:
    """Logger for repository operations."""
    return LoggerRegistry.get("repository")


def validation_logger() -> structlog.stdlib.BoundLogger:
    """Logger for hydration and validation events."""
    return LoggerRegistry.get("validation")
