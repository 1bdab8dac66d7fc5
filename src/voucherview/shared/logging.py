"""
Structured logging for VoucherView.

Modules log through ``logging.getLogger(__name__)`` under the ``voucherview``
logger. ``setup_structured_logger`` configures that logger once per entry
point; the ``log_operation_*`` helpers attach operation name, error code and
context as record attributes so both the rich console and the JSON formatter
can show them.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

import orjson
from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

from voucherview.shared.errors import ErrorContext, VoucherViewError

PACKAGE_LOGGER = "voucherview"

# Record attributes copied into JSON output when present
STRUCTURED_FIELDS = ("operation", "error_code", "context", "duration_ms", "result_info")

CONSOLE_THEME = Theme(
    {
        "logging.level.debug": "cyan",
        "logging.level.info": "green",
        "logging.level.warning": "yellow",
        "logging.level.error": "red bold",
        "logging.level.critical": "red bold reverse",
        "log.time": "dim cyan",
    }
)

ContextLike = dict[str, Any] | ErrorContext | None


class StructuredFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in STRUCTURED_FIELDS:
            if hasattr(record, field):
                entry[field] = getattr(record, field)
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return orjson.dumps(entry, default=str).decode("utf-8")


def setup_structured_logger(
    name: str = PACKAGE_LOGGER,
    level: str = "INFO",
    log_file: str | None = None,
    *,
    use_rich_console: bool = True,
) -> logging.Logger:
    """
    Configure ``name`` for an entry point, replacing earlier handlers.

    Console output goes to stderr, through rich or as JSON lines. A log file,
    when given, always receives JSON lines.

    Args:
        name: Logger to configure
        level: Level name such as ``"DEBUG"``
        log_file: Optional JSON-lines file
        use_rich_console: Rich console handler instead of JSON on stderr

    Returns:
        The configured logger
    """
    numeric_level = getattr(logging, level.upper())
    logger = logging.getLogger(name)
    logger.handlers.clear()
    logger.setLevel(numeric_level)
    logger.propagate = False

    console: logging.Handler
    if use_rich_console:
        console = RichHandler(
            console=Console(theme=CONSOLE_THEME, stderr=True),
            markup=False,
            rich_tracebacks=True,
            log_time_format="[%H:%M:%S]",
        )
    else:
        console = logging.StreamHandler()
        console.setFormatter(StructuredFormatter())
    console.setLevel(numeric_level)
    logger.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(StructuredFormatter())
        logger.addHandler(file_handler)

    return logger


def _context_dict(*sources: ContextLike) -> dict[str, Any]:
    merged: dict[str, Any] = {}
    for source in sources:
        if isinstance(source, ErrorContext):
            merged.update(source.safe_dict())
        elif source:
            merged.update(source)
    return merged


def log_operation_error(
    logger: logging.Logger,
    error: VoucherViewError,
    operation: str | None = None,
    context: ContextLike = None,
    *,
    level: int = logging.ERROR,
) -> None:
    """
    Log ``error`` with its code and masked context.

    Args:
        logger: Logger to write to
        error: The error
        operation: Overrides the operation recorded in the error context
        context: Extra fields merged over the error's context
        level: ERROR by default; recoverable failures use WARNING
    """
    logger.log(
        level,
        error.message,
        exc_info=error.original_error,
        extra={
            "error_code": error.code.name,
            "operation": operation or error.context.operation,
            "context": _context_dict(error.context, context),
        },
    )


def log_operation_success(
    logger: logging.Logger,
    operation: str,
    duration_ms: float,
    result_info: dict[str, Any] | None = None,
    context: ContextLike = None,
) -> None:
    """Record a finished operation and its timing at DEBUG."""
    logger.debug(
        "%s finished in %.1f ms",
        operation,
        duration_ms,
        extra={
            "operation": operation,
            "duration_ms": duration_ms,
            "result_info": result_info or {},
            "context": _context_dict(context),
        },
    )


def log_operation_start(
    logger: logging.Logger,
    operation: str,
    context: dict[str, Any] | None = None,
) -> None:
    logger.debug("%s started", operation, extra={"operation": operation, "context": context or {}})
