"""Structured JSON logging for production observability.

Provides:
- JSON-formatted logs for log aggregation systems (ELK, Loki, etc.)
- Correlation ID and tenant (client/store) propagation into detached
  invalidation tasks
- Configurable log levels and formats

Usage:
    from storecache.observability.logging import configure_logging

    # In application startup
    configure_logging(json_format=True, level="INFO")

    # Context is automatically included in logs
    logger = logging.getLogger(__name__)
    logger.info("Invalidating")  # Includes correlation_id, client_id, store_id
"""

from __future__ import annotations

import contextvars
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

# Context variables for request correlation. asyncio tasks copy the current
# context when created, so values set by the triggering request carry over
# into fire-and-forget invalidations.
correlation_id_var: contextvars.ContextVar[str] = contextvars.ContextVar(
    "correlation_id", default=""
)
client_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("client_id", default="")
store_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("store_id", default="")

_CONTEXT_VARS: dict[str, contextvars.ContextVar[str]] = {
    "correlation_id": correlation_id_var,
    "client_id": client_id_var,
    "store_id": store_id_var,
}

# Standard LogRecord attributes, skipped when collecting extra fields
_STANDARD_ATTRS = {
    "name",
    "msg",
    "args",
    "created",
    "filename",
    "funcName",
    "levelname",
    "levelno",
    "lineno",
    "module",
    "msecs",
    "pathname",
    "process",
    "processName",
    "relativeCreated",
    "stack_info",
    "exc_info",
    "exc_text",
    "thread",
    "threadName",
    "taskName",
    "message",
}


class JsonFormatter(logging.Formatter):
    """JSON log formatter with correlation context support.

    Output format:
    {
        "timestamp": "2026-01-10T12:34:56.789Z",
        "level": "WARNING",
        "logger": "storecache.cache.results",
        "message": "[CACHE] invalidate-shift: Partial invalidation with 1 errors",
        "module": "results",
        "function": "log",
        "line": 42,
        "correlation_id": "xyz-789",
        "store_id": "store-9",
        "operation": "invalidate-shift",
        "errors": ["shift summary: ..."]
    }
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for name, var in _CONTEXT_VARS.items():
            value = var.get()
            if value:
                log_data[name] = value

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self.formatException(record.exc_info),
            }

        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS and not key.startswith("_"):
                try:
                    json.dumps(value)
                    log_data[key] = value
                except (TypeError, ValueError):
                    log_data[key] = str(value)

        return json.dumps(log_data, default=str, ensure_ascii=False)


class ConsoleFormatter(logging.Formatter):
    """Human-readable formatter for development.

    Output format:
    2026-01-10 12:34:56 | INFO | storecache.cache.results | [CACHE] ... | store=store-9
    """

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True) -> None:
        super().__init__()
        self.use_colors = use_colors and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        """Format log record for console output."""
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        level = record.levelname

        if self.use_colors:
            color = self.COLORS.get(level, "")
            level = f"{color}{level}{self.RESET}"

        message = record.getMessage()

        context_parts = []
        correlation_id = correlation_id_var.get()
        if correlation_id:
            context_parts.append(f"corr={correlation_id[:8]}")
        store_id = store_id_var.get()
        if store_id:
            context_parts.append(f"store={store_id}")

        context = f" | {' '.join(context_parts)}" if context_parts else ""

        result = f"{timestamp} | {level:8} | {record.name} | {message}{context}"

        errors = getattr(record, "errors", None)
        if errors:
            result += "".join(f"\n    - {error}" for error in errors)

        if record.exc_info:
            result += "\n" + self.formatException(record.exc_info)

        return result


def configure_logging(
    json_format: bool = True,
    level: str = "INFO",
    use_colors: bool = True,
) -> None:
    """Configure application-wide logging.

    Args:
        json_format: Use JSON format (recommended for production)
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        use_colors: Use ANSI colors in console format
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)

    if json_format:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(ConsoleFormatter(use_colors=use_colors))

    root_logger.addHandler(handler)

    # Reduce noise from third-party libraries
    logging.getLogger("redis").setLevel(logging.WARNING)


class LogContext:
    """Context manager for adding temporary log context.

    Usage:
        with LogContext(correlation_id="abc", store_id="store-9"):
            hooks.on_day_summary_updated("store-9", day)  # task inherits context
    """

    def __init__(self, **kwargs: str) -> None:
        unknown = set(kwargs) - set(_CONTEXT_VARS)
        if unknown:
            raise TypeError(f"Unknown log context fields: {', '.join(sorted(unknown))}")
        self.extra = kwargs
        self._tokens: dict[str, contextvars.Token[str]] = {}

    def __enter__(self) -> "LogContext":
        for name, value in self.extra.items():
            self._tokens[name] = _CONTEXT_VARS[name].set(value)
        return self

    def __exit__(self, *args: Any) -> None:
        for name, token in self._tokens.items():
            _CONTEXT_VARS[name].reset(token)
        self._tokens.clear()
