"""Structured logging configuration for the nextmeal application."""

import json
import logging
import os
import sys
from contextvars import ContextVar, Token
from datetime import datetime, timezone
from typing import Any

# Context variables attached to every record logged while they are set
request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)
user_id_ctx: ContextVar[str | None] = ContextVar("user_id", default=None)
recipe_id_ctx: ContextVar[str | None] = ContextVar("recipe_id", default=None)

_CONTEXT_VARS: dict[str, ContextVar[str | None]] = {
    "request_id": request_id_ctx,
    "user_id": user_id_ctx,
    "recipe_id": recipe_id_ctx,
}

# Short labels and truncation for the human-readable format
_CONTEXT_LABELS: dict[str, tuple[str, int | None]] = {
    "request_id": ("req", 8),
    "user_id": ("user", None),
    "recipe_id": ("recipe", None),
}


def current_context() -> dict[str, str]:
    """Get the logging context variables that are currently set."""
    return {name: value for name, var in _CONTEXT_VARS.items() if (value := var.get())}


class StructuredJsonFormatter(logging.Formatter):
    """One JSON object per line, for log shippers."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **current_context(),
        }

        if extra_data := getattr(record, "extra_data", None):
            payload.update(extra_data)

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        payload["location"] = {
            "file": record.filename,
            "line": record.lineno,
            "function": record.funcName,
        }

        return json.dumps(payload, default=str)


class ContextualFormatter(logging.Formatter):
    """Single-line text format with the active context, for development."""

    def format(self, record: logging.LogRecord) -> str:
        parts = []
        for name, value in current_context().items():
            label, width = _CONTEXT_LABELS[name]
            parts.append(f"{label}={value[:width] if width else value}")
        context = f" [{', '.join(parts)}]" if parts else ""

        stamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
        line = f"{stamp} | {record.levelname:<8} | {record.name}{context} | {record.getMessage()}"

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class ContextLogger(logging.LoggerAdapter):
    """Logger adapter that copies the active context into each record's extra."""

    def process(self, msg: str, kwargs: dict) -> tuple[str, dict]:
        kwargs["extra"] = {**kwargs.get("extra", {}), **current_context()}
        return msg, kwargs


def get_logger(name: str) -> ContextLogger:
    """Get a context-aware logger for the given module name."""
    return ContextLogger(logging.getLogger(name), {})


def configure_logging(
    log_level: str = "INFO",
    json_format: bool | None = None,
    log_file: str | None = None,
) -> None:
    """
    Configure logging for the application.

    Args:
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            LOG_LEVEL in the environment takes precedence.
        json_format: Use JSON lines. If None, LOG_FORMAT=json or a non-interactive
            production environment turns it on.
        log_file: Optional file path to also write logs to.
    """
    if json_format is None:
        json_format = os.getenv("LOG_FORMAT", "").lower() == "json" or (
            not sys.stdout.isatty() and os.getenv("ENVIRONMENT", "development") == "production"
        )

    level_name = os.getenv("LOG_LEVEL", log_level).upper()
    level = getattr(logging, level_name, logging.INFO)

    formatter: logging.Formatter
    formatter = StructuredJsonFormatter() if json_format else ContextualFormatter()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    root = logging.getLogger()
    root.setLevel(level)
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(level)
        root.addHandler(handler)

    # SQL echo is noisy below WARNING
    logging.getLogger("nextmeal").setLevel(level)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    get_logger(__name__).info(
        f"Logging configured: level={level_name}, format={'json' if json_format else 'text'}"
    )


def set_context(**values: str | None) -> None:
    """Set logging context variables by name, ignoring None values."""
    for name, value in values.items():
        if value is not None:
            _CONTEXT_VARS[name].set(value)


def clear_context() -> None:
    """Clear all logging context variables."""
    for var in _CONTEXT_VARS.values():
        var.set(None)


class LoggingContext:
    """
    Context manager that sets logging context for a block.

    Variables left as None keep their outer value. On exit every variable this
    context set is restored, so contexts nest.
    """

    def __init__(
        self,
        request_id: str | None = None,
        user_id: str | None = None,
        recipe_id: str | None = None,
    ):
        self.values = {"request_id": request_id, "user_id": user_id, "recipe_id": recipe_id}
        self._tokens: dict[str, Token] = {}

    def __enter__(self) -> "LoggingContext":
        for name, value in self.values.items():
            if value is not None:
                self._tokens[name] = _CONTEXT_VARS[name].set(value)
        return self

    def __exit__(self, *args: Any) -> None:
        for name, token in self._tokens.items():
            _CONTEXT_VARS[name].reset(token)
        self._tokens.clear()
