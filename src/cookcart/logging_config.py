"""Structured logging configuration for the cookcart application."""

import json
import logging
import os
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any

# Context variables for request tracking
request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)
list_id_ctx: ContextVar[str | None] = ContextVar("list_id", default=None)


class StructuredJsonFormatter(logging.Formatter):
    """JSON formatter for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if request_id := request_id_ctx.get():
            log_data["request_id"] = request_id
        if list_id := list_id_ctx.get():
            log_data["list_id"] = list_id

        if hasattr(record, "extra_data"):
            log_data.update(record.extra_data)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        log_data["location"] = {
            "file": record.filename,
            "line": record.lineno,
            "function": record.funcName,
        }

        return json.dumps(log_data)


class ContextualFormatter(logging.Formatter):
    """Human-readable formatter with context for development."""

    def format(self, record: logging.LogRecord) -> str:
        context_parts = []
        if request_id := request_id_ctx.get():
            context_parts.append(f"req={request_id[:8]}")
        if list_id := list_id_ctx.get():
            context_parts.append(f"list={list_id}")

        context_str = f" [{', '.join(context_parts)}]" if context_parts else ""

        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
        level = record.levelname.ljust(8)
        message = record.getMessage()

        formatted = f"{timestamp} | {level} | {record.name}{context_str} | {message}"

        if record.exc_info:
            formatted += "\n" + self.formatException(record.exc_info)

        return formatted


class ContextLogger(logging.LoggerAdapter):
    """Logger adapter that automatically includes context variables."""

    def process(self, msg: str, kwargs: dict) -> tuple[str, dict]:
        extra = kwargs.get("extra", {})

        if request_id := request_id_ctx.get():
            extra["request_id"] = request_id
        if list_id := list_id_ctx.get():
            extra["list_id"] = list_id

        kwargs["extra"] = extra
        return msg, kwargs


def get_logger(name: str) -> ContextLogger:
    """Get a context-aware logger for the given module name."""
    logger = logging.getLogger(name)
    return ContextLogger(logger, {})


def configure_logging(
    log_level: str = "INFO",
    json_format: bool | None = None,
) -> None:
    """
    Configure logging for the application.

    Args:
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Use JSON format for logs. If None, auto-detect based on environment.
    """
    if json_format is None:
        json_format = os.getenv("LOG_FORMAT", "").lower() == "json" or (
            not sys.stdout.isatty() and os.getenv("ENVIRONMENT", "development") == "production"
        )

    level_str = os.getenv("LOG_LEVEL", log_level).upper()
    level = getattr(logging, level_str, logging.INFO)

    if json_format:
        formatter: logging.Formatter = StructuredJsonFormatter()
    else:
        formatter = ContextualFormatter()

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # Logs go to stderr so CLI output on stdout stays clean JSON
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level)
    root_logger.addHandler(console_handler)

    module_levels = {
        "cookcart": level,
        "cookcart.plan": level,
        "httpx": logging.WARNING,
        "uvicorn": logging.INFO,
        "uvicorn.access": logging.WARNING,
    }

    for module_name, module_level in module_levels.items():
        logging.getLogger(module_name).setLevel(module_level)

    logger = get_logger(__name__)
    logger.info(
        f"Logging configured: level={level_str}, format={'json' if json_format else 'text'}"
    )


class LoggingContext:
    """Context manager for setting logging context."""

    def __init__(
        self,
        request_id: str | None = None,
        list_id: str | None = None,
    ):
        self.request_id = request_id
        self.list_id = list_id
        self._tokens: dict[str, Any] = {}

    def __enter__(self) -> "LoggingContext":
        if self.request_id is not None:
            self._tokens["request_id"] = request_id_ctx.set(self.request_id)
        if self.list_id is not None:
            self._tokens["list_id"] = list_id_ctx.set(self.list_id)
        return self

    def __exit__(self, *args: Any) -> None:
        for name, token in self._tokens.items():
            ctx_var = {
                "request_id": request_id_ctx,
                "list_id": list_id_ctx,
            }[name]
            ctx_var.reset(token)
