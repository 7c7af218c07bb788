"""Structured logging utilities."""

import logging
import sys
from typing import Any

LOGGER_NAME = "build_audit"


class StructuredFormatter(logging.Formatter):
    """Formatter that appends context fields as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        extra = ""
        fields = getattr(record, "extra_fields", None)
        if fields:
            extra = " " + " ".join(f"{k}={v}" for k, v in fields.items())

        return f"{super().format(record)}{extra}"


def configure_logging(
    level: str = "INFO",
    format_string: str | None = None,
    structured: bool = False,
) -> None:
    """Configure logging for build-audit.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_string: Custom format string
        structured: Use structured logging format
    """
    if format_string is None:
        if structured:
            format_string = "%(asctime)s %(levelname)s %(name)s %(message)s"
        else:
            format_string = "%(levelname)s: %(message)s"

    handler = logging.StreamHandler(sys.stderr)

    if structured:
        handler.setFormatter(StructuredFormatter(format_string))
    else:
        handler.setFormatter(logging.Formatter(format_string))

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper()))
    logger.handlers = [handler]
    logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a build-audit module.

    Args:
        name: Module name (will be prefixed with build_audit)

    Returns:
        Logger instance
    """
    if not name.startswith(LOGGER_NAME):
        name = f"{LOGGER_NAME}.{name}"
    return logging.getLogger(name)


class LoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that attaches context fields to every record."""

    def process(
        self, msg: str, kwargs: dict[str, Any]
    ) -> tuple[str, dict[str, Any]]:
        extra = kwargs.get("extra", {})
        extra["extra_fields"] = self.extra
        kwargs["extra"] = extra
        return msg, kwargs


def get_logger_with_context(name: str, **context: Any) -> LoggerAdapter:
    """Get a logger that tags every message with context fields.

    Example:
        log = get_logger_with_context("kmod", package="kernel-core")
        log.debug("skipping debug path file")
    """
    return LoggerAdapter(get_logger(name), context)
