"""Structured logging for sitebuild-core.

This module provides structured logging functions that attach key/value
context to every record, so resolver, handler and builder messages can be
correlated by source file, type tag or node path.

Example:
    >>> from sitebuild_core import log_info, log_error
    >>>
    >>> log_info("Build started", {
    ...     "source_id": "config.yaml",
    ...     "output_dir": "build",
    ... })
    >>>
    >>> try:
    ...     build()
    ... except Exception as e:
    ...     log_error(f"Build failed: {e}", {
    ...         "source_id": "config.yaml",
    ...         "error_type": type(e).__name__
    ...     })
"""

from __future__ import annotations

import logging
from typing import Any

from .types import LogContext

LOGGER_NAME = "sitebuild_core"

# Below DEBUG; used for per-node resolver chatter.
TRACE = 5
logging.addLevelName(TRACE, "TRACE")

_logger = logging.getLogger(LOGGER_NAME)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


def configure_logging(level: str = "info") -> None:
    """Configure root logging for command-line use.

    Args:
        level: Level name (trace, debug, info, warn, error).
    """
    level_name = level.upper()
    if level_name == "WARN":
        level_name = "WARNING"
    numeric = TRACE if level_name == "TRACE" else getattr(logging, level_name, logging.INFO)
    logging.basicConfig(level=numeric, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    _logger.setLevel(numeric)


def log_error(message: str, fields: dict[str, Any] | LogContext | None = None) -> None:
    """Log an ERROR level message with structured fields.

    Use this for failures that abort a build.

    Args:
        message: The log message.
        fields: Optional structured fields for context. Can be a dict
                or a LogContext instance.
    """
    _emit(logging.ERROR, message, fields)


def log_warn(message: str, fields: dict[str, Any] | LogContext | None = None) -> None:
    """Log a WARN level message with structured fields.

    Use this for degraded operation, e.g. a missing static directory.

    Args:
        message: The log message.
        fields: Optional structured fields for context.
    """
    _emit(logging.WARNING, message, fields)


def log_info(message: str, fields: dict[str, Any] | LogContext | None = None) -> None:
    """Log an INFO level message with structured fields.

    Use this for build lifecycle events (document loaded, page written).

    Args:
        message: The log message.
        fields: Optional structured fields for context.
    """
    _emit(logging.INFO, message, fields)


def log_debug(message: str, fields: dict[str, Any] | LogContext | None = None) -> None:
    """Log a DEBUG level message with structured fields.

    Args:
        message: The log message.
        fields: Optional structured fields for context.
    """
    _emit(logging.DEBUG, message, fields)


def log_trace(message: str, fields: dict[str, Any] | LogContext | None = None) -> None:
    """Log a TRACE level message with structured fields.

    Use this for very verbose logging, like per-node cache hits.
    This level is disabled unless explicitly configured.

    Args:
        message: The log message.
        fields: Optional structured fields for context.
    """
    _emit(TRACE, message, fields)


def _emit(level: int, message: str, fields: dict[str, Any] | LogContext | None) -> None:
    if not _logger.isEnabledFor(level):
        return
    fields_dict = _normalize_fields(fields)
    if fields_dict:
        suffix = " ".join(f"{k}={v}" for k, v in fields_dict.items())
        message = f"{message} [{suffix}]"
    _logger.log(level, message, extra={"fields": fields_dict or {}})


def _normalize_fields(
    fields: dict[str, Any] | LogContext | None,
) -> dict[str, str] | None:
    """Normalize fields to a dict of strings.

    Args:
        fields: Input fields as dict, LogContext, or None.

    Returns:
        Dict with string values, or None if no fields.
    """
    if fields is None:
        return None

    if isinstance(fields, LogContext):
        # Convert LogContext to dict, excluding None values
        return {k: str(v) for k, v in fields.model_dump().items() if v is not None}

    return {k: str(v) for k, v in fields.items()}


__all__ = [
    "LOGGER_NAME",
    "TRACE",
    "configure_logging",
    "log_error",
    "log_warn",
    "log_info",
    "log_debug",
    "log_trace",
]
