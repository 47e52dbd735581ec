"""
Logging utilities for safe structured logging.

Converts identifiers, enums and payloads into short strings before they
reach ``extra={...}``, and flattens domain errors into log context.

Dependencies: logging (stdlib), tuning_backend.core.exceptions
System role: Logging helper functions
"""

import enum
import logging
from datetime import datetime
from typing import Any
from uuid import UUID

from tuning_backend.core.exceptions import TuningServiceError


def safe_log_value(value: Any, max_length: int = 200) -> str:
    """
    Convert a value to a short string for log context.

    Collections are summarized by size, never dumped; free text such as
    message bodies or problem descriptions is truncated.

    Args:
        value: Value to convert
        max_length: Maximum length before truncating

    Returns:
        str: Safe string representation
    """
    if value is None:
        return "None"
    if isinstance(value, enum.Enum):
        return str(value.value)
    if isinstance(value, (UUID, int, float, bool)):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (list, tuple, set, frozenset)):
        return f"{type(value).__name__}({len(value)} items)"
    if isinstance(value, dict):
        return f"dict({len(value)} keys)"

    text = value if isinstance(value, str) else repr(value)
    if len(text) > max_length:
        return text[:max_length] + f"... (truncated, {len(text)} total)"
    return text


def error_context(exc: BaseException) -> dict[str, str]:
    """
    Flatten an exception into log context.

    Domain errors contribute their stable code and details.
    """
    context = {"error_type": type(exc).__name__}
    if isinstance(exc, TuningServiceError):
        context["error_code"] = exc.code
        context["error_msg"] = exc.message
        for key, val in exc.details.items():
            context.setdefault(key, safe_log_value(val))
    else:
        context["error_msg"] = safe_log_value(str(exc))
    return context


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    **context: Any,
) -> None:
    """
    Log a message with structured context, safely converting all values.

    Args:
        logger: Logger instance
        level: Log level (logging.INFO, etc.)
        message: Log message
        **context: Arbitrary key-value pairs
    """
    safe_context = {key: safe_log_value(val) for key, val in context.items()}
    logger.log(level, message, extra=safe_context)


def log_exception_with_context(
    logger: logging.Logger,
    message: str,
    exc: BaseException,
    **context: Any,
) -> None:
    """
    Log an exception with traceback and its flattened error context.

    Args:
        logger: Logger instance
        message: Log message
        exc: Exception instance
        **context: Additional context
    """
    safe_context = {key: safe_log_value(val) for key, val in context.items()}
    safe_context.update(error_context(exc))
    logger.error(message, exc_info=exc, extra=safe_context)
