r"""Structured logging utilities for machine-readable log output.

This module provides an opt-in JSON formatter and a context-local
correlation ID. The correlation ID is included in every structured log
record and, with ``CorrelationIdInterceptor``, sent to the server in the
``X-Correlation-ID`` request header, so client and server logs of the
same call can be joined.

Example:
    Enable structured logging for restwire:

    ```python
    import logging
    from restwire.utils.structured_logging import StructuredFormatter

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())

    logger = logging.getLogger("restwire")
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    ```

    Tag the requests of one unit of work:

    ```python
    from restwire.utils.structured_logging import set_correlation_id, clear_correlation_id

    set_correlation_id("order-123")
    try:
        response = client.get("https://api.example.com/orders/123")
    finally:
        clear_correlation_id()
    ```
"""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "clear_correlation_id",
    "get_correlation_id",
    "log_structured",
    "set_correlation_id",
]

import contextvars
import json
import logging
import time
from typing import Any

_correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "restwire_correlation_id", default=None
)

# Attributes of every LogRecord, which are not copied as extra fields
_RESERVED_ATTRIBUTES = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


def get_correlation_id() -> str | None:
    """Get the correlation ID of the current context.

    Returns:
        The current correlation ID, or None if not set.

    Example:
        ```pycon
        >>> from restwire.utils.structured_logging import (
        ...     clear_correlation_id,
        ...     get_correlation_id,
        ...     set_correlation_id,
        ... )
        >>> set_correlation_id("req-123")
        >>> get_correlation_id()
        'req-123'
        >>> clear_correlation_id()
        >>> get_correlation_id() is None
        True

        ```
    """
    return _correlation_id.get()


def set_correlation_id(correlation_id: str) -> None:
    """Set the correlation ID for the current context.

    The ID is stored in a context variable, so concurrent tasks and
    threads each see their own value.

    Args:
        correlation_id: The correlation ID to set (e.g., request ID).
    """
    _correlation_id.set(correlation_id)


def clear_correlation_id() -> None:
    """Clear the correlation ID of the current context."""
    _correlation_id.set(None)


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    Each record is rendered as one JSON object with the fields
    ``timestamp``, ``level``, ``logger``, ``message``, ``module``,
    ``function`` and ``line``, plus ``correlation_id`` when one is set,
    ``exception`` when the record carries exception info, and any field
    passed through the ``extra`` argument of the logging call.

    Example:
        ```pycon
        >>> import json
        >>> import logging
        >>> from restwire.utils.structured_logging import StructuredFormatter
        >>> record = logging.makeLogRecord(
        ...     {"name": "restwire", "msg": "sent", "levelname": "DEBUG", "status": 200}
        ... )
        >>> payload = json.loads(StructuredFormatter().format(record))
        >>> payload["message"], payload["status"]
        ('sent', 200)

        ```
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        correlation_id = get_correlation_id()
        if correlation_id is not None:
            log_data["correlation_id"] = correlation_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRIBUTES:
                log_data[key] = value

        return json.dumps(log_data, default=str)

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: ARG002, N802
        """Format the record timestamp as ISO 8601 with milliseconds."""
        return (
            time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created))
            + f".{int(record.msecs):03d}Z"
        )


def log_structured(logger: logging.Logger, level: int, message: str, **extra: Any) -> None:
    """Log a message with structured fields.

    Args:
        logger: Logger to use.
        level: Log level (e.g., logging.INFO).
        message: Log message.
        **extra: Additional structured fields to include in the record.
    """
    logger.log(level, message, extra=extra)
