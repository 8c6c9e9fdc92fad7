r"""Built-in interceptors for logging and request correlation."""

from __future__ import annotations

__all__ = ["CORRELATION_ID_HEADER", "CorrelationIdInterceptor", "LoggingInterceptor"]

import logging
from typing import TYPE_CHECKING

from restwire.interceptors.base import Interceptor
from restwire.utils.structured_logging import get_correlation_id, log_structured

if TYPE_CHECKING:
    import httpx

CORRELATION_ID_HEADER = "X-Correlation-ID"


class LoggingInterceptor(Interceptor):
    """Log every request, response and error of a client.

    Records carry the method, URL and status code as structured fields,
    so they render as JSON fields with ``StructuredFormatter``.

    Args:
        logger: The logger to write to. Defaults to the logger of this
            module.
        level: The level of request and response records. Errors are
            always logged at WARNING.
    """

    def __init__(self, logger: logging.Logger | None = None, level: int = logging.DEBUG) -> None:
        self.logger = logger if logger is not None else logging.getLogger(__name__)
        self.level = level

    def on_request(self, request: httpx.Request) -> httpx.Request:
        log_structured(
            self.logger,
            self.level,
            f"--> {request.method} {request.url}",
            method=request.method,
            url=str(request.url),
        )
        return request

    def on_response(self, response: httpx.Response) -> httpx.Response:
        log_structured(
            self.logger,
            self.level,
            f"<-- {response.status_code} {response.reason_phrase}",
            status_code=response.status_code,
        )
        return response

    def on_error(self, exc: Exception) -> None:
        log_structured(
            self.logger,
            logging.WARNING,
            f"Request attempt failed: {type(exc).__name__}: {exc}",
            error_type=type(exc).__name__,
        )


class CorrelationIdInterceptor(Interceptor):
    """Send the current correlation ID in a request header.

    Requests that already carry the header, and requests issued while no
    correlation ID is set, are left unchanged.

    Args:
        header_name: The request header to set.

    Example:
        ```pycon
        >>> import httpx
        >>> from restwire.interceptors import CorrelationIdInterceptor
        >>> from restwire.utils.structured_logging import clear_correlation_id, set_correlation_id
        >>> set_correlation_id("job-42")
        >>> request = CorrelationIdInterceptor().on_request(httpx.Request("GET", "https://example.com"))
        >>> request.headers["X-Correlation-ID"]
        'job-42'
        >>> clear_correlation_id()

        ```
    """

    def __init__(self, header_name: str = CORRELATION_ID_HEADER) -> None:
        self.header_name = header_name

    def on_request(self, request: httpx.Request) -> httpx.Request:
        correlation_id = get_correlation_id()
        if correlation_id is not None and self.header_name not in request.headers:
            request.headers[self.header_name] = correlation_id
        return request
