r"""Exceptions raised by the restwire library.

Only configuration errors are raised by the request methods themselves.
HTTP-level failures and exhausted transport retries are reported on the
returned ``RestResponse``; ``RestResponse.raise_for_error`` converts such
an envelope into an ``HttpRequestError`` for callers who prefer
exceptions.
"""

from __future__ import annotations

__all__ = [
    "ConfigurationError",
    "HttpRequestError",
    "RestwireError",
    "UnsupportedMethodError",
]

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from restwire.response import RestResponse


class RestwireError(Exception):
    """Base class of all the exceptions raised by restwire."""


class ConfigurationError(RestwireError, ValueError):
    """Raised when a request cannot be built from the given parameters.

    Examples are a missing URL, an unsupported HTTP method, or a body
    whose shape does not match the declared content type. These errors
    are raised before any network attempt and are never retried.
    """


class UnsupportedMethodError(ConfigurationError):
    """Raised when an HTTP method name is not supported.

    Args:
        method: The rejected method name.

    Example:
        ```pycon
        >>> from restwire.exceptions import UnsupportedMethodError
        >>> str(UnsupportedMethodError("OPTIONS"))
        'HTTP method OPTIONS is not supported'

        ```
    """

    def __init__(self, method: str) -> None:
        super().__init__(f"HTTP method {method} is not supported")
        self.method = method


class HttpRequestError(RestwireError):
    """Raised when a failed response is converted into an exception.

    Args:
        method: The HTTP method of the failed request.
        url: The URL of the failed request.
        message: A human readable description of the failure.
        status_code: The HTTP status code of the response, if any.
        response: The envelope that described the failure.
        cause: The transport exception that caused the failure, if any.

    Example:
        ```pycon
        >>> from restwire.exceptions import HttpRequestError
        >>> error = HttpRequestError(
        ...     method="GET",
        ...     url="https://api.example.com/data",
        ...     message="Request failed with status code 404",
        ...     status_code=404,
        ... )
        >>> error.status_code
        404

        ```
    """

    def __init__(
        self,
        method: str,
        url: str,
        message: str,
        status_code: int | None = None,
        response: RestResponse[Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.method = method
        self.url = url
        self.status_code = status_code
        self.response = response
        self.__cause__ = cause

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(method={self.method!r}, url={self.url!r}, "
            f"status_code={self.status_code})"
        )
