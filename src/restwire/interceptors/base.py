r"""Base class of request/response interceptors."""

from __future__ import annotations

__all__ = ["Interceptor"]

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx


class Interceptor:
    """Hook observing or mutating the requests and responses of a
    client.

    Subclasses override any subset of the three hooks. The default
    implementations pass the request and response through unchanged and
    ignore errors. Hooks are called synchronously by both the sync and
    the async clients, so they should be fast.

    Example:
        ```pycon
        >>> import httpx
        >>> from restwire.interceptors import Interceptor
        >>> class UserAgentInterceptor(Interceptor):
        ...     def on_request(self, request: httpx.Request) -> httpx.Request:
        ...         request.headers["User-Agent"] = "my-app/1.0"
        ...         return request
        ...
        >>> request = UserAgentInterceptor().on_request(httpx.Request("GET", "https://example.com"))
        >>> request.headers["User-Agent"]
        'my-app/1.0'

        ```
    """

    def on_request(self, request: httpx.Request) -> httpx.Request:
        """Intercept a request before it is sent.

        Args:
            request: The request built for the current attempt.

        Returns:
            The request to send, either ``request`` itself (possibly
            mutated) or a replacement.
        """
        return request

    def on_response(self, response: httpx.Response) -> httpx.Response:
        """Intercept a response after it is received.

        Args:
            response: The response returned by the transport.

        Returns:
            The response to decode, either ``response`` itself or a
            replacement.
        """
        return response

    def on_error(self, exc: Exception) -> None:
        """Observe an exception raised during an attempt.

        Args:
            exc: The exception raised by the attempt.
        """
