r"""Fluent request builder."""

from __future__ import annotations

__all__ = ["RequestBuilder"]

from typing import TYPE_CHECKING, Any

import httpx

from restwire import auth
from restwire.codec import ContentType

if TYPE_CHECKING:
    from collections.abc import Mapping
    from typing import Self

    from restwire.client import RestClient
    from restwire.client_async import AsyncRestClient


class RequestBuilder:
    r"""Chainable configuration of one request, sent by a verb method.

    The builder is bound to a client. Its terminal methods (``get``,
    ``post``, ...) delegate to the client methods of the same name, so
    with an ``AsyncRestClient`` they return awaitables.

    Args:
        client: The client sending the request.

    Example:
        ```pycon
        >>> from restwire import RestClient
        >>> with RestClient() as client:  # doctest: +SKIP
        ...     response = (
        ...         client.build()
        ...         .url("https://api.example.com/users")
        ...         .with_query("page", 2)
        ...         .with_bearer_token("abc123")
        ...         .get(response_type=list[dict])
        ...     )
        ...

        ```
    """

    def __init__(self, client: RestClient | AsyncRestClient) -> None:
        self._client = client
        self._url = ""
        self._headers: dict[str, str] = {}
        self._params: dict[str, str] = {}
        self._body: Any = None
        self._content_type = ContentType.JSON

    def url(self, url: str) -> Self:
        """Set the request URL, absolute or relative to the base URL."""
        self._url = url
        return self

    def with_header(self, name: str, value: str) -> Self:
        """Set a request header, replacing a previous value."""
        self._headers[name] = value
        return self

    def with_headers(self, headers: Mapping[str, str]) -> Self:
        """Set several request headers."""
        self._headers.update(headers)
        return self

    def with_query(self, key: str, value: Any) -> Self:
        """Set a query parameter. ``None`` becomes an empty value and
        other values are converted with ``str``."""
        self._params[key] = "" if value is None else str(value)
        return self

    def with_queries(self, params: Mapping[str, Any]) -> Self:
        """Set several query parameters."""
        for key, value in params.items():
            self.with_query(key, value)
        return self

    def with_body(self, body: Any) -> Self:
        """Set the request body."""
        self._body = body
        return self

    def with_content_type(self, content_type: ContentType) -> Self:
        """Set the declared content type of the body."""
        self._content_type = content_type
        return self

    def with_bearer_token(self, token: str) -> Self:
        """Authenticate with a bearer token."""
        return self.with_header(auth.AUTHORIZATION_HEADER, auth.bearer(token))

    def with_basic_auth(self, username: str, password: str) -> Self:
        """Authenticate with HTTP basic authentication."""
        return self.with_header(auth.AUTHORIZATION_HEADER, auth.basic(username, password))

    def with_api_key(self, header_name: str, key: str) -> Self:
        """Authenticate with an API key sent in ``header_name``."""
        return self.with_header(*auth.api_key(header_name, key))

    def build_url(self) -> str:
        """Return the request URL with the query parameters appended.

        Example:
            ```pycon
            >>> from restwire.builder import RequestBuilder
            >>> builder = RequestBuilder(client=None).url("/search").with_query("q", "a b")
            >>> builder.build_url()
            '/search?q=a+b'

            ```
        """
        if not self._params:
            return self._url
        return str(httpx.URL(self._url).copy_merge_params(self._params))

    def get(self, response_type: Any = Any) -> Any:
        """Send the request as GET."""
        return self._client.get(self.build_url(), **self._send_kwargs(response_type))

    def post(self, response_type: Any = Any) -> Any:
        """Send the request as POST."""
        return self._client.post(self.build_url(), **self._send_kwargs(response_type))

    def put(self, response_type: Any = Any) -> Any:
        """Send the request as PUT."""
        return self._client.put(self.build_url(), **self._send_kwargs(response_type))

    def delete(self, response_type: Any = Any) -> Any:
        """Send the request as DELETE."""
        return self._client.delete(self.build_url(), **self._send_kwargs(response_type))

    def patch(self, response_type: Any = Any) -> Any:
        """Send the request as PATCH."""
        return self._client.patch(self.build_url(), **self._send_kwargs(response_type))

    def head(self, response_type: Any = Any) -> Any:
        """Send the request as HEAD."""
        return self._client.head(self.build_url(), **self._send_kwargs(response_type))

    def _send_kwargs(self, response_type: Any) -> dict[str, Any]:
        return {
            "headers": dict(self._headers),
            "body": self._body,
            "content_type": self._content_type,
            "response_type": response_type,
        }
