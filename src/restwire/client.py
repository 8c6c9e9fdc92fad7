r"""Synchronous restwire client.

This module provides the RestClient class. It owns an ``httpx.Client``
configured from a ClientConfig, an interceptor chain and a retry policy,
and exposes per-verb methods returning ``RestResponse`` envelopes.
"""

from __future__ import annotations

__all__ = ["RestClient"]

import logging
from typing import TYPE_CHECKING, Any

import httpx

from restwire.builder import RequestBuilder
from restwire.codec import ContentType
from restwire.core.config import ClientConfig
from restwire.core.pipeline import prepare_call
from restwire.core.validation import validate_config, validate_method, validate_url
from restwire.interceptors import InterceptorChain
from restwire.retry import RetryExecutor, RetryPolicy

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from types import TracebackType
    from typing import Self

    from restwire.interceptors import Interceptor
    from restwire.options import RequestOptions
    from restwire.response import RestResponse

logger: logging.Logger = logging.getLogger(__name__)


class RestClient:
    r"""Synchronous HTTP client with interceptors, typed responses and
    retry.

    The client creates its ``httpx.Client`` when it is constructed and
    releases it in ``close``, which the context manager calls on exit.
    No request may be sent after the client is closed.

    HTTP failures never raise: a 4xx or 5xx response is returned as an
    envelope with ``is_success=False``. Transport errors are retried up
    to ``config.max_retry_attempts`` times and, once exhausted, also
    reported on the envelope. Only configuration errors raise.

    Args:
        config: Optional ClientConfig instance. If ``None``, a default
            ClientConfig is used.
        interceptors: Optional initial interceptors, in order.
        transport: Optional ``httpx`` transport, for example an
            ``httpx.MockTransport`` in tests.

    Raises:
        ConfigurationError: If ``config`` holds invalid values.

    Example:
        ```pycon
        >>> from restwire import RestClient
        >>> from restwire.core.config import ClientConfig
        >>> config = ClientConfig(base_url="https://api.example.com", max_retry_attempts=3)
        >>> with RestClient(config) as client:  # doctest: +SKIP
        ...     users = client.get("/users", response_type=list[dict])
        ...     created = client.post("/users", body={"name": "Ada"})
        ...

        ```
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        interceptors: Iterable[Interceptor] = (),
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._config = config if config is not None else ClientConfig()
        validate_config(self._config)
        self._interceptors = InterceptorChain(interceptors)
        self._transport = transport
        self._executor = RetryExecutor(RetryPolicy.from_config(self._config), self._interceptors)
        self._client: httpx.Client | None = httpx.Client(
            timeout=self._config.timeout,
            verify=self._config.validate_ssl_certificates,
            transport=transport,
        )

    @classmethod
    def from_options(
        cls,
        options: RequestOptions,
        *,
        interceptors: Iterable[Interceptor] = (),
        transport: httpx.BaseTransport | None = None,
    ) -> Self:
        """Create a client configured from request options.

        The base URL, timeout, retry count and TLS validation flag of
        the options override the defaults, and the option headers
        become the default headers of the client.

        Args:
            options: The request options.
            interceptors: Optional initial interceptors, in order.
            transport: Optional ``httpx`` transport.

        Returns:
            A new client.
        """
        config = ClientConfig(default_headers=options.headers or {}).merge(
            **options.config_overrides()
        )
        return cls(config, interceptors=interceptors, transport=transport)

    def __enter__(self) -> Self:
        self._ensure_client()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(config={self._config!r}, closed={self.closed})"

    @property
    def config(self) -> ClientConfig:
        """The configuration of the client."""
        return self._config

    @property
    def interceptors(self) -> InterceptorChain:
        """The interceptor chain of the client."""
        return self._interceptors

    @property
    def closed(self) -> bool:
        """``True`` once the client has been closed."""
        return self._client is None

    def close(self) -> None:
        """Release the underlying ``httpx.Client``. Closing twice is a
        no-op."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def build(self) -> RequestBuilder:
        """Start a fluent request bound to this client."""
        return RequestBuilder(self)

    def send(
        self,
        method: str,
        url: str | None,
        *,
        headers: Mapping[str, str] | None = None,
        body: Any = None,
        content_type: ContentType = ContentType.JSON,
        response_type: Any = Any,
    ) -> RestResponse[Any]:
        r"""Send a request with automatic retry logic.

        Args:
            method: The HTTP method (GET, POST, PUT, DELETE, PATCH or
                HEAD), case-insensitive.
            url: The request URL, absolute or relative to the base URL.
            headers: Request specific headers, overriding the default
                headers of the same name.
            body: Optional request body.
            content_type: The declared content type of ``body``.
            response_type: The type the response body is decoded into.
                ``str`` keeps the raw text.

        Returns:
            The response envelope.

        Raises:
            ConfigurationError: If the URL is missing, the method is not
                supported, the body does not match ``content_type`` or
                ``response_type`` cannot be validated by ``pydantic``.
            RuntimeError: If the client is closed.
        """
        client = self._ensure_client()
        call = prepare_call(
            self._config,
            method,
            url,
            headers=headers,
            body=body,
            content_type=content_type,
            response_type=response_type,
        )
        return self._executor.execute(client, call)

    def request(self, options: RequestOptions, response_type: Any = Any) -> RestResponse[Any]:
        r"""Send a request described by request options.

        When the options override a client level setting (base URL,
        timeout, retry count or TLS validation), the request is sent by
        a short-lived client using this client's configuration with the
        overrides applied.

        Args:
            options: The request options.
            response_type: The type the response body is decoded into.

        Returns:
            The response envelope, with ``options`` recorded on it.

        Raises:
            ConfigurationError: If the URL is missing or the method is
                not supported. No request is sent in that case.
        """
        url = validate_url(options.url)
        method = validate_method(options.method)
        kwargs: dict[str, Any] = {
            "headers": options.headers,
            "body": options.data,
            "content_type": options.content_type,
            "response_type": response_type,
        }
        if options.has_client_overrides():
            logger.debug(f"Sending {method} {url} with a dedicated client for option overrides")
            with self.__class__(
                self._config.merge(**options.config_overrides()),
                interceptors=self._interceptors,
                transport=self._transport,
            ) as client:
                response = client.send(method, url, **kwargs)
        else:
            response = self.send(method, url, **kwargs)
        response.options = options
        return response

    def get(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: Any = None,
        content_type: ContentType = ContentType.JSON,
        response_type: Any = Any,
    ) -> RestResponse[Any]:
        r"""Send an HTTP GET request.

        Args:
            url: The URL to send the GET request to.
            headers: Request specific headers.
            body: Optional request body.
            content_type: The declared content type of ``body``.
            response_type: The type the response body is decoded into.

        Returns:
            The response envelope.

        Example:
            ```pycon
            >>> import httpx
            >>> from restwire import RestClient
            >>> transport = httpx.MockTransport(lambda request: httpx.Response(200, json=[1, 2]))
            >>> with RestClient(transport=transport) as client:
            ...     client.get("https://api.example.com/ids", response_type=list[int]).data
            ...
            [1, 2]

            ```
        """
        return self.send(
            "GET",
            url,
            headers=headers,
            body=body,
            content_type=content_type,
            response_type=response_type,
        )

    def post(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: Any = None,
        content_type: ContentType = ContentType.JSON,
        response_type: Any = Any,
    ) -> RestResponse[Any]:
        r"""Send an HTTP POST request.

        Args:
            url: The URL to send the POST request to.
            headers: Request specific headers.
            body: Optional request body.
            content_type: The declared content type of ``body``.
            response_type: The type the response body is decoded into.

        Returns:
            The response envelope.
        """
        return self.send(
            "POST",
            url,
            headers=headers,
            body=body,
            content_type=content_type,
            response_type=response_type,
        )

    def put(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: Any = None,
        content_type: ContentType = ContentType.JSON,
        response_type: Any = Any,
    ) -> RestResponse[Any]:
        r"""Send an HTTP PUT request (see ``post``)."""
        return self.send(
            "PUT",
            url,
            headers=headers,
            body=body,
            content_type=content_type,
            response_type=response_type,
        )

    def delete(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: Any = None,
        content_type: ContentType = ContentType.JSON,
        response_type: Any = Any,
    ) -> RestResponse[Any]:
        r"""Send an HTTP DELETE request (see ``get``)."""
        return self.send(
            "DELETE",
            url,
            headers=headers,
            body=body,
            content_type=content_type,
            response_type=response_type,
        )

    def patch(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: Any = None,
        content_type: ContentType = ContentType.JSON,
        response_type: Any = Any,
    ) -> RestResponse[Any]:
        r"""Send an HTTP PATCH request (see ``post``)."""
        return self.send(
            "PATCH",
            url,
            headers=headers,
            body=body,
            content_type=content_type,
            response_type=response_type,
        )

    def head(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: Any = None,
        content_type: ContentType = ContentType.JSON,
        response_type: Any = Any,
    ) -> RestResponse[Any]:
        r"""Send an HTTP HEAD request (see ``get``)."""
        return self.send(
            "HEAD",
            url,
            headers=headers,
            body=body,
            content_type=content_type,
            response_type=response_type,
        )

    def get_text(self, url: str, **kwargs: Any) -> str:
        r"""Send an HTTP GET request and return the raw response body.

        Args:
            url: The URL to send the GET request to.
            **kwargs: Additional keyword arguments (see ``get``).

        Returns:
            The response body as text, empty if the call failed before
            a response was received.
        """
        return self.get(url, response_type=str, **kwargs).raw_content

    def post_text(self, url: str, **kwargs: Any) -> str:
        r"""Send an HTTP POST request and return the raw response body."""
        return self.post(url, response_type=str, **kwargs).raw_content

    def put_text(self, url: str, **kwargs: Any) -> str:
        r"""Send an HTTP PUT request and return the raw response body."""
        return self.put(url, response_type=str, **kwargs).raw_content

    def delete_text(self, url: str, **kwargs: Any) -> str:
        r"""Send an HTTP DELETE request and return the raw response body."""
        return self.delete(url, response_type=str, **kwargs).raw_content

    def patch_text(self, url: str, **kwargs: Any) -> str:
        r"""Send an HTTP PATCH request and return the raw response body."""
        return self.patch(url, response_type=str, **kwargs).raw_content

    def head_text(self, url: str, **kwargs: Any) -> str:
        r"""Send an HTTP HEAD request and return the raw response body."""
        return self.head(url, response_type=str, **kwargs).raw_content

    def _ensure_client(self) -> httpx.Client:
        """Ensure the client is available for use.

        Returns:
            The httpx.Client instance.

        Raises:
            RuntimeError: If the client has been closed.
        """
        if self._client is None:
            msg = "RestClient has been closed and cannot send requests"
            raise RuntimeError(msg)
        return self._client
