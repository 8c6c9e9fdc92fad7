r"""Asynchronous restwire client.

This module provides the AsyncRestClient class, the ``asyncio``
counterpart of RestClient. It owns an ``httpx.AsyncClient`` and sends
requests with the same interceptor chain, codec and retry policy.
"""

from __future__ import annotations

__all__ = ["AsyncRestClient"]

import logging
from typing import TYPE_CHECKING, Any

import httpx

from restwire.builder import RequestBuilder
from restwire.codec import ContentType
from restwire.core.config import ClientConfig
from restwire.core.pipeline import prepare_call_async
from restwire.core.validation import validate_config, validate_method, validate_url
from restwire.interceptors import InterceptorChain
from restwire.retry import AsyncRetryExecutor, RetryPolicy

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from types import TracebackType
    from typing import Self

    from restwire.interceptors import Interceptor
    from restwire.options import RequestOptions
    from restwire.response import RestResponse

logger: logging.Logger = logging.getLogger(__name__)


class AsyncRestClient:
    r"""Asynchronous HTTP client with interceptors, typed responses and
    retry.

    Concurrent calls on one client are independent: each call has its
    own attempt counter and its own requests. Interceptors are shared
    and are invoked synchronously.

    Args:
        config: Optional ClientConfig instance. If ``None``, a default
            ClientConfig is used.
        interceptors: Optional initial interceptors, in order.
        transport: Optional async ``httpx`` transport.

    Raises:
        ConfigurationError: If ``config`` holds invalid values.

    Example:
        ```pycon
        >>> import asyncio
        >>> from restwire import AsyncRestClient
        >>> from restwire.core.config import ClientConfig
        >>> async def main():
        ...     config = ClientConfig(base_url="https://api.example.com", max_retry_attempts=3)
        ...     async with AsyncRestClient(config) as client:
        ...         return await client.get("/users", response_type=list[dict])
        ...
        >>> response = asyncio.run(main())  # doctest: +SKIP

        ```
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        interceptors: Iterable[Interceptor] = (),
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config if config is not None else ClientConfig()
        validate_config(self._config)
        self._interceptors = InterceptorChain(interceptors)
        self._transport = transport
        self._executor = AsyncRetryExecutor(
            RetryPolicy.from_config(self._config), self._interceptors
        )
        self._client: httpx.AsyncClient | None = httpx.AsyncClient(
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
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> Self:
        """Create a client configured from request options.

        Args:
            options: The request options. Their headers become the
                default headers of the client.
            interceptors: Optional initial interceptors, in order.
            transport: Optional async ``httpx`` transport.

        Returns:
            A new client.
        """
        config = ClientConfig(default_headers=options.headers or {}).merge(
            **options.config_overrides()
        )
        return cls(config, interceptors=interceptors, transport=transport)

    async def __aenter__(self) -> Self:
        self._ensure_client()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

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

    async def aclose(self) -> None:
        """Release the underlying ``httpx.AsyncClient``."""
        if self._client is not None:
            client, self._client = self._client, None
            await client.aclose()

    def build(self) -> RequestBuilder:
        """Start a fluent request bound to this client. Its verb methods
        return awaitables."""
        return RequestBuilder(self)

    async def send(
        self,
        method: str,
        url: str | None,
        *,
        headers: Mapping[str, str] | None = None,
        body: Any = None,
        content_type: ContentType = ContentType.JSON,
        response_type: Any = Any,
    ) -> RestResponse[Any]:
        r"""Send a request asynchronously with automatic retry logic.

        Args:
            method: The HTTP method, case-insensitive.
            url: The request URL, absolute or relative to the base URL.
            headers: Request specific headers.
            body: Optional request body.
            content_type: The declared content type of ``body``.
            response_type: The type the response body is decoded into.

        Returns:
            The response envelope.

        Raises:
            ConfigurationError: If the URL is missing, the method is not
                supported, the body does not match ``content_type`` or
                ``response_type`` cannot be validated by ``pydantic``.
            RuntimeError: If the client is closed.
        """
        client = self._ensure_client()
        call = await prepare_call_async(
            self._config,
            method,
            url,
            headers=headers,
            body=body,
            content_type=content_type,
            response_type=response_type,
        )
        return await self._executor.execute(client, call)

    async def request(
        self, options: RequestOptions, response_type: Any = Any
    ) -> RestResponse[Any]:
        r"""Send a request described by request options.

        See ``RestClient.request``.
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
            async with self.__class__(
                self._config.merge(**options.config_overrides()),
                interceptors=self._interceptors,
                transport=self._transport,
            ) as client:
                response = await client.send(method, url, **kwargs)
        else:
            response = await self.send(method, url, **kwargs)
        response.options = options
        return response

    async def get(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: Any = None,
        content_type: ContentType = ContentType.JSON,
        response_type: Any = Any,
    ) -> RestResponse[Any]:
        r"""Send an HTTP GET request asynchronously.

        Args:
            url: The URL to send the GET request to.
            headers: Request specific headers.
            body: Optional request body.
            content_type: The declared content type of ``body``.
            response_type: The type the response body is decoded into.

        Returns:
            The response envelope.
        """
        return await self.send(
            "GET",
            url,
            headers=headers,
            body=body,
            content_type=content_type,
            response_type=response_type,
        )

    async def post(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: Any = None,
        content_type: ContentType = ContentType.JSON,
        response_type: Any = Any,
    ) -> RestResponse[Any]:
        r"""Send an HTTP POST request asynchronously (see ``get``)."""
        return await self.send(
            "POST",
            url,
            headers=headers,
            body=body,
            content_type=content_type,
            response_type=response_type,
        )

    async def put(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: Any = None,
        content_type: ContentType = ContentType.JSON,
        response_type: Any = Any,
    ) -> RestResponse[Any]:
        r"""Send an HTTP PUT request asynchronously (see ``get``)."""
        return await self.send(
            "PUT",
            url,
            headers=headers,
            body=body,
            content_type=content_type,
            response_type=response_type,
        )

    async def delete(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: Any = None,
        content_type: ContentType = ContentType.JSON,
        response_type: Any = Any,
    ) -> RestResponse[Any]:
        r"""Send an HTTP DELETE request asynchronously (see ``get``)."""
        return await self.send(
            "DELETE",
            url,
            headers=headers,
            body=body,
            content_type=content_type,
            response_type=response_type,
        )

    async def patch(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: Any = None,
        content_type: ContentType = ContentType.JSON,
        response_type: Any = Any,
    ) -> RestResponse[Any]:
        r"""Send an HTTP PATCH request asynchronously (see ``get``)."""
        return await self.send(
            "PATCH",
            url,
            headers=headers,
            body=body,
            content_type=content_type,
            response_type=response_type,
        )

    async def head(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: Any = None,
        content_type: ContentType = ContentType.JSON,
        response_type: Any = Any,
    ) -> RestResponse[Any]:
        r"""Send an HTTP HEAD request asynchronously (see ``get``)."""
        return await self.send(
            "HEAD",
            url,
            headers=headers,
            body=body,
            content_type=content_type,
            response_type=response_type,
        )

    async def get_text(self, url: str, **kwargs: Any) -> str:
        r"""Send an HTTP GET request and return the raw response body."""
        return (await self.get(url, response_type=str, **kwargs)).raw_content

    async def post_text(self, url: str, **kwargs: Any) -> str:
        r"""Send an HTTP POST request and return the raw response body."""
        return (await self.post(url, response_type=str, **kwargs)).raw_content

    async def put_text(self, url: str, **kwargs: Any) -> str:
        r"""Send an HTTP PUT request and return the raw response body."""
        return (await self.put(url, response_type=str, **kwargs)).raw_content

    async def delete_text(self, url: str, **kwargs: Any) -> str:
        r"""Send an HTTP DELETE request and return the raw response body."""
        return (await self.delete(url, response_type=str, **kwargs)).raw_content

    async def patch_text(self, url: str, **kwargs: Any) -> str:
        r"""Send an HTTP PATCH request and return the raw response body."""
        return (await self.patch(url, response_type=str, **kwargs)).raw_content

    async def head_text(self, url: str, **kwargs: Any) -> str:
        r"""Send an HTTP HEAD request and return the raw response body."""
        return (await self.head(url, response_type=str, **kwargs)).raw_content

    def _ensure_client(self) -> httpx.AsyncClient:
        """Ensure the client is available for use.

        Returns:
            The httpx.AsyncClient instance.

        Raises:
            RuntimeError: If the client has been closed.
        """
        if self._client is None:
            msg = "AsyncRestClient has been closed and cannot send requests"
            raise RuntimeError(msg)
        return self._client
