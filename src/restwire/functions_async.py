r"""Contains the asynchronous module-level request functions."""

from __future__ import annotations

__all__ = [
    "delete_async",
    "get_async",
    "head_async",
    "patch_async",
    "post_async",
    "put_async",
    "request_async",
]

from typing import TYPE_CHECKING, Any

from restwire.client_async import AsyncRestClient
from restwire.codec import ContentType
from restwire.core.http_logic import execute_http_method_async
from restwire.core.validation import validate_method, validate_url

if TYPE_CHECKING:
    from collections.abc import Mapping

    import httpx

    from restwire.core.config import ClientConfig
    from restwire.options import RequestOptions
    from restwire.response import RestResponse


async def get_async(
    url: str,
    *,
    client: AsyncRestClient | None = None,
    config: ClientConfig | None = None,
    headers: Mapping[str, str] | None = None,
    response_type: Any = Any,
    transport: httpx.AsyncBaseTransport | None = None,
) -> RestResponse[Any]:
    r"""Send an HTTP GET request asynchronously with automatic retry
    logic.

    Args:
        url: The URL to send the GET request to.
        client: An optional AsyncRestClient to use. If ``None``, a new
            client is created from ``config`` and closed after use.
        config: An optional ClientConfig, only used if ``client`` is
            ``None``.
        headers: Request specific headers.
        response_type: The type the response body is decoded into.
        transport: An optional async ``httpx`` transport, only used if
            ``client`` is ``None``.

    Returns:
        The response envelope.

    Example:
        ```pycon
        >>> import asyncio
        >>> from restwire import get_async
        >>> response = asyncio.run(get_async("https://api.example.com/users"))  # doctest: +SKIP

        ```
    """
    return await execute_http_method_async(
        url,
        "GET",
        client=client,
        config=config,
        headers=headers,
        response_type=response_type,
        transport=transport,
    )


async def post_async(
    url: str,
    *,
    body: Any = None,
    content_type: ContentType = ContentType.JSON,
    client: AsyncRestClient | None = None,
    config: ClientConfig | None = None,
    headers: Mapping[str, str] | None = None,
    response_type: Any = Any,
    transport: httpx.AsyncBaseTransport | None = None,
) -> RestResponse[Any]:
    r"""Send an HTTP POST request asynchronously with automatic retry
    logic."""
    return await execute_http_method_async(
        url,
        "POST",
        client=client,
        config=config,
        headers=headers,
        body=body,
        content_type=content_type,
        response_type=response_type,
        transport=transport,
    )


async def put_async(
    url: str,
    *,
    body: Any = None,
    content_type: ContentType = ContentType.JSON,
    client: AsyncRestClient | None = None,
    config: ClientConfig | None = None,
    headers: Mapping[str, str] | None = None,
    response_type: Any = Any,
    transport: httpx.AsyncBaseTransport | None = None,
) -> RestResponse[Any]:
    r"""Send an HTTP PUT request asynchronously with automatic retry
    logic."""
    return await execute_http_method_async(
        url,
        "PUT",
        client=client,
        config=config,
        headers=headers,
        body=body,
        content_type=content_type,
        response_type=response_type,
        transport=transport,
    )


async def patch_async(
    url: str,
    *,
    body: Any = None,
    content_type: ContentType = ContentType.JSON,
    client: AsyncRestClient | None = None,
    config: ClientConfig | None = None,
    headers: Mapping[str, str] | None = None,
    response_type: Any = Any,
    transport: httpx.AsyncBaseTransport | None = None,
) -> RestResponse[Any]:
    r"""Send an HTTP PATCH request asynchronously with automatic retry
    logic."""
    return await execute_http_method_async(
        url,
        "PATCH",
        client=client,
        config=config,
        headers=headers,
        body=body,
        content_type=content_type,
        response_type=response_type,
        transport=transport,
    )


async def delete_async(
    url: str,
    *,
    client: AsyncRestClient | None = None,
    config: ClientConfig | None = None,
    headers: Mapping[str, str] | None = None,
    response_type: Any = Any,
    transport: httpx.AsyncBaseTransport | None = None,
) -> RestResponse[Any]:
    r"""Send an HTTP DELETE request asynchronously with automatic retry
    logic."""
    return await execute_http_method_async(
        url,
        "DELETE",
        client=client,
        config=config,
        headers=headers,
        response_type=response_type,
        transport=transport,
    )


async def head_async(
    url: str,
    *,
    client: AsyncRestClient | None = None,
    config: ClientConfig | None = None,
    headers: Mapping[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> RestResponse[Any]:
    r"""Send an HTTP HEAD request asynchronously with automatic retry
    logic."""
    return await execute_http_method_async(
        url,
        "HEAD",
        client=client,
        config=config,
        headers=headers,
        transport=transport,
    )


async def request_async(
    options: RequestOptions,
    *,
    client: AsyncRestClient | None = None,
    config: ClientConfig | None = None,
    response_type: Any = Any,
    transport: httpx.AsyncBaseTransport | None = None,
) -> RestResponse[Any]:
    r"""Send a request described by request options asynchronously.

    See ``restwire.functions.request``.
    """
    url = validate_url(options.url)
    method = validate_method(options.method)
    if client is not None:
        return await client.request(options, response_type=response_type)
    headers = options.headers
    if config is None:
        owned_client = AsyncRestClient.from_options(options, transport=transport)
        headers = None
    else:
        owned_client = AsyncRestClient(
            config.merge(**options.config_overrides()), transport=transport
        )
    async with owned_client:
        response = await owned_client.send(
            method,
            url,
            headers=headers,
            body=options.data,
            content_type=options.content_type,
            response_type=response_type,
        )
    response.options = options
    return response
