r"""Shared HTTP method logic for the module-level request functions.

The module-level functions either send through a caller supplied client,
or create a client for the single call and close it afterwards.
"""

from __future__ import annotations

__all__ = ["execute_http_method", "execute_http_method_async"]

from typing import TYPE_CHECKING, Any

from restwire.client import RestClient
from restwire.client_async import AsyncRestClient
from restwire.codec import ContentType

if TYPE_CHECKING:
    from collections.abc import Mapping

    import httpx

    from restwire.core.config import ClientConfig
    from restwire.response import RestResponse


def execute_http_method(
    url: str,
    method: str,
    *,
    client: RestClient | None = None,
    config: ClientConfig | None = None,
    headers: Mapping[str, str] | None = None,
    body: Any = None,
    content_type: ContentType = ContentType.JSON,
    response_type: Any = Any,
    transport: httpx.BaseTransport | None = None,
) -> RestResponse[Any]:
    """Execute an HTTP method with automatic retry logic (synchronous).

    Args:
        url: The URL to send the request to.
        method: The HTTP method.
        client: An optional RestClient to send the request with. If
            ``None``, a new client is created from ``config`` and closed
            after use.
        config: An optional ClientConfig, only used if ``client`` is
            ``None``.
        headers: Request specific headers.
        body: Optional request body.
        content_type: The declared content type of ``body``.
        response_type: The type the response body is decoded into.
        transport: An optional ``httpx`` transport, only used if
            ``client`` is ``None``.

    Returns:
        The response envelope.

    Raises:
        ConfigurationError: If the parameters of the call are invalid.
    """
    owns_client = client is None
    client = client or RestClient(config, transport=transport)
    try:
        return client.send(
            method,
            url,
            headers=headers,
            body=body,
            content_type=content_type,
            response_type=response_type,
        )
    finally:
        if owns_client:
            client.close()


async def execute_http_method_async(
    url: str,
    method: str,
    *,
    client: AsyncRestClient | None = None,
    config: ClientConfig | None = None,
    headers: Mapping[str, str] | None = None,
    body: Any = None,
    content_type: ContentType = ContentType.JSON,
    response_type: Any = Any,
    transport: httpx.AsyncBaseTransport | None = None,
) -> RestResponse[Any]:
    """Execute an HTTP method with automatic retry logic (asynchronous).

    See ``execute_http_method``; the temporary client is an
    AsyncRestClient.
    """
    owns_client = client is None
    client = client or AsyncRestClient(config, transport=transport)
    try:
        return await client.send(
            method,
            url,
            headers=headers,
            body=body,
            content_type=content_type,
            response_type=response_type,
        )
    finally:
        if owns_client:
            await client.aclose()
