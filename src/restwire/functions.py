r"""Contains the synchronous module-level request functions.

Each function sends one request through ``client`` when it is given,
or through a RestClient created for the call and closed afterwards.
"""

from __future__ import annotations

__all__ = ["delete", "get", "head", "patch", "post", "put", "request"]

from typing import TYPE_CHECKING, Any

from restwire.client import RestClient
from restwire.codec import ContentType
from restwire.core.http_logic import execute_http_method
from restwire.core.validation import validate_method, validate_url

if TYPE_CHECKING:
    from collections.abc import Mapping

    import httpx

    from restwire.core.config import ClientConfig
    from restwire.options import RequestOptions
    from restwire.response import RestResponse


def get(
    url: str,
    *,
    client: RestClient | None = None,
    config: ClientConfig | None = None,
    headers: Mapping[str, str] | None = None,
    response_type: Any = Any,
    transport: httpx.BaseTransport | None = None,
) -> RestResponse[Any]:
    r"""Send an HTTP GET request with automatic retry logic.

    Args:
        url: The URL to send the GET request to.
        client: An optional RestClient to use. If ``None``, a new client
            is created from ``config`` and closed after use.
        config: An optional ClientConfig, only used if ``client`` is
            ``None``.
        headers: Request specific headers.
        response_type: The type the response body is decoded into.
        transport: An optional ``httpx`` transport, only used if
            ``client`` is ``None``.

    Returns:
        The response envelope.

    Example:
        ```pycon
        >>> from restwire import get
        >>> from restwire.core import ClientConfig
        >>> config = ClientConfig(max_retry_attempts=5)
        >>> response = get("https://api.example.com/users", config=config)  # doctest: +SKIP

        ```
    """
    return execute_http_method(
        url,
        "GET",
        client=client,
        config=config,
        headers=headers,
        response_type=response_type,
        transport=transport,
    )


def post(
    url: str,
    *,
    body: Any = None,
    content_type: ContentType = ContentType.JSON,
    client: RestClient | None = None,
    config: ClientConfig | None = None,
    headers: Mapping[str, str] | None = None,
    response_type: Any = Any,
    transport: httpx.BaseTransport | None = None,
) -> RestResponse[Any]:
    r"""Send an HTTP POST request with automatic retry logic.

    Args:
        url: The URL to send the POST request to.
        body: Optional request body.
        content_type: The declared content type of ``body``.
        client: An optional RestClient to use.
        config: An optional ClientConfig, only used if ``client`` is
            ``None``.
        headers: Request specific headers.
        response_type: The type the response body is decoded into.
        transport: An optional ``httpx`` transport, only used if
            ``client`` is ``None``.

    Returns:
        The response envelope.
    """
    return execute_http_method(
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


def put(
    url: str,
    *,
    body: Any = None,
    content_type: ContentType = ContentType.JSON,
    client: RestClient | None = None,
    config: ClientConfig | None = None,
    headers: Mapping[str, str] | None = None,
    response_type: Any = Any,
    transport: httpx.BaseTransport | None = None,
) -> RestResponse[Any]:
    r"""Send an HTTP PUT request with automatic retry logic (see
    ``post``)."""
    return execute_http_method(
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


def patch(
    url: str,
    *,
    body: Any = None,
    content_type: ContentType = ContentType.JSON,
    client: RestClient | None = None,
    config: ClientConfig | None = None,
    headers: Mapping[str, str] | None = None,
    response_type: Any = Any,
    transport: httpx.BaseTransport | None = None,
) -> RestResponse[Any]:
    r"""Send an HTTP PATCH request with automatic retry logic (see
    ``post``)."""
    return execute_http_method(
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


def delete(
    url: str,
    *,
    client: RestClient | None = None,
    config: ClientConfig | None = None,
    headers: Mapping[str, str] | None = None,
    response_type: Any = Any,
    transport: httpx.BaseTransport | None = None,
) -> RestResponse[Any]:
    r"""Send an HTTP DELETE request with automatic retry logic (see
    ``get``)."""
    return execute_http_method(
        url,
        "DELETE",
        client=client,
        config=config,
        headers=headers,
        response_type=response_type,
        transport=transport,
    )


def head(
    url: str,
    *,
    client: RestClient | None = None,
    config: ClientConfig | None = None,
    headers: Mapping[str, str] | None = None,
    transport: httpx.BaseTransport | None = None,
) -> RestResponse[Any]:
    r"""Send an HTTP HEAD request with automatic retry logic. The
    envelope carries the status and headers only."""
    return execute_http_method(
        url,
        "HEAD",
        client=client,
        config=config,
        headers=headers,
        transport=transport,
    )


def request(
    options: RequestOptions,
    *,
    client: RestClient | None = None,
    config: ClientConfig | None = None,
    response_type: Any = Any,
    transport: httpx.BaseTransport | None = None,
) -> RestResponse[Any]:
    r"""Send a request described by request options.

    The URL and method are validated before any client is created.

    Args:
        options: The request options.
        client: An optional RestClient to use. If ``None``, a single
            client is created for the call and closed after use: from
            ``config`` with the option overrides applied, or from the
            options alone when ``config`` is ``None``.
        config: An optional ClientConfig, only used if ``client`` is
            ``None``.
        response_type: The type the response body is decoded into.
        transport: An optional ``httpx`` transport, only used if
            ``client`` is ``None``.

    Returns:
        The response envelope, with ``options`` recorded on it.

    Raises:
        ConfigurationError: If the URL is missing or the method is not
            supported.

    Example:
        ```pycon
        >>> from restwire import RequestOptions, request
        >>> options = RequestOptions(url="https://api.example.com/users", method="POST", data={})
        >>> response = request(options)  # doctest: +SKIP

        ```
    """
    url = validate_url(options.url)
    method = validate_method(options.method)
    if client is not None:
        return client.request(options, response_type=response_type)
    headers = options.headers
    if config is None:
        owned_client = RestClient.from_options(options, transport=transport)
        headers = None
    else:
        owned_client = RestClient(config.merge(**options.config_overrides()), transport=transport)
    with owned_client:
        response = owned_client.send(
            method,
            url,
            headers=headers,
            body=options.data,
            content_type=options.content_type,
            response_type=response_type,
        )
    response.options = options
    return response
