r"""Shared request pipeline logic for sync and async clients.

This module contains the steps of a call that do not depend on the
transport being synchronous or asynchronous: validating and preparing a
call, building a fresh ``httpx.Request`` for each attempt, and turning
the outcome of the terminal attempt into a ``RestResponse``.
"""

from __future__ import annotations

__all__ = [
    "PreparedCall",
    "build_envelope",
    "build_exhausted_envelope",
    "build_failure_envelope",
    "build_request",
    "merge_headers",
    "prepare_call",
    "prepare_call_async",
    "resolve_url",
]

from dataclasses import dataclass
from http import HTTPStatus
from typing import TYPE_CHECKING, Any

import httpx

from restwire.codec import (
    ContentType,
    EncodedBody,
    decode,
    encode,
    read_streams_async,
    resolve_type_adapter,
)
from restwire.core.validation import validate_method, validate_url
from restwire.exceptions import ConfigurationError
from restwire.response import SERVER_ERROR_STATUS, SERVER_ERROR_TEXT, RestResponse

if TYPE_CHECKING:
    from collections.abc import Mapping

    from pydantic import TypeAdapter

    from restwire.core.config import ClientConfig


@dataclass(frozen=True)
class PreparedCall:
    """Validated description of one logical call.

    A prepared call is created once per call and is reused for every
    attempt. It holds the already encoded body, so building the request
    of a retry never re-reads the caller's body.

    Attributes:
        method: The upper-case HTTP method.
        url: The resolved absolute URL.
        headers: The merged request headers.
        body: The encoded body, or ``None`` if the call has no body.
        response_type: The type the response body is decoded into.
        adapter: The ``pydantic`` adapter of ``response_type``, or
            ``None`` when the raw text is returned.
    """

    method: str
    url: str
    headers: httpx.Headers
    body: EncodedBody | None = None
    response_type: Any = Any
    adapter: TypeAdapter[Any] | None = None


def resolve_url(url: str, base_url: str | None) -> str:
    """Resolve a request URL against the configured base URL.

    Args:
        url: The request URL, absolute or relative.
        base_url: The optional base URL of the client.

    Returns:
        ``url`` unchanged if it is absolute, otherwise ``url`` prefixed
        with ``base_url``.

    Raises:
        ConfigurationError: If ``url`` is relative and no base URL is
            configured.

    Example:
        ```pycon
        >>> from restwire.core.pipeline import resolve_url
        >>> resolve_url("/users", "https://api.example.com/v1/")
        'https://api.example.com/v1/users'
        >>> resolve_url("https://other.example.com/x", "https://api.example.com")
        'https://other.example.com/x'

        ```
    """
    if httpx.URL(url).is_absolute_url:
        return url
    if not base_url:
        msg = f"Relative URL {url!r} requires a base URL"
        raise ConfigurationError(msg)
    return f"{base_url.rstrip('/')}/{url.lstrip('/')}"


def merge_headers(
    default_headers: Mapping[str, str], headers: Mapping[str, str] | None
) -> httpx.Headers:
    """Merge request headers over default headers.

    Names are compared case-insensitively; the request header wins on a
    collision and keeps its own spelling.

    Args:
        default_headers: The default headers of the client.
        headers: The request specific headers.

    Returns:
        The merged headers.

    Example:
        ```pycon
        >>> from restwire.core.pipeline import merge_headers
        >>> merged = merge_headers({"Accept": "text/plain"}, {"accept": "application/json"})
        >>> merged["Accept"]
        'application/json'

        ```
    """
    merged = httpx.Headers(dict(default_headers))
    for name, value in (headers or {}).items():
        if name in merged:
            del merged[name]
        merged[name] = value
    return merged


def prepare_call(
    config: ClientConfig,
    method: str,
    url: str | None,
    *,
    headers: Mapping[str, str] | None = None,
    body: Any = None,
    content_type: ContentType = ContentType.JSON,
    response_type: Any = Any,
) -> PreparedCall:
    """Validate the parameters of a call and encode its body.

    Every configuration error of a call is raised here, before the
    first attempt.

    Args:
        config: The client configuration.
        method: The HTTP method name.
        url: The request URL.
        headers: The request specific headers.
        body: The optional request body.
        content_type: The declared content type of ``body``.
        response_type: The type the response body is decoded into.

    Returns:
        The prepared call.

    Raises:
        ConfigurationError: If the URL is missing, the method is not
            supported, the body does not match ``content_type`` or
            responses cannot be decoded into ``response_type``.
    """
    normalized_method = validate_method(method)
    resolved_url = resolve_url(validate_url(url), config.base_url)
    adapter = None if response_type is str else resolve_type_adapter(response_type)
    encoded = encode(body, content_type) if body is not None else None
    return PreparedCall(
        method=normalized_method,
        url=resolved_url,
        headers=merge_headers(config.default_headers, headers),
        body=encoded,
        response_type=response_type,
        adapter=adapter,
    )


async def prepare_call_async(
    config: ClientConfig,
    method: str,
    url: str | None,
    *,
    headers: Mapping[str, str] | None = None,
    body: Any = None,
    content_type: ContentType = ContentType.JSON,
    response_type: Any = Any,
) -> PreparedCall:
    """Asynchronous version of ``prepare_call``.

    The streams of a binary or multipart body are read in a worker
    thread so that the event loop is never blocked by file reads.
    """
    validate_method(method)
    validate_url(url)
    if body is not None:
        body = await read_streams_async(body, content_type)
    return prepare_call(
        config,
        method,
        url,
        headers=headers,
        body=body,
        content_type=content_type,
        response_type=response_type,
    )


def build_request(client: httpx.Client | httpx.AsyncClient, call: PreparedCall) -> httpx.Request:
    """Build a fresh request for one attempt of a call.

    Interceptors may mutate the request of an attempt, so every attempt
    gets its own request and header collection.

    Args:
        client: The transport client building the request.
        call: The prepared call.

    Returns:
        A new request carrying the merged headers and the encoded body.
    """
    headers = httpx.Headers(call.headers)
    if call.body is None:
        return client.build_request(call.method, call.url, headers=headers)
    if call.body.files is not None:
        # httpx sets the multipart Content-Type carrying its boundary
        headers.pop("Content-Type", None)
        return client.build_request(call.method, call.url, headers=headers, files=call.body.files)
    headers["Content-Type"] = call.body.content_type
    return client.build_request(call.method, call.url, headers=headers, content=call.body.content)


def build_envelope(response: httpx.Response, call: PreparedCall) -> RestResponse[Any]:
    """Build the envelope of a call from a buffered response.

    The body is decoded only for successful responses. A decoding
    failure leaves ``data`` empty without marking the envelope as
    unsuccessful.

    Args:
        response: The response of the terminal attempt, already read.
        call: The prepared call.

    Returns:
        The envelope describing the response.
    """
    raw_content = response.text
    is_success = response.is_success
    headers: dict[str, list[str]] = {}
    for name, value in response.headers.multi_items():
        headers.setdefault(name, []).append(value)
    return RestResponse(
        data=(
            decode(raw_content, is_success, call.response_type, adapter=call.adapter)
            if is_success
            else None
        ),
        status=response.status_code,
        status_text=response.reason_phrase or _reason_phrase(response.status_code),
        headers=headers,
        raw_content=raw_content,
        is_success=is_success,
        error_message=(
            None if is_success else f"Request failed with status code {response.status_code}"
        ),
        method=call.method,
        url=call.url,
    )


def build_failure_envelope(exc: Exception, call: PreparedCall) -> RestResponse[Any]:
    """Build the envelope of a call whose last attempt raised.

    Args:
        exc: The exception raised by the last attempt.
        call: The prepared call.

    Returns:
        An unsuccessful envelope carrying the exception, with a generic
        server error status.
    """
    return RestResponse(
        status=SERVER_ERROR_STATUS,
        status_text=SERVER_ERROR_TEXT,
        is_success=False,
        error_message=str(exc) or type(exc).__name__,
        exception=exc,
        method=call.method,
        url=call.url,
    )


def build_exhausted_envelope(call: PreparedCall) -> RestResponse[Any]:
    """Build the envelope of a call that ran out of attempts without
    recording an exception.

    Args:
        call: The prepared call.

    Returns:
        An unsuccessful envelope with a generic server error status.
    """
    return RestResponse(
        status=SERVER_ERROR_STATUS,
        status_text=SERVER_ERROR_TEXT,
        is_success=False,
        error_message="Request failed after all retry attempts",
        method=call.method,
        url=call.url,
    )


def _reason_phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return str(status_code)
