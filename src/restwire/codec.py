r"""Content encoding and decoding for request and response bodies.

This module provides the content codec: ``encode`` turns a request body
into a wire payload together with its content type, and ``decode`` turns
a buffered response body into a value of the requested type.

Example:
    ```pycon
    >>> from restwire.codec import ContentType, decode, encode
    >>> encoded = encode({"a": "x y", "b": "p@q"}, ContentType.FORM_URLENCODED)
    >>> encoded.content
    b'a=x+y&b=p%40q'
    >>> encoded.content_type
    'application/x-www-form-urlencoded'
    >>> decode('{"id": 1}', True)
    {'id': 1}

    ```
"""

from __future__ import annotations

__all__ = [
    "ContentType",
    "EncodedBody",
    "decode",
    "encode",
    "read_streams_async",
    "resolve_type_adapter",
]

import asyncio
import enum
import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache
from typing import Any
from urllib.parse import urlencode

from pydantic import TypeAdapter, ValidationError

from restwire.exceptions import ConfigurationError

logger: logging.Logger = logging.getLogger(__name__)

_BYTES_TYPES = (bytes, bytearray, memoryview)


class ContentType(enum.Enum):
    r"""Declared content type of a request body."""

    JSON = "application/json"
    FORM_URLENCODED = "application/x-www-form-urlencoded"
    FORM_DATA = "multipart/form-data"
    BINARY = "application/octet-stream"


@dataclass(frozen=True)
class EncodedBody:
    """Wire representation of a request body.

    The body is encoded once per call and reused to build a fresh
    ``httpx.Request`` on every attempt, so streams are read into memory
    when the body is encoded.

    A multipart body keeps its parts in ``files`` instead of ``content``.
    ``httpx`` renders them, with a fresh boundary and the matching
    ``Content-Type`` header, each time a request is built.

    Attributes:
        content_type: The declared media type of the body.
        content: The raw payload, empty for a multipart body.
        files: The multipart parts keyed by field name, in the
            ``httpx`` ``files`` format, or ``None``.
    """

    content_type: str
    content: bytes = b""
    files: dict[str, tuple[Any, ...]] | None = None


def encode(body: Any, content_type: ContentType = ContentType.JSON) -> EncodedBody:
    r"""Encode a request body for the wire.

    Args:
        body: The body value. Its accepted shape depends on
            ``content_type``: any JSON-serializable value for ``JSON``,
            a mapping (or a JSON-serializable object) for the form
            content types, and bytes or a readable stream for
            ``BINARY``.
        content_type: The declared content type.

    Returns:
        The encoded body.

    Raises:
        ConfigurationError: If the body shape is not compatible with
            the declared content type.

    Example:
        ```pycon
        >>> from restwire.codec import ContentType, encode
        >>> encode({"name": "Ada"}).content
        b'{"name": "Ada"}'
        >>> encode(b"\x00\x01", ContentType.BINARY).content_type
        'application/octet-stream'

        ```
    """
    if content_type is ContentType.JSON:
        return _encode_json(body)
    if content_type is ContentType.FORM_URLENCODED:
        return _encode_form_urlencoded(body)
    if content_type is ContentType.FORM_DATA:
        return _encode_form_data(body)
    if content_type is ContentType.BINARY:
        return _encode_binary(body)
    msg = f"Content type {content_type} is not supported"
    raise ConfigurationError(msg)


def decode(
    raw_body: str,
    status_successful: bool,
    response_type: Any = Any,
    *,
    adapter: TypeAdapter[Any] | None = None,
) -> Any:
    r"""Decode a buffered response body into a value of the requested
    type.

    Decoding never raises: a body that is not valid JSON, a body that
    does not validate against ``response_type``, or a type ``pydantic``
    cannot validate gives ``None``.

    Args:
        raw_body: The response body as text.
        status_successful: Whether the HTTP status was in the 2xx range.
        response_type: The target type. ``str`` returns the raw text
            unchanged, ``Any`` returns the parsed JSON value, and any
            other type is validated with ``pydantic``.
        adapter: An adapter already resolved for ``response_type``
            with ``resolve_type_adapter``.

    Returns:
        The decoded value, or ``None`` if the response was unsuccessful,
        the body was blank or decoding failed.

    Example:
        ```pycon
        >>> from restwire.codec import decode
        >>> decode("[1, 2]", True, list[int])
        [1, 2]
        >>> decode("not json", True, dict) is None
        True
        >>> decode("not json", True, str)
        'not json'
        >>> decode('{"id": 1}', False) is None
        True

        ```
    """
    if not status_successful or not raw_body or raw_body.isspace():
        return None
    if response_type is str:
        return raw_body
    if adapter is None:
        try:
            adapter = resolve_type_adapter(response_type)
        except ConfigurationError as exc:
            logger.debug(f"Could not decode response body: {exc}")
            return None
    try:
        return adapter.validate_json(raw_body)
    except (ValidationError, ValueError) as exc:
        logger.debug(f"Could not decode response body as {response_type!r}: {exc}")
        return None


def resolve_type_adapter(response_type: Any) -> TypeAdapter[Any]:
    r"""Return the ``pydantic`` adapter validating ``response_type``.

    Adapters of hashable types are cached.

    Args:
        response_type: The type response bodies are decoded into.

    Returns:
        The type adapter.

    Raises:
        ConfigurationError: If ``pydantic`` cannot build a validator
            for ``response_type``.

    Example:
        ```pycon
        >>> from restwire.codec import resolve_type_adapter
        >>> resolve_type_adapter(list[int]).validate_json("[1, 2]")
        [1, 2]

        ```
    """
    try:
        if _is_hashable(response_type):
            return _cached_type_adapter(response_type)
        return TypeAdapter(response_type)
    # PydanticSchemaGenerationError and the other pydantic user errors are TypeError
    except (TypeError, NameError) as exc:
        msg = f"Responses cannot be decoded into {response_type!r}: {exc}"
        raise ConfigurationError(msg) from exc


async def read_streams_async(body: Any, content_type: ContentType) -> Any:
    r"""Read the streams of a body in a worker thread.

    Binary and multipart bodies may hold file objects whose ``read``
    blocks. The asynchronous client reads them here, off the event
    loop, before encoding.

    Args:
        body: The request body.
        content_type: The declared content type of ``body``.

    Returns:
        ``body`` with every readable stream replaced by its content.
    """
    if content_type is ContentType.BINARY and _is_readable(body):
        return await asyncio.to_thread(_read_stream, body)
    if content_type is ContentType.FORM_DATA and isinstance(body, Mapping):
        return {
            key: await asyncio.to_thread(_read_stream, value) if _is_readable(value) else value
            for key, value in body.items()
        }
    return body


@lru_cache(maxsize=128)
def _cached_type_adapter(response_type: Any) -> TypeAdapter[Any]:
    return TypeAdapter(response_type)


def _is_hashable(value: Any) -> bool:
    try:
        hash(value)
    except TypeError:
        return False
    return True


def _encode_json(body: Any) -> EncodedBody:
    try:
        payload = json.dumps(body)
    except (TypeError, ValueError) as exc:
        msg = f"Body of type {type(body).__name__} is not JSON serializable: {exc}"
        raise ConfigurationError(msg) from exc
    return EncodedBody(content_type=ContentType.JSON.value, content=payload.encode("utf-8"))


def _encode_form_urlencoded(body: Any) -> EncodedBody:
    fields = {key: _stringify(value) for key, value in _to_mapping(body).items()}
    return EncodedBody(
        content_type=ContentType.FORM_URLENCODED.value,
        content=urlencode(fields).encode("ascii"),
    )


def _encode_form_data(body: Any) -> EncodedBody:
    files: dict[str, tuple[Any, ...]] = {}
    for key, value in _to_mapping(body).items():
        if isinstance(value, _BYTES_TYPES) or _is_readable(value):
            payload = bytes(value) if isinstance(value, _BYTES_TYPES) else _read_stream(value)
            files[key] = (key, payload, ContentType.BINARY.value)
        else:
            # A part without filename is rendered as a plain text field
            files[key] = (None, _stringify(value))
    return EncodedBody(content_type=ContentType.FORM_DATA.value, files=files)


def _encode_binary(body: Any) -> EncodedBody:
    if isinstance(body, _BYTES_TYPES):
        payload = bytes(body)
    elif _is_readable(body):
        payload = _read_stream(body)
    else:
        msg = (
            "Binary content type requires bytes or a readable stream, "
            f"got {type(body).__name__}"
        )
        raise ConfigurationError(msg)
    return EncodedBody(content_type=ContentType.BINARY.value, content=payload)


def _to_mapping(body: Any) -> dict[str, Any]:
    r"""Coerce a form body into a string-keyed mapping, preserving
    order."""
    if isinstance(body, Mapping) and all(isinstance(key, str) for key in body):
        return dict(body)
    try:
        converted = json.loads(json.dumps(body, default=_object_fields))
    except (TypeError, ValueError) as exc:
        msg = f"Form body of type {type(body).__name__} cannot be converted to a mapping"
        raise ConfigurationError(msg) from exc
    if not isinstance(converted, dict):
        msg = f"Form body of type {type(body).__name__} cannot be converted to a mapping"
        raise ConfigurationError(msg)
    return converted


def _object_fields(value: Any) -> Any:
    if hasattr(value, "model_dump"):
        return value.model_dump(mode="json")
    if hasattr(value, "__dict__"):
        return vars(value)
    msg = f"Object of type {type(value).__name__} is not JSON serializable"
    raise TypeError(msg)


def _stringify(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _is_readable(value: Any) -> bool:
    return callable(getattr(value, "read", None))


def _read_stream(stream: Any) -> bytes:
    payload = stream.read()
    if isinstance(payload, str):
        return payload.encode("utf-8")
    return bytes(payload)
