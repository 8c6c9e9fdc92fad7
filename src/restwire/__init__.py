r"""restwire - HTTP client library with typed responses, interceptors
and automatic retry logic.

Built on top of the httpx library, restwire wraps every call in a
response envelope instead of raising on HTTP errors, so callers inspect
``is_success`` and ``status`` rather than catching exceptions.

Key Features:
    - Fluent request builder with query parameters and auth helpers
    - Request, response and error interceptors
    - JSON, form-urlencoded, multipart and binary request bodies
    - Typed response decoding with pydantic
    - Automatic retry with exponential or constant backoff on transport errors
    - Synchronous and asynchronous clients and module-level functions

Example:
    ```pycon
    >>> from restwire import RestClient
    >>> from restwire.core.config import ClientConfig
    >>> config = ClientConfig(base_url="https://api.example.com", max_retry_attempts=3)
    >>> with RestClient(config) as client:  # doctest: +SKIP
    ...     response = client.build().url("/users").with_query("page", 2).get()
    ...     if response.is_success:
    ...         print(response.data)
    ...

    ```
"""

from __future__ import annotations

__all__ = [
    "AsyncRestClient",
    "ClientConfig",
    "ConfigurationError",
    "ContentType",
    "HttpRequestError",
    "Interceptor",
    "RequestBuilder",
    "RequestOptions",
    "RestClient",
    "RestResponse",
    "RestwireError",
    "UnsupportedMethodError",
    "__version__",
    "delete",
    "delete_async",
    "get",
    "get_async",
    "head",
    "head_async",
    "patch",
    "patch_async",
    "post",
    "post_async",
    "put",
    "put_async",
    "request",
    "request_async",
]

from importlib.metadata import PackageNotFoundError, version

from restwire.builder import RequestBuilder
from restwire.client import RestClient
from restwire.client_async import AsyncRestClient
from restwire.codec import ContentType
from restwire.core.config import ClientConfig
from restwire.exceptions import (
    ConfigurationError,
    HttpRequestError,
    RestwireError,
    UnsupportedMethodError,
)
from restwire.functions import delete, get, head, patch, post, put, request
from restwire.functions_async import (
    delete_async,
    get_async,
    head_async,
    patch_async,
    post_async,
    put_async,
    request_async,
)
from restwire.interceptors import Interceptor
from restwire.options import RequestOptions
from restwire.response import RestResponse

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
