r"""Synchronous retry executor for HTTP requests.

This module provides the RetryExecutor class that runs the attempts of
a call: build the request, run the request interceptors, send it, run
the response interceptors and build the envelope, retrying with backoff
when an attempt raises.
"""

from __future__ import annotations

__all__ = ["RetryExecutor"]

import logging
import time
from typing import TYPE_CHECKING, Any

from restwire.core.pipeline import (
    build_envelope,
    build_exhausted_envelope,
    build_failure_envelope,
    build_request,
)

if TYPE_CHECKING:
    import httpx

    from restwire.core.pipeline import PreparedCall
    from restwire.interceptors import InterceptorChain
    from restwire.response import RestResponse
    from restwire.retry.policy import RetryPolicy

logger: logging.Logger = logging.getLogger(__name__)


class RetryExecutor:
    """Executes the attempts of a call with retry on transport errors.

    Only exceptions trigger a retry. A response with any status code,
    including 4xx and 5xx, ends the call and is returned as an envelope.

    Args:
        policy: The retry policy bounding the attempts and computing the
            backoff delays.
        interceptors: The interceptor chain invoked around each attempt.

    Example:
        ```pycon
        >>> import httpx
        >>> from restwire.core.config import ClientConfig
        >>> from restwire.core.pipeline import prepare_call
        >>> from restwire.interceptors import InterceptorChain
        >>> from restwire.retry import RetryExecutor, RetryPolicy
        >>> transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"id": 1}))
        >>> config = ClientConfig()
        >>> executor = RetryExecutor(RetryPolicy.from_config(config), InterceptorChain())
        >>> with httpx.Client(transport=transport) as client:
        ...     response = executor.execute(
        ...         client, prepare_call(config, "GET", "https://api.example.com/items/1")
        ...     )
        ...
        >>> response.data
        {'id': 1}

        ```
    """

    def __init__(self, policy: RetryPolicy, interceptors: InterceptorChain) -> None:
        self.policy = policy
        self.interceptors = interceptors

    def execute(self, client: httpx.Client, call: PreparedCall) -> RestResponse[Any]:
        """Execute a call with automatic retry logic.

        Args:
            client: The transport client sending the requests.
            call: The prepared call.

        Returns:
            The envelope built from the first response received, or a
            failure envelope carrying the last exception when every
            attempt raised.
        """
        attempt = 0
        while self.policy.should_retry(attempt):
            try:
                request = self.interceptors.run_on_request(build_request(client, call))
                response = self.interceptors.run_on_response(client.send(request))
                response.read()
                envelope = build_envelope(response, call)
            except Exception as exc:
                self.interceptors.run_on_error(exc)
                attempt += 1
                logger.debug(
                    f"{call.method} request to {call.url} raised {type(exc).__name__} on attempt "
                    f"{attempt}/{self.policy.max_attempts}: {exc}"
                )
                if not self.policy.should_retry(attempt):
                    return build_failure_envelope(exc, call)
                time.sleep(self.policy.delay(attempt))
            else:
                logger.debug(
                    f"{call.method} request to {call.url} completed with status "
                    f"{envelope.status} on attempt {attempt + 1}/{self.policy.max_attempts}"
                )
                return envelope
        return build_exhausted_envelope(call)
