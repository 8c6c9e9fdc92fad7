r"""Asynchronous retry executor for HTTP requests.

This module provides the AsyncRetryExecutor class, the asynchronous
counterpart of RetryExecutor. The transport send and the backoff sleep
are the only points where a call yields control.
"""

from __future__ import annotations

__all__ = ["AsyncRetryExecutor"]

import asyncio
import logging
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


class AsyncRetryExecutor:
    """Executes the attempts of an async call with retry on transport
    errors.

    Cancelling the task running ``execute`` aborts the in-flight send or
    the pending backoff sleep: ``asyncio.CancelledError`` is not an
    ``Exception`` and is never retried.

    Args:
        policy: The retry policy bounding the attempts and computing the
            backoff delays.
        interceptors: The interceptor chain invoked around each attempt.

    Example:
        ```pycon
        >>> import asyncio
        >>> import httpx
        >>> from restwire.core.config import ClientConfig
        >>> from restwire.core.pipeline import prepare_call
        >>> from restwire.interceptors import InterceptorChain
        >>> from restwire.retry import AsyncRetryExecutor, RetryPolicy
        >>> async def main():
        ...     transport = httpx.MockTransport(lambda request: httpx.Response(204))
        ...     config = ClientConfig()
        ...     executor = AsyncRetryExecutor(RetryPolicy.from_config(config), InterceptorChain())
        ...     async with httpx.AsyncClient(transport=transport) as client:
        ...         call = prepare_call(config, "DELETE", "https://api.example.com/items/1")
        ...         return await executor.execute(client, call)
        ...
        >>> asyncio.run(main()).status
        204

        ```
    """

    def __init__(self, policy: RetryPolicy, interceptors: InterceptorChain) -> None:
        self.policy = policy
        self.interceptors = interceptors

    async def execute(self, client: httpx.AsyncClient, call: PreparedCall) -> RestResponse[Any]:
        """Execute an async call with automatic retry logic.

        Args:
            client: The async transport client sending the requests.
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
                response = self.interceptors.run_on_response(await client.send(request))
                await response.aread()
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
                await asyncio.sleep(self.policy.delay(attempt))
            else:
                logger.debug(
                    f"{call.method} request to {call.url} completed with status "
                    f"{envelope.status} on attempt {attempt + 1}/{self.policy.max_attempts}"
                )
                return envelope
        return build_exhausted_envelope(call)
