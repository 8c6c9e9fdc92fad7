r"""Retry policy deciding whether to retry and how long to wait.

The policy only ever sees transport-level failures: a response with a
non-2xx status ends the call and is never retried.
"""

from __future__ import annotations

__all__ = ["RetryPolicy"]

import logging
from typing import TYPE_CHECKING

from restwire.backoff import ConstantBackoff, ExponentialBackoff

if TYPE_CHECKING:
    from restwire.backoff import BaseBackoffStrategy
    from restwire.core.config import ClientConfig

logger: logging.Logger = logging.getLogger(__name__)


class RetryPolicy:
    """Attempt budget and backoff delays of a call.

    Args:
        max_retry_attempts: Maximum number of retries after the initial
            attempt. The call makes at most ``max_retry_attempts + 1``
            attempts.
        backoff_strategy: Strategy computing the delay before each
            retry, in seconds.

    Example:
        ```pycon
        >>> from restwire.core.config import ClientConfig
        >>> from restwire.retry import RetryPolicy
        >>> policy = RetryPolicy.from_config(
        ...     ClientConfig(max_retry_attempts=3, retry_delay_ms=100)
        ... )
        >>> policy.max_attempts
        4
        >>> [policy.delay(attempt) for attempt in (1, 2, 3)]
        [0.1, 0.2, 0.4]

        ```
    """

    def __init__(self, max_retry_attempts: int, backoff_strategy: BaseBackoffStrategy) -> None:
        self.max_retry_attempts = max_retry_attempts
        self.backoff_strategy = backoff_strategy

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(max_retry_attempts={self.max_retry_attempts}, "
            f"backoff_strategy={self.backoff_strategy!r})"
        )

    @classmethod
    def from_config(cls, config: ClientConfig) -> RetryPolicy:
        """Create the policy described by a client configuration.

        Args:
            config: The client configuration.

        Returns:
            A policy with exponential backoff if
            ``config.use_exponential_backoff`` is set, constant backoff
            otherwise. The base delay is ``config.retry_delay_ms``.
        """
        base_delay = config.retry_delay_ms / 1000
        strategy: BaseBackoffStrategy = (
            ExponentialBackoff(base_delay=base_delay)
            if config.use_exponential_backoff
            else ConstantBackoff(delay=base_delay)
        )
        return cls(max_retry_attempts=config.max_retry_attempts, backoff_strategy=strategy)

    @property
    def max_attempts(self) -> int:
        """The total number of attempts, including the initial one."""
        return self.max_retry_attempts + 1

    def should_retry(self, attempt: int) -> bool:
        """Indicate if another attempt is allowed.

        Args:
            attempt: The number of attempts that already failed.

        Returns:
            ``True`` if ``attempt`` is below the attempt budget.
        """
        return attempt < self.max_attempts

    def delay(self, attempt: int) -> float:
        """Compute the delay before the next attempt.

        Args:
            attempt: The number of attempts that already failed
                (1-based). The first retry follows ``attempt=1``.

        Returns:
            The delay in seconds.
        """
        sleep_time = self.backoff_strategy.calculate(attempt - 1)
        logger.debug(f"Waiting {sleep_time:.2f}s before retry {attempt}/{self.max_retry_attempts}")
        return sleep_time
