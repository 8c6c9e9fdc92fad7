r"""Retry policy and executors running the attempts of a call."""

from __future__ import annotations

__all__ = ["AsyncRetryExecutor", "RetryExecutor", "RetryPolicy"]

from restwire.retry.executor import RetryExecutor
from restwire.retry.executor_async import AsyncRetryExecutor
from restwire.retry.policy import RetryPolicy
