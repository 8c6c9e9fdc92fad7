r"""Core shared logic for sync and async restwire clients.

This package contains the configuration, validation and request
pipeline helpers used by both the synchronous and asynchronous clients.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_MAX_RETRY_ATTEMPTS",
    "DEFAULT_RETRY_DELAY_MS",
    "DEFAULT_TIMEOUT_MS",
    "SUPPORTED_METHODS",
    "ClientConfig",
    "validate_config",
    "validate_method",
    "validate_retry_params",
    "validate_timeout",
    "validate_url",
]

from restwire.core.config import (
    DEFAULT_MAX_RETRY_ATTEMPTS,
    DEFAULT_RETRY_DELAY_MS,
    DEFAULT_TIMEOUT_MS,
    ClientConfig,
)
from restwire.core.validation import (
    SUPPORTED_METHODS,
    validate_config,
    validate_method,
    validate_retry_params,
    validate_timeout,
    validate_url,
)
