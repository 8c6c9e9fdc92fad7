r"""Validation utilities for client configuration and request
parameters.

Configuration objects never validate themselves when they are created.
The checks in this module run when a client is constructed and when a
request is dispatched, so that invalid values surface as
``ConfigurationError`` before any network attempt.
"""

from __future__ import annotations

__all__ = [
    "SUPPORTED_METHODS",
    "validate_config",
    "validate_method",
    "validate_retry_params",
    "validate_timeout",
    "validate_url",
]

from typing import TYPE_CHECKING

from restwire.exceptions import ConfigurationError, UnsupportedMethodError

if TYPE_CHECKING:
    from restwire.core.config import ClientConfig

SUPPORTED_METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH", "HEAD")


def validate_timeout(timeout_ms: float) -> None:
    """Validate the request timeout.

    Args:
        timeout_ms: Maximum milliseconds to wait for a response.
            Must be > 0.

    Raises:
        ConfigurationError: If ``timeout_ms`` is <= 0.

    Example:
        ```pycon
        >>> from restwire.core.validation import validate_timeout
        >>> validate_timeout(30_000)
        >>> validate_timeout(0)  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        restwire.exceptions.ConfigurationError: timeout_ms must be > 0, got 0

        ```
    """
    if timeout_ms <= 0:
        msg = f"timeout_ms must be > 0, got {timeout_ms}"
        raise ConfigurationError(msg)


def validate_retry_params(max_retry_attempts: int, retry_delay_ms: float) -> None:
    """Validate retry parameters.

    Args:
        max_retry_attempts: Maximum number of retries after the initial
            attempt. Must be >= 0.
        retry_delay_ms: Base delay between attempts in milliseconds.
            Must be >= 0.

    Raises:
        ConfigurationError: If a parameter is negative.

    Example:
        ```pycon
        >>> from restwire.core.validation import validate_retry_params
        >>> validate_retry_params(max_retry_attempts=3, retry_delay_ms=500)
        >>> validate_retry_params(max_retry_attempts=-1, retry_delay_ms=500)  # doctest: +SKIP

        ```
    """
    if max_retry_attempts < 0:
        msg = f"max_retry_attempts must be >= 0, got {max_retry_attempts}"
        raise ConfigurationError(msg)
    if retry_delay_ms < 0:
        msg = f"retry_delay_ms must be >= 0, got {retry_delay_ms}"
        raise ConfigurationError(msg)


def validate_config(config: ClientConfig) -> None:
    """Validate a client configuration.

    Args:
        config: The configuration to check.

    Raises:
        ConfigurationError: If any value is out of range.
    """
    validate_timeout(config.timeout_ms)
    validate_retry_params(
        max_retry_attempts=config.max_retry_attempts,
        retry_delay_ms=config.retry_delay_ms,
    )


def validate_method(method: str) -> str:
    """Normalize and validate an HTTP method name.

    Args:
        method: The method name, in any case.

    Returns:
        The upper-case method name.

    Raises:
        UnsupportedMethodError: If the method is not one of GET, POST,
            PUT, DELETE, PATCH or HEAD.

    Example:
        ```pycon
        >>> from restwire.core.validation import validate_method
        >>> validate_method("post")
        'POST'

        ```
    """
    normalized = method.upper()
    if normalized not in SUPPORTED_METHODS:
        raise UnsupportedMethodError(normalized)
    return normalized


def validate_url(url: str | None) -> str:
    """Check that a request URL is present.

    Args:
        url: The URL to check.

    Returns:
        The URL unchanged.

    Raises:
        ConfigurationError: If the URL is ``None`` or empty.
    """
    if not url:
        msg = "A request URL is required"
        raise ConfigurationError(msg)
    return url
