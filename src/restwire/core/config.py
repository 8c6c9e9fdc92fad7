r"""Configuration dataclass and defaults for restwire clients.

This module provides configuration constants and an immutable
dataclass-based configuration object for ``RestClient`` and
``AsyncRestClient``.
"""

from __future__ import annotations

__all__ = [
    "ClientConfig",
    "DEFAULT_MAX_RETRY_ATTEMPTS",
    "DEFAULT_RETRY_DELAY_MS",
    "DEFAULT_TIMEOUT_MS",
]

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping

# Default timeout in milliseconds for HTTP requests (100 seconds)
DEFAULT_TIMEOUT_MS = 100_000

# Default maximum number of retries after the initial attempt
# Total attempts = max_retry_attempts + 1
DEFAULT_MAX_RETRY_ATTEMPTS = 0

# Default base delay between attempts in milliseconds
# With exponential backoff: 1st retry waits 1s, 2nd waits 2s, 3rd waits 4s
DEFAULT_RETRY_DELAY_MS = 1000


@dataclass(frozen=True)
class ClientConfig:
    """Static settings of a restwire client.

    The configuration is resolved once per client instance and is never
    mutated afterwards. It performs no validation when it is created;
    invalid values are reported with ``ConfigurationError`` when a
    client is constructed from it.

    Args:
        base_url: Optional URL prefixed to relative request URLs.
        default_headers: Headers sent with every request. Request
            specific headers with the same (case-insensitive) name take
            precedence.
        timeout_ms: Request timeout in milliseconds.
        max_retry_attempts: Maximum number of retries after the initial
            attempt when the transport raises. Must be >= 0.
        retry_delay_ms: Base delay between attempts in milliseconds.
            Must be >= 0.
        use_exponential_backoff: If ``True`` the delay doubles after
            every failed attempt, otherwise it stays constant.
        validate_ssl_certificates: If ``False`` TLS certificates are not
            verified by the transport.

    Example:
        ```pycon
        >>> from restwire.core.config import ClientConfig
        >>> config = ClientConfig()
        >>> config.max_retry_attempts
        0
        >>> config = ClientConfig(max_retry_attempts=3, retry_delay_ms=500)
        >>> merged = config.merge(max_retry_attempts=5)
        >>> merged.max_retry_attempts
        5
        >>> config.max_retry_attempts
        3

        ```
    """

    base_url: str | None = None
    default_headers: Mapping[str, str] = field(default_factory=dict)
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    max_retry_attempts: int = DEFAULT_MAX_RETRY_ATTEMPTS
    retry_delay_ms: int = DEFAULT_RETRY_DELAY_MS
    use_exponential_backoff: bool = True
    validate_ssl_certificates: bool = True

    def __post_init__(self) -> None:
        # Take a read-only copy so later changes to the caller's dict are not seen
        object.__setattr__(self, "default_headers", MappingProxyType(dict(self.default_headers)))

    @property
    def timeout(self) -> float:
        """The request timeout in seconds."""
        return self.timeout_ms / 1000

    def merge(self, **overrides: Any) -> ClientConfig:
        """Create a new config with the specified parameters overridden.

        Only non-None override values are applied.

        Args:
            **overrides: Keyword arguments for the fields to override.

        Returns:
            A new ``ClientConfig`` instance with the overrides applied.

        Example:
            ```pycon
            >>> from restwire.core.config import ClientConfig
            >>> config = ClientConfig(base_url="https://api.example.com")
            >>> config.merge(base_url=None, timeout_ms=5000).base_url
            'https://api.example.com'

            ```
        """
        filtered_overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **filtered_overrides)
