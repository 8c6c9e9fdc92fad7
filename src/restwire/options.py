r"""Structured request options consumed by the generic dispatcher."""

from __future__ import annotations

__all__ = ["RequestOptions"]

from dataclasses import dataclass
from typing import Any

from restwire.codec import ContentType


@dataclass
class RequestOptions:
    """Description of one request for the generic dispatcher.

    Args:
        url: The request URL, absolute or relative to the base URL.
        method: The HTTP method name, case-insensitive.
        headers: Request specific headers.
        data: The request body. Its accepted shape depends on
            ``content_type``.
        content_type: The declared content type of the body.
        timeout_ms: Optional timeout override in milliseconds.
        base_url: Optional base URL override.
        max_retries: Optional override of the maximum number of retries.
        validate_ssl: Optional override of TLS certificate validation.

    Example:
        ```pycon
        >>> from restwire.options import RequestOptions
        >>> options = RequestOptions(url="/users", method="post", data={"name": "Ada"})
        >>> options.has_client_overrides()
        False
        >>> RequestOptions(url="/users", max_retries=2).has_client_overrides()
        True

        ```
    """

    url: str | None = None
    method: str = "GET"
    headers: dict[str, str] | None = None
    data: Any = None
    content_type: ContentType = ContentType.JSON
    timeout_ms: int | None = None
    base_url: str | None = None
    max_retries: int | None = None
    validate_ssl: bool | None = None

    def has_client_overrides(self) -> bool:
        """Indicate if the options override any client level setting.

        Returns:
            ``True`` if a timeout, base URL, retry count or TLS
            validation flag is set.
        """
        return any(
            value is not None
            for value in (self.timeout_ms, self.base_url, self.max_retries, self.validate_ssl)
        )

    def config_overrides(self) -> dict[str, Any]:
        """Return the client configuration overrides of these options.

        Returns:
            Keyword arguments for ``ClientConfig.merge``.
        """
        return {
            "base_url": self.base_url,
            "timeout_ms": self.timeout_ms,
            "max_retry_attempts": self.max_retries,
            "validate_ssl_certificates": self.validate_ssl,
        }
