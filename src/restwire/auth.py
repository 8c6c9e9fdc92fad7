r"""Helpers building authentication header values.

Example:
    ```pycon
    >>> from restwire.auth import api_key, basic, bearer
    >>> bearer("abc123")
    'Bearer abc123'
    >>> basic("user", "pass")
    'Basic dXNlcjpwYXNz'
    >>> api_key("X-API-Key", "secret")
    ('X-API-Key', 'secret')

    ```
"""

from __future__ import annotations

__all__ = ["AUTHORIZATION_HEADER", "api_key", "basic", "bearer"]

import base64

AUTHORIZATION_HEADER = "Authorization"


def bearer(token: str) -> str:
    """Return the ``Authorization`` value of a bearer token."""
    return f"Bearer {token}"


def basic(username: str, password: str) -> str:
    """Return the ``Authorization`` value of HTTP basic authentication.

    Args:
        username: The user name.
        password: The password.

    Returns:
        ``Basic`` followed by the Base64 encoding of the UTF-8 bytes of
        ``username:password``.
    """
    credentials = f"{username}:{password}".encode()
    return f"Basic {base64.b64encode(credentials).decode('ascii')}"


def api_key(header_name: str, key: str) -> tuple[str, str]:
    """Return the header carrying an API key, as a ``(name, value)``
    pair."""
    return header_name, key
