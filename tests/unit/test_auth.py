from __future__ import annotations

import base64

from restwire import auth


def test_bearer() -> None:
    assert auth.bearer("abc123") == "Bearer abc123"


def test_basic() -> None:
    assert auth.basic("user", "pass") == "Basic dXNlcjpwYXNz"


def test_basic_utf8_credentials() -> None:
    value = auth.basic("zoë", "pässword:1")
    assert base64.b64decode(value.removeprefix("Basic ")).decode("utf-8") == "zoë:pässword:1"


def test_api_key() -> None:
    assert auth.api_key("X-API-Key", "secret") == ("X-API-Key", "secret")


def test_authorization_header_name() -> None:
    assert auth.AUTHORIZATION_HEADER == "Authorization"
