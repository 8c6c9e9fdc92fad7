from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import Mock, patch

import httpx
import pytest

from restwire.utils.structured_logging import clear_correlation_id

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture
def mock_sleep() -> Generator[Mock, None, None]:
    """Patch time.sleep to make tests run faster."""
    with patch("time.sleep", return_value=None) as mock:
        yield mock


@pytest.fixture
def mock_asleep() -> Generator[Mock, None, None]:
    """Patch asyncio.sleep to make tests run faster."""
    with patch("asyncio.sleep", return_value=None) as mock:
        yield mock


@pytest.fixture
def requests_seen() -> list[httpx.Request]:
    """Collect the requests received by the ``ok_transport``
    fixture."""
    return []


@pytest.fixture
def ok_transport(requests_seen: list[httpx.Request]) -> httpx.MockTransport:
    """Create a transport answering every request with ``200`` and a
    JSON body echoing the method and path."""

    def handler(request: httpx.Request) -> httpx.Response:
        requests_seen.append(request)
        return httpx.Response(
            200, json={"method": request.method, "path": request.url.path}, request=request
        )

    return httpx.MockTransport(handler)


@pytest.fixture
def failing_transport(requests_seen: list[httpx.Request]) -> httpx.MockTransport:
    """Create a transport raising a connection error for every
    request."""

    def handler(request: httpx.Request) -> httpx.Response:
        requests_seen.append(request)
        msg = "Connection refused"
        raise httpx.ConnectError(msg, request=request)

    return httpx.MockTransport(handler)


@pytest.fixture
def mock_callback() -> Mock:
    """Create a mock callback function for testing interceptors."""
    return Mock()


@pytest.fixture(autouse=True)
def _reset_correlation_id() -> Generator[None, None, None]:
    yield
    clear_correlation_id()
