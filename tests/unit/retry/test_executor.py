r"""Unit tests for the synchronous retry executor."""

from __future__ import annotations

from unittest.mock import Mock, call

import httpx
import pytest

from restwire.backoff import ConstantBackoff, ExponentialBackoff
from restwire.core.config import ClientConfig
from restwire.core.pipeline import prepare_call
from restwire.interceptors import Interceptor, InterceptorChain
from restwire.retry import RetryExecutor, RetryPolicy

TEST_URL = "https://api.example.com/items"


def _execute(
    transport: httpx.MockTransport,
    policy: RetryPolicy,
    *interceptors: Interceptor,
    response_type: type = dict,
):
    executor = RetryExecutor(policy, InterceptorChain(interceptors))
    with httpx.Client(transport=transport) as client:
        return executor.execute(
            client, prepare_call(ClientConfig(), "GET", TEST_URL, response_type=response_type)
        )


def _flaky_transport(failures: int, seen: list[httpx.Request]) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if len(seen) <= failures:
            msg = "Connection reset"
            raise httpx.ReadError(msg, request=request)
        return httpx.Response(200, json={"ok": True})

    return httpx.MockTransport(handler)


###################################
#     Tests for RetryExecutor     #
###################################


def test_retry_executor_success_first_attempt(
    mock_sleep: Mock, ok_transport: httpx.MockTransport, requests_seen: list[httpx.Request]
) -> None:
    response = _execute(ok_transport, RetryPolicy(3, ExponentialBackoff()))
    assert response.is_success
    assert response.data == {"method": "GET", "path": "/items"}
    assert len(requests_seen) == 1
    mock_sleep.assert_not_called()


def test_retry_executor_exhausts_all_attempts(
    mock_sleep: Mock, failing_transport: httpx.MockTransport, requests_seen: list[httpx.Request]
) -> None:
    spy = Mock(wraps=Interceptor())
    response = _execute(failing_transport, RetryPolicy(3, ExponentialBackoff(0.1)), spy)

    assert len(requests_seen) == 4
    assert spy.on_request.call_count == 4
    assert spy.on_error.call_count == 4
    spy.on_response.assert_not_called()
    assert mock_sleep.call_args_list == [call(0.1), call(0.2), call(0.4)]
    assert not response.is_success
    assert response.status == 500
    assert response.error_message == "Connection refused"
    assert isinstance(response.exception, httpx.ConnectError)
    assert response.data is None


def test_retry_executor_zero_retries(
    mock_sleep: Mock, failing_transport: httpx.MockTransport, requests_seen: list[httpx.Request]
) -> None:
    spy = Mock(wraps=Interceptor())
    response = _execute(failing_transport, RetryPolicy(0, ExponentialBackoff()), spy)
    assert len(requests_seen) == 1
    spy.on_error.assert_called_once()
    mock_sleep.assert_not_called()
    assert not response.is_success


def test_retry_executor_constant_backoff(
    mock_sleep: Mock, failing_transport: httpx.MockTransport
) -> None:
    _execute(failing_transport, RetryPolicy(3, ConstantBackoff(0.5)))
    assert mock_sleep.call_args_list == [call(0.5), call(0.5), call(0.5)]


def test_retry_executor_recovers_after_failures(mock_sleep: Mock) -> None:
    seen: list[httpx.Request] = []
    response = _execute(_flaky_transport(2, seen), RetryPolicy(3, ExponentialBackoff(1.0)))
    assert response.is_success
    assert response.data == {"ok": True}
    assert response.exception is None
    assert len(seen) == 3
    assert mock_sleep.call_args_list == [call(1.0), call(2.0)]


def test_retry_executor_builds_fresh_request_per_attempt(mock_sleep: Mock) -> None:
    seen: list[httpx.Request] = []
    _execute(_flaky_transport(1, seen), RetryPolicy(1, ExponentialBackoff()))
    assert len(seen) == 2
    assert seen[0] is not seen[1]
    mock_sleep.assert_called_once_with(1.0)


@pytest.mark.parametrize("status_code", [400, 404, 500, 503])
def test_retry_executor_does_not_retry_http_errors(mock_sleep: Mock, status_code: int) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(status_code, text="failure")

    spy = Mock(wraps=Interceptor())
    response = _execute(httpx.MockTransport(handler), RetryPolicy(3, ExponentialBackoff()), spy)
    assert len(seen) == 1
    spy.on_response.assert_called_once()
    spy.on_error.assert_not_called()
    mock_sleep.assert_not_called()
    assert not response.is_success
    assert response.status == status_code
    assert response.error_message == f"Request failed with status code {status_code}"
    assert response.raw_content == "failure"


def test_retry_executor_interceptor_error_is_retried(
    mock_sleep: Mock, ok_transport: httpx.MockTransport, requests_seen: list[httpx.Request]
) -> None:
    class FailOnce(Interceptor):
        def __init__(self) -> None:
            self.calls = 0

        def on_request(self, request: httpx.Request) -> httpx.Request:
            self.calls += 1
            if self.calls == 1:
                msg = "token refresh failed"
                raise RuntimeError(msg)
            return request

    response = _execute(ok_transport, RetryPolicy(1, ExponentialBackoff()), FailOnce())
    assert response.is_success
    assert len(requests_seen) == 1
    mock_sleep.assert_called_once_with(1.0)


def test_retry_executor_on_error_exception_propagates(
    mock_sleep: Mock, failing_transport: httpx.MockTransport
) -> None:
    class Raising(Interceptor):
        def on_error(self, exc: Exception) -> None:
            msg = "abort"
            raise RuntimeError(msg) from exc

    with pytest.raises(RuntimeError, match=r"abort"):
        _execute(failing_transport, RetryPolicy(3, ExponentialBackoff()), Raising())
    mock_sleep.assert_not_called()


def test_retry_executor_interceptor_can_replace_response(
    mock_sleep: Mock, ok_transport: httpx.MockTransport
) -> None:
    class Replace(Interceptor):
        def on_response(self, response: httpx.Response) -> httpx.Response:
            return httpx.Response(200, json={"replaced": True})

    response = _execute(ok_transport, RetryPolicy(0, ExponentialBackoff()), Replace())
    assert response.data == {"replaced": True}
    mock_sleep.assert_not_called()
