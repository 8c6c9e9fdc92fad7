r"""Unit tests for RestClient.

Requests are answered by ``httpx.MockTransport`` handlers, so the whole
pipeline runs except for the network.
"""

from __future__ import annotations

import io
from http import HTTPStatus
from unittest.mock import Mock, call, patch

import httpx
import pytest
from pydantic import BaseModel

from restwire import RequestOptions, RestClient
from restwire.builder import RequestBuilder
from restwire.codec import ContentType
from restwire.core.config import ClientConfig
from restwire.exceptions import ConfigurationError, HttpRequestError, UnsupportedMethodError
from restwire.interceptors import Interceptor

BASE_URL = "https://api.example.com"
TEST_URL = f"{BASE_URL}/items"


class Item(BaseModel):
    id: int
    name: str


class Account:
    def __init__(self, owner: str) -> None:
        self.owner = owner


def _status_transport(status_code: int, text: str = "") -> httpx.MockTransport:
    return httpx.MockTransport(lambda request: httpx.Response(status_code, text=text))


################################
#     Tests for RestClient     #
################################


def test_client_get_typed(ok_transport: httpx.MockTransport) -> None:
    with RestClient(transport=ok_transport) as client:
        response = client.get(TEST_URL, response_type=dict[str, str])
    assert response.is_success
    assert response.status == 200
    assert response.status_code == HTTPStatus.OK
    assert response.data == {"method": "GET", "path": "/items"}
    assert response.method == "GET"
    assert response.url == TEST_URL


def test_client_get_pydantic_model() -> None:
    transport = httpx.MockTransport(
        lambda request: httpx.Response(200, json={"id": 1, "name": "bolt"})
    )
    with RestClient(transport=transport) as client:
        assert client.get(TEST_URL, response_type=Item).data == Item(id=1, name="bolt")


def test_client_get_text() -> None:
    with RestClient(transport=_status_transport(200, "plain text")) as client:
        assert client.get_text(TEST_URL) == "plain text"


def test_client_undecodable_body_keeps_raw_content() -> None:
    with RestClient(transport=_status_transport(200, "<html>oops</html>")) as client:
        response = client.get(TEST_URL, response_type=Item)
    assert response.is_success
    assert response.data is None
    assert response.raw_content == "<html>oops</html>"


def test_client_response_type_without_schema_raises_before_sending(
    mock_sleep: Mock, ok_transport: httpx.MockTransport, requests_seen: list[httpx.Request]
) -> None:
    config = ClientConfig(max_retry_attempts=2)
    with RestClient(config, transport=ok_transport) as client, pytest.raises(
        ConfigurationError, match=r"Responses cannot be decoded into"
    ):
        client.post(TEST_URL, body={"id": 1}, response_type=Account)
    assert requests_seen == []
    mock_sleep.assert_not_called()


def test_client_validation_failure_is_not_retried(
    mock_sleep: Mock, ok_transport: httpx.MockTransport, requests_seen: list[httpx.Request]
) -> None:
    config = ClientConfig(max_retry_attempts=2)
    with RestClient(config, transport=ok_transport) as client:
        response = client.post(TEST_URL, body={"id": 1}, response_type=list[int])
    assert response.is_success
    assert response.status == 200
    assert response.data is None
    assert response.error_message is None
    assert len(requests_seen) == 1
    mock_sleep.assert_not_called()


@pytest.mark.parametrize("method", ["get", "post", "put", "delete", "patch", "head"])
def test_client_verb_methods(
    method: str, ok_transport: httpx.MockTransport, requests_seen: list[httpx.Request]
) -> None:
    with RestClient(transport=ok_transport) as client:
        response = getattr(client, method)(TEST_URL)
    assert response.is_success
    assert requests_seen[0].method == method.upper()


@pytest.mark.parametrize(
    "method", ["get_text", "post_text", "put_text", "delete_text", "patch_text", "head_text"]
)
def test_client_text_methods(method: str) -> None:
    with RestClient(transport=_status_transport(200, "done")) as client:
        assert getattr(client, method)(TEST_URL) == "done"


def test_client_send_lowercase_method(
    ok_transport: httpx.MockTransport, requests_seen: list[httpx.Request]
) -> None:
    with RestClient(transport=ok_transport) as client:
        assert client.send("patch", TEST_URL).is_success
    assert requests_seen[0].method == "PATCH"


def test_client_relative_url_uses_base_url(
    ok_transport: httpx.MockTransport, requests_seen: list[httpx.Request]
) -> None:
    with RestClient(ClientConfig(base_url=f"{BASE_URL}/v1/"), transport=ok_transport) as client:
        client.get("/users")
    assert str(requests_seen[0].url) == f"{BASE_URL}/v1/users"


def test_client_relative_url_without_base_url(
    ok_transport: httpx.MockTransport, requests_seen: list[httpx.Request]
) -> None:
    with RestClient(transport=ok_transport) as client, pytest.raises(ConfigurationError):
        client.get("/users")
    assert requests_seen == []


def test_client_call_header_beats_default_header(
    ok_transport: httpx.MockTransport, requests_seen: list[httpx.Request]
) -> None:
    config = ClientConfig(default_headers={"Accept": "text/plain", "X-Client": "restwire"})
    with RestClient(config, transport=ok_transport) as client:
        client.get(TEST_URL, headers={"accept": "application/json"})
    headers = requests_seen[0].headers
    assert headers.get_list("Accept") == ["application/json"]
    assert headers["X-Client"] == "restwire"


def test_client_post_json_body(
    ok_transport: httpx.MockTransport, requests_seen: list[httpx.Request]
) -> None:
    with RestClient(transport=ok_transport) as client:
        client.post(TEST_URL, body={"name": "bolt"})
    assert requests_seen[0].headers["Content-Type"] == "application/json"
    assert requests_seen[0].content == b'{"name": "bolt"}'


def test_client_post_form_urlencoded(
    ok_transport: httpx.MockTransport, requests_seen: list[httpx.Request]
) -> None:
    with RestClient(transport=ok_transport) as client:
        client.post(
            TEST_URL,
            body={"a": "x y", "b": "p@q"},
            content_type=ContentType.FORM_URLENCODED,
        )
    assert requests_seen[0].headers["Content-Type"] == "application/x-www-form-urlencoded"
    assert requests_seen[0].content == b"a=x+y&b=p%40q"


def test_client_post_multipart(
    ok_transport: httpx.MockTransport, requests_seen: list[httpx.Request]
) -> None:
    with RestClient(transport=ok_transport) as client:
        client.post(TEST_URL, body={"file": b"\x89PNG"}, content_type=ContentType.FORM_DATA)
    request = requests_seen[0]
    content_type = request.headers["Content-Type"]
    assert content_type.startswith("multipart/form-data; boundary=")
    boundary = content_type.split("boundary=", 1)[1]
    assert request.content.startswith(f"--{boundary}\r\n".encode())
    assert b'filename="file"' in request.content
    assert b"\x89PNG" in request.content


def test_client_multipart_retry_resends_parts(mock_sleep: Mock) -> None:
    bodies: list[bytes] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(request.content)
        if len(bodies) == 1:
            msg = "Connection refused"
            raise httpx.ConnectError(msg)
        return httpx.Response(200)

    config = ClientConfig(max_retry_attempts=1)
    with RestClient(config, transport=httpx.MockTransport(handler)) as client:
        response = client.post(
            TEST_URL,
            body={"upload": io.BytesIO(b"payload")},
            content_type=ContentType.FORM_DATA,
        )
    assert response.is_success
    assert len(bodies) == 2
    assert all(b"\r\n\r\npayload\r\n" in body for body in bodies)
    mock_sleep.assert_called_once_with(1.0)


def test_client_put_binary(
    ok_transport: httpx.MockTransport, requests_seen: list[httpx.Request]
) -> None:
    with RestClient(transport=ok_transport) as client:
        client.put(TEST_URL, body=b"\x00\xff", content_type=ContentType.BINARY)
    assert requests_seen[0].headers["Content-Type"] == "application/octet-stream"
    assert requests_seen[0].content == b"\x00\xff"


def test_client_get_with_body(
    ok_transport: httpx.MockTransport, requests_seen: list[httpx.Request]
) -> None:
    with RestClient(transport=ok_transport) as client:
        client.get(TEST_URL, body={"q": 1})
    assert requests_seen[0].content == b'{"q": 1}'


def test_client_invalid_body_raises_before_sending(
    ok_transport: httpx.MockTransport, requests_seen: list[httpx.Request]
) -> None:
    with RestClient(transport=ok_transport) as client, pytest.raises(ConfigurationError):
        client.post(TEST_URL, body="not bytes", content_type=ContentType.BINARY)
    assert requests_seen == []


def test_client_http_error_does_not_raise(mock_sleep: Mock) -> None:
    config = ClientConfig(max_retry_attempts=3)
    with RestClient(config, transport=_status_transport(400, '{"error": "bad"}')) as client:
        response = client.get(TEST_URL, response_type=dict)
    assert not response.is_success
    assert response.status == 400
    assert response.status_text == "Bad Request"
    assert response.data is None
    assert response.raw_content == '{"error": "bad"}'
    assert "400" in response.error_message
    mock_sleep.assert_not_called()


def test_client_raise_for_error() -> None:
    with RestClient(transport=_status_transport(404)) as client:
        response = client.get(TEST_URL)
    with pytest.raises(HttpRequestError, match=r"status code 404") as exc_info:
        response.raise_for_error()
    assert exc_info.value.status_code == 404
    assert exc_info.value.response is response


def test_client_retries_transport_errors(
    mock_sleep: Mock, failing_transport: httpx.MockTransport, requests_seen: list[httpx.Request]
) -> None:
    spy = Mock(wraps=Interceptor())
    config = ClientConfig(max_retry_attempts=3, retry_delay_ms=200)
    with RestClient(config, interceptors=[spy], transport=failing_transport) as client:
        response = client.get(TEST_URL)
    assert len(requests_seen) == 4
    assert spy.on_error.call_count == 4
    assert mock_sleep.call_args_list == [call(0.2), call(0.4), call(0.8)]
    assert not response.is_success
    assert response.status == 500
    assert isinstance(response.exception, httpx.ConnectError)
    with pytest.raises(HttpRequestError) as exc_info:
        response.raise_for_error()
    assert exc_info.value.__cause__ is response.exception


def test_client_constant_backoff(
    mock_sleep: Mock, failing_transport: httpx.MockTransport
) -> None:
    config = ClientConfig(max_retry_attempts=2, retry_delay_ms=300, use_exponential_backoff=False)
    with RestClient(config, transport=failing_transport) as client:
        client.get(TEST_URL)
    assert mock_sleep.call_args_list == [call(0.3), call(0.3)]


def test_client_interceptors_run_in_order(
    ok_transport: httpx.MockTransport, requests_seen: list[httpx.Request]
) -> None:
    order: list[str] = []

    class Writer(Interceptor):
        def __init__(self, value: str) -> None:
            self.value = value

        def on_request(self, request: httpx.Request) -> httpx.Request:
            order.append(self.value)
            request.headers["X-Order"] = self.value
            return request

    interceptors = [Writer("first"), Writer("second")]
    with RestClient(interceptors=interceptors, transport=ok_transport) as client:
        client.get(TEST_URL)
    assert order == ["first", "second"]
    assert requests_seen[0].headers["X-Order"] == "second"


def test_client_interceptor_added_after_creation(
    ok_transport: httpx.MockTransport, requests_seen: list[httpx.Request]
) -> None:
    class Tag(Interceptor):
        def on_request(self, request: httpx.Request) -> httpx.Request:
            request.headers["X-Tag"] = "late"
            return request

    with RestClient(transport=ok_transport) as client:
        client.interceptors.add(Tag())
        client.get(TEST_URL)
    assert requests_seen[0].headers["X-Tag"] == "late"


def test_client_invalid_config() -> None:
    with pytest.raises(ConfigurationError, match=r"timeout_ms must be > 0"):
        RestClient(ClientConfig(timeout_ms=0))


def test_client_uses_config_for_httpx_client() -> None:
    config = ClientConfig(timeout_ms=2500, validate_ssl_certificates=False)
    with patch("httpx.Client") as mock_client_class:
        RestClient(config)
    mock_client_class.assert_called_once_with(timeout=2.5, verify=False, transport=None)


def test_client_build_returns_builder() -> None:
    with RestClient() as client:
        assert isinstance(client.build(), RequestBuilder)


def test_client_close() -> None:
    client = RestClient()
    assert not client.closed
    client.close()
    assert client.closed
    client.close()
    with pytest.raises(RuntimeError, match=r"has been closed"):
        client.get(TEST_URL)


def test_client_context_manager_closes_on_exception() -> None:
    msg = "test error"
    with pytest.raises(ValueError, match=r"test error"), RestClient() as client:
        raise ValueError(msg)
    assert client.closed


def test_client_enter_after_close_raises() -> None:
    client = RestClient()
    client.close()
    with pytest.raises(RuntimeError, match=r"has been closed"), client:
        pass


def test_client_repr() -> None:
    with RestClient() as client:
        assert repr(client).startswith("RestClient(config=ClientConfig(")


########################################
#     Tests for RestClient.request     #
########################################


def test_client_request_options(
    ok_transport: httpx.MockTransport, requests_seen: list[httpx.Request]
) -> None:
    options = RequestOptions(
        url=TEST_URL,
        method="post",
        headers={"X-A": "1"},
        data={"a": "b"},
        content_type=ContentType.FORM_URLENCODED,
    )
    with RestClient(transport=ok_transport) as client:
        response = client.request(options, response_type=dict)
    assert response.is_success
    assert response.options is options
    assert requests_seen[0].method == "POST"
    assert requests_seen[0].headers["X-A"] == "1"
    assert requests_seen[0].content == b"a=b"


@pytest.mark.parametrize("method", ["OPTIONS", "TRACE", "CONNECT"])
def test_client_request_unsupported_method(
    method: str, ok_transport: httpx.MockTransport, requests_seen: list[httpx.Request]
) -> None:
    with RestClient(transport=ok_transport) as client, pytest.raises(UnsupportedMethodError):
        client.request(RequestOptions(url=TEST_URL, method=method))
    assert requests_seen == []


def test_client_request_missing_url(
    ok_transport: httpx.MockTransport, requests_seen: list[httpx.Request]
) -> None:
    with RestClient(transport=ok_transport) as client, pytest.raises(
        ConfigurationError, match=r"A request URL is required"
    ):
        client.request(RequestOptions())
    assert requests_seen == []


def test_client_request_overrides_use_dedicated_client(
    mock_sleep: Mock, failing_transport: httpx.MockTransport, requests_seen: list[httpx.Request]
) -> None:
    options = RequestOptions(url=TEST_URL, max_retries=2)
    with RestClient(transport=failing_transport) as client:
        response = client.request(options)
        assert not client.closed
    assert len(requests_seen) == 3
    assert mock_sleep.call_count == 2
    assert response.options is options


def test_client_request_base_url_override(
    ok_transport: httpx.MockTransport, requests_seen: list[httpx.Request]
) -> None:
    config = ClientConfig(base_url=BASE_URL, default_headers={"X-Client": "restwire"})
    options = RequestOptions(url="/users", base_url="https://other.example.com")
    with RestClient(config, transport=ok_transport) as client:
        client.request(options)
    assert str(requests_seen[0].url) == "https://other.example.com/users"
    assert requests_seen[0].headers["X-Client"] == "restwire"


def test_client_request_override_keeps_interceptors(
    ok_transport: httpx.MockTransport,
) -> None:
    spy = Mock(wraps=Interceptor())
    with RestClient(interceptors=[spy], transport=ok_transport) as client:
        client.request(RequestOptions(url=TEST_URL, timeout_ms=500))
    spy.on_request.assert_called_once()


#############################################
#     Tests for RestClient.from_options     #
#############################################


def test_client_from_options(
    ok_transport: httpx.MockTransport, requests_seen: list[httpx.Request]
) -> None:
    options = RequestOptions(
        base_url=BASE_URL,
        headers={"Authorization": "Bearer t"},
        timeout_ms=3000,
        max_retries=2,
        validate_ssl=False,
    )
    with RestClient.from_options(options, transport=ok_transport) as client:
        assert client.config.base_url == BASE_URL
        assert client.config.timeout_ms == 3000
        assert client.config.max_retry_attempts == 2
        assert not client.config.validate_ssl_certificates
        client.get("/items")
    assert str(requests_seen[0].url) == TEST_URL
    assert requests_seen[0].headers["Authorization"] == "Bearer t"


def test_client_from_options_defaults() -> None:
    with RestClient.from_options(RequestOptions()) as client:
        assert client.config == ClientConfig()
