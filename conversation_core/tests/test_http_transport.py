import httpx
import pytest

from conversation_core.domain.exceptions import ApiError, RateLimitError, TransportError, ValidationError
from conversation_core.transport.http_client import HttpTransport


def test_request_headers_and_url(fake_http, settings_stub):
    fake_http.queue(payload={"ok": True})
    data = HttpTransport(settings_stub).request("GET", "/v1/conversations", params={"page_size": 1})
    req = fake_http.requests[0]
    assert data == {"ok": True}
    assert req["url"] == "https://api.nexmo.com/v1/conversations"
    assert req["params"] == {"page_size": 1}
    assert req["headers"]["Authorization"] == "Bearer token-123"
    assert "Content-Type" not in req["headers"]


def test_token_provider_takes_precedence(fake_http, settings_stub):
    fake_http.queue(payload={})
    HttpTransport(settings_stub, token_provider=lambda: "jwt-abc").request("GET", "/v1/conversations")
    assert fake_http.requests[0]["headers"]["Authorization"] == "Bearer jwt-abc"


def test_missing_token_raises_before_request(fake_http, settings_stub):
    settings_stub.api_token = None
    with pytest.raises(ValidationError) as exc_info:
        HttpTransport(settings_stub).request("GET", "/v1/conversations")
    assert exc_info.value.code == "MISSING_API_TOKEN"
    assert fake_http.requests == []


def test_api_error_keeps_structured_body(fake_http, settings_stub):
    body = {
        "type": "https://developer.nexmo.com/api-errors/conversation#not-found",
        "title": "Not found.",
        "detail": "Conversation does not exist",
        "instance": "abc",
    }
    fake_http.queue(status_code=404, payload=body)
    with pytest.raises(ApiError) as exc_info:
        HttpTransport(settings_stub).request("GET", "/v1/conversations/CON-404")
    err = exc_info.value
    assert err.http_status == 404
    assert err.body == body
    assert err.message == "Not found.: Conversation does not exist"


def test_api_error_with_plain_text_body(fake_http, settings_stub):
    fake_http.queue(status_code=500, text="internal error")
    with pytest.raises(ApiError) as exc_info:
        HttpTransport(settings_stub).request("DELETE", "/v1/conversations/CON-1")
    assert exc_info.value.body is None
    assert exc_info.value.message == "internal error"


def test_rate_limit(fake_http, settings_stub):
    fake_http.queue(status_code=429, text="")
    with pytest.raises(RateLimitError) as exc_info:
        HttpTransport(settings_stub).request("GET", "/v1/conversations")
    assert isinstance(exc_info.value, ApiError)
    assert exc_info.value.http_status == 429


def test_network_error_wrapped(monkeypatch, settings_stub):
    class Client:
        def __init__(self, *a, **kw):
            pass

        def __enter__(self):
            return self

        def __exit__(self, *a):
            return False

        def request(self, *a, **kw):
            raise httpx.ConnectError("connection refused")

    monkeypatch.setattr("httpx.Client", Client)
    with pytest.raises(TransportError) as exc_info:
        HttpTransport(settings_stub).request("GET", "/v1/conversations")
    assert exc_info.value.code == "TRANSPORT_ERROR"


def test_empty_success_body_is_none(fake_http, settings_stub):
    resp = fake_http.queue(status_code=200, text="")
    assert HttpTransport(settings_stub).request("DELETE", "/v1/conversations/CON-1") is None
    assert resp.json_calls == 0
