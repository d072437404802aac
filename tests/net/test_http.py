from __future__ import annotations

import httpx
import pytest

from atlas_api.errors import APIError
from atlas_api.net.http import HttpClient, redact_url


def test_request_sends_defaults_and_returns_response() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "GET"
        assert request.url.scheme == "https"
        assert request.url.host == "atlas.example"
        assert request.url.path == "/api/v2/probes/1/"
        assert request.url.query == b"key=FOO"
        assert request.headers.get("accept") == "application/json"
        assert request.headers.get("user-agent") == "test-agent"
        return httpx.Response(200, json={"ok": True}, request=request)

    client = HttpClient(user_agent="test-agent", transport=httpx.MockTransport(handler))
    response = client.request("GET", "https://atlas.example/api/v2/probes/1/?key=FOO")
    assert response.json() == {"ok": True}


def test_request_returns_error_statuses_instead_of_raising() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, content=b"not found", request=request)

    client = HttpClient(transport=httpx.MockTransport(handler))
    response = client.request("GET", "https://atlas.example/missing")
    assert response.status_code == 404
    assert response.content == b"not found"


def test_transport_errors_become_api_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("boom", request=request)

    client = HttpClient(transport=httpx.MockTransport(handler))
    with pytest.raises(APIError) as excinfo:
        client.request("GET", "https://atlas.example/x", pointer="probes.get")
    err = excinfo.value
    assert err.status == 500
    assert err.title == "transport"
    assert "boom" in err.detail
    assert err.errors[0].pointer == "probes.get"
    assert isinstance(err.__cause__, httpx.ConnectError)


def test_request_rejects_empty_url() -> None:
    client = HttpClient()
    with pytest.raises(ValueError):
        client.request("GET", "  ")


def test_reused_connection_is_opened_once_and_closed() -> None:
    calls: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(str(request.url))
        return httpx.Response(200, json={}, request=request)

    with HttpClient(transport=httpx.MockTransport(handler), reuse_connections=True) as client:
        client.request("GET", "https://atlas.example/a")
        first = client._client
        client.request("GET", "https://atlas.example/b")
        assert client._client is first
    assert client._client is None
    assert calls == ["https://atlas.example/a", "https://atlas.example/b"]


def test_timeouts_are_clamped() -> None:
    client = HttpClient(timeout_seconds=0, connect_timeout_seconds=-1)
    assert client.timeout_seconds == pytest.approx(0.1)
    assert client.connect_timeout_seconds == pytest.approx(0.1)


def test_redact_url_hides_api_key() -> None:
    assert redact_url("https://x/probes/?key=SECRET&page=2") == "https://x/probes/?key=***&page=2"
    assert redact_url("https://x/probes/?a=1&key=SECRET") == "https://x/probes/?a=1&key=***"
    assert redact_url("https://x/probes/?monkey=1") == "https://x/probes/?monkey=1"
