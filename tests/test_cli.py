from __future__ import annotations

from typing import Any

import httpx
import pytest
from loguru import logger

from atlas_api import cli
from atlas_api.client import Client, version
from atlas_api.config import Settings

PROBE = {"id": 666, "country_code": "FR", "description": "home"}


@pytest.fixture(autouse=True)
def _drop_cli_sinks() -> Any:
    # main() installs a sink bound to the captured stderr of the running test.
    yield
    logger.remove()


@pytest.fixture
def requests_seen(monkeypatch: pytest.MonkeyPatch) -> list[httpx.Request]:
    """Route every client the CLI builds through a MockTransport."""
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        path = request.url.path
        if path == "/api/v2/probes/666/":
            return httpx.Response(200, json=PROBE, request=request)
        if path == "/api/v2/probes/1/":
            body = {"id": 1, "address_v4": "193.0.0.1", "address_v6": "2001:db8::1"}
            return httpx.Response(200, json=body, request=request)
        if path == "/api/v2/probes/":
            return httpx.Response(
                200,
                json={"count": 1, "next": None, "previous": None, "results": [PROBE]},
                request=request,
            )
        if path == "/api/v2/credits/transactions/":
            return httpx.Response(
                200,
                json={"count": 1, "next": None, "previous": None, "results": [{"id": 9, "amount": 10}]},
                request=request,
            )
        return httpx.Response(404, json={"error": {"status": 404, "title": "Not Found"}}, request=request)

    build = Client.from_settings.__func__  # type: ignore[attr-defined]

    def from_settings(cls: type[Client], settings: Settings, **overrides: Any) -> Client:
        overrides["transport"] = httpx.MockTransport(handler)
        return build(cls, settings, **overrides)

    monkeypatch.setattr(Client, "from_settings", classmethod(from_settings))
    return seen


def test_version_command(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["version"]) == 0
    assert version() in capsys.readouterr().out


def test_probes_info_uses_default_probe(
    monkeypatch: pytest.MonkeyPatch,
    requests_seen: list[httpx.Request],
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.setenv("ATLAS_DEFAULT_PROBE", "666")
    assert cli.main(["probes", "info"]) == 0
    assert requests_seen[0].url.path == "/api/v2/probes/666/"
    assert '"country_code": "FR"' in capsys.readouterr().out


def test_probes_list_with_area(
    monkeypatch: pytest.MonkeyPatch,
    requests_seen: list[httpx.Request],
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.setenv("ATLAS_API_KEY", "FOO")
    assert cli.main(["probes", "list", "status=1", "--area"]) == 0
    params = requests_seen[0].url.params
    assert params["status"] == "1"
    assert params["area"] == "WW"
    assert params["key"] == "FOO"
    assert "666" in capsys.readouterr().out


def test_credits_list_type(
    monkeypatch: pytest.MonkeyPatch,
    requests_seen: list[httpx.Request],
) -> None:
    monkeypatch.setenv("ATLAS_API_KEY", "FOO")
    assert cli.main(["credits", "list", "--type", "transactions"]) == 0
    assert requests_seen[0].url.path == "/api/v2/credits/transactions/"
    assert "type" not in requests_seen[0].url.params


def test_missing_key_exits_with_error(
    requests_seen: list[httpx.Request],
    capsys: pytest.CaptureFixture[str],
) -> None:
    assert cli.main(["keys", "list"]) == 1
    assert requests_seen == []
    assert "API key is required" in capsys.readouterr().err


def test_api_error_exits_with_error(
    monkeypatch: pytest.MonkeyPatch,
    requests_seen: list[httpx.Request],
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.setenv("ATLAS_API_KEY", "FOO")
    assert cli.main(["anchors", "info", "1"]) == 1
    assert "Not Found" in capsys.readouterr().err


def test_explicit_config_file(
    tmp_path: Any,
    requests_seen: list[httpx.Request],
) -> None:
    path = tmp_path / "cli.toml"
    path.write_text('api_key = "FILE"\ndefault_probe = 666\n', encoding="utf-8")
    assert cli.main(["--config", str(path), "probes", "info"]) == 0
    assert requests_seen[0].url.params["key"] == "FILE"


def test_ip_prints_both_addresses(
    requests_seen: list[httpx.Request],
    capsys: pytest.CaptureFixture[str],
) -> None:
    assert cli.main(["ip", "1"]) == 0
    assert requests_seen[0].url.path == "/api/v2/probes/1/"
    out = capsys.readouterr().out
    assert "Probe 1 has the following IP:" in out
    assert "IPv4: 193.0.0.1 IPv6: 2001:db8::1" in out


def test_ip_defaults_to_configured_probe_and_shows_missing_addresses(
    monkeypatch: pytest.MonkeyPatch,
    requests_seen: list[httpx.Request],
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.setenv("ATLAS_DEFAULT_PROBE", "666")
    assert cli.main(["ip"]) == 0
    assert requests_seen[0].url.path == "/api/v2/probes/666/"
    assert "IPv4: None IPv6: None" in capsys.readouterr().out
