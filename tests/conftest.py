from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Callable, Generator

import httpx
import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from atlas_api.client import Client
from atlas_api.config import get_settings

ENDPOINT = "https://atlas.example/api/v2"

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture(autouse=True)
def _isolated_environment(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> Generator[None, None, None]:
    """Keep the developer's ATLAS_* variables, .env and config file out of tests."""

    for name in list(os.environ):
        if name.startswith("ATLAS_") or name == "LOG_LEVEL":
            monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("ATLAS_CONFIG", str(tmp_path / "absent.toml"))
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def make_client() -> Callable[..., Client]:
    """Return a factory building a client wired to an httpx.MockTransport."""

    def factory(handler: Handler, api_key: str | None = "FOO", **kwargs: object) -> Client:
        return Client(
            api_key,
            endpoint=ENDPOINT,
            transport=httpx.MockTransport(handler),
            **kwargs,  # type: ignore[arg-type]
        )

    return factory
