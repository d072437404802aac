"""Blocking HTTP transport built on top of httpx.

This module centralizes timeout, user-agent and redirect behavior and maps
transport-level httpx exceptions into :class:`~atlas_api.errors.APIError`.
HTTP status handling is left to the caller: the request engine needs the
response body of a failed call to decode the service's own error document.
"""

from __future__ import annotations

import re
import weakref
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Mapping

import httpx
from loguru import logger

from atlas_api.errors import APIError

__all__ = ["HttpClient", "redact_url"]

log = logger.bind(module="atlas_api.net.http")

_MIN_TIMEOUT_SECONDS = 0.1
_KEY_RE = re.compile(r"([?&]key=)[^&]*")


def redact_url(url: str) -> str:
    """Hide the API key in a URL before it reaches a log line."""
    return _KEY_RE.sub(r"\1***", url)


class HttpClient:
    """Small sync HTTP client with consistent defaults and error mapping.

    Notes:
        - By default, a short-lived `httpx.Client` is created per request.
        - When `reuse_connections=True`, an internal persistent `httpx.Client` is
          used to enable connection pooling. Call `close()` (or use this object
          as a context manager) to release resources deterministically.
        - Timeouts are clamped to at least `_MIN_TIMEOUT_SECONDS`; the connect
          timeout is configured separately from the read timeout.
    """

    def __init__(
        self,
        *,
        timeout_seconds: float = 5.0,
        connect_timeout_seconds: float = 10.0,
        follow_redirects: bool = True,
        user_agent: str | None = None,
        headers: Mapping[str, str] | None = None,
        transport: httpx.BaseTransport | None = None,
        reuse_connections: bool = False,
    ) -> None:
        self.timeout_seconds = float(max(_MIN_TIMEOUT_SECONDS, timeout_seconds))
        self.connect_timeout_seconds = float(max(_MIN_TIMEOUT_SECONDS, connect_timeout_seconds))
        self.follow_redirects = bool(follow_redirects)
        self.transport = transport
        self.reuse_connections = bool(reuse_connections)

        merged: dict[str, str] = {"Accept": "application/json"}
        merged.update(dict(headers or {}))
        if user_agent and "User-Agent" not in merged:
            merged["User-Agent"] = user_agent
        self.headers = merged
        self._client: httpx.Client | None = None
        self._finalizer: weakref.finalize | None = None

    def _build_client(self) -> httpx.Client:
        kwargs: dict[str, object] = {
            "timeout": httpx.Timeout(self.timeout_seconds, connect=self.connect_timeout_seconds),
            "follow_redirects": self.follow_redirects,
            "headers": self.headers,
        }
        if self.transport is not None:
            kwargs["transport"] = self.transport
        return httpx.Client(**kwargs)  # type: ignore[arg-type]

    def open(self) -> None:
        """Open an internal persistent `httpx.Client` when reuse is enabled."""
        if not self.reuse_connections:
            return
        if self._client is not None:
            return
        self._client = self._build_client()
        # Ensure we don't leak open pools if callers forget to close explicitly.
        self._finalizer = weakref.finalize(self, self._client.close)

    def close(self) -> None:
        """Close any internal persistent `httpx.Client`."""
        if self._finalizer is not None:
            self._finalizer.detach()
            self._finalizer = None
        if self._client is None:
            return
        self._client.close()
        self._client = None

    def __enter__(self) -> "HttpClient":
        self.open()
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        self.close()

    @contextmanager
    def _client_ctx(self) -> Iterator[httpx.Client]:
        if self.reuse_connections:
            self.open()
            assert self._client is not None
            yield self._client
            return
        with self._build_client() as client:
            yield client

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        json_body: Any | None = None,
        pointer: str = "transport",
    ) -> httpx.Response:
        """Send an HTTP request to an absolute URL and return the response.

        The body is read before returning so the response stays usable after
        a short-lived client is closed. Non-success statuses are returned,
        not raised.

        Raises:
            APIError: When the request cannot be completed (DNS, connect,
                timeout, protocol errors) or the body cannot be read.
        """
        method = (method or "GET").strip().upper()
        target = (url or "").strip()
        if not target:
            raise ValueError("url must be non-empty.")

        log.debug("{} {}", method, redact_url(target))
        try:
            with self._client_ctx() as client:
                response = client.request(
                    method,
                    target,
                    headers=dict(headers) if headers else None,
                    json=json_body,
                )
                response.read()
        except httpx.HTTPError as exc:
            log.debug("{} {} failed: {}", method, redact_url(target), exc)
            raise APIError.from_transport_error(exc, pointer=pointer) from exc
        except OSError as exc:
            raise APIError.from_io_error(exc) from exc
        log.debug("{} {} -> {}", method, redact_url(target), response.status_code)
        return response
