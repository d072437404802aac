"""The `Client` snapshot and the category entry points.

A client holds everything the request engine needs from its environment: the
API key, the endpoint, default options and the HTTP settings. It never
changes after construction. Entering a category clones the default options,
injects the API key and returns a fresh
:class:`~atlas_api.request.RequestBuilder`, so concurrent call chains never
share mutable option state.

Example::

    with Client("MY-KEY") as c:
        probe = c.probes().get(666).call(Probe).unwrap_single()
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal

from loguru import logger

from atlas_api import __version__
from atlas_api.errors import MissingAPIKeyError
from atlas_api.net.http import HttpClient
from atlas_api.option import Options, OptionsLike, tag_options
from atlas_api.request import RequestBuilder
from atlas_api.routing import Ctx

if TYPE_CHECKING:
    import httpx

    from atlas_api.config import Settings

__all__ = ["DEFAULT_ENDPOINT", "Client", "enter_category", "version"]

log = logger.bind(module="atlas_api.client")

DEFAULT_ENDPOINT = "https://atlas.ripe.net/api/v2"

# Categories that can be used without an API key (some fields are masked).
_KEY_OPTIONAL: frozenset[Ctx] = frozenset({Ctx.PROBES})


def version() -> str:
    """Return the library identifier sent as the default user-agent."""
    return f"atlas-api/{__version__}"


class Client:
    """Immutable configuration snapshot plus the HTTP transport."""

    def __init__(
        self,
        api_key: str | None = None,
        *,
        endpoint: str = DEFAULT_ENDPOINT,
        default_options: OptionsLike | None = None,
        timeout_seconds: float = 5.0,
        connect_timeout_seconds: float = 10.0,
        user_agent: str | None = None,
        default_probe: int = 0,
        area_type: str = "area",
        area_value: str = "WW",
        tags: str = "",
        want_af: Literal["4", "6", "46"] = "46",
        is_oneoff: bool = True,
        pool_size: int = 10,
        verbose: bool = False,
        transport: "httpx.BaseTransport | None" = None,
        reuse_connections: bool = False,
    ) -> None:
        endpoint = (endpoint or "").strip()
        if not endpoint:
            raise ValueError("Invalid API endpoint: value is empty.")
        self._api_key = (api_key or "").strip() or None
        self._endpoint = endpoint.rstrip("/")
        self._default_options = Options(default_options)
        self.default_probe = int(default_probe)
        self.area_type = area_type
        self.area_value = area_value
        self.tags = tags
        self.want_af = want_af
        self.is_oneoff = bool(is_oneoff)
        self.pool_size = int(pool_size)
        self.verbose = bool(verbose)
        self._http = HttpClient(
            timeout_seconds=timeout_seconds,
            connect_timeout_seconds=connect_timeout_seconds,
            user_agent=user_agent or version(),
            transport=transport,
            reuse_connections=reuse_connections,
        )

    @classmethod
    def from_settings(cls, settings: "Settings", **overrides: Any) -> "Client":
        kwargs: dict[str, Any] = {
            "endpoint": settings.endpoint,
            "default_options": settings.default_options,
            "timeout_seconds": settings.timeout_seconds,
            "connect_timeout_seconds": settings.connect_timeout_seconds,
            "user_agent": settings.user_agent,
            "default_probe": settings.default_probe,
            "area_type": settings.probe_set.type,
            "area_value": settings.probe_set.value,
            "tags": settings.probe_set.tags,
            "want_af": settings.want_af,
            "is_oneoff": settings.is_oneoff,
            "pool_size": settings.probe_set.pool_size,
            "verbose": settings.verbose,
        }
        kwargs.update(overrides)
        return cls(settings.api_key, **kwargs)

    def __repr__(self) -> str:
        return f"Client(endpoint={self._endpoint!r}, api_key={'set' if self._api_key else 'unset'})"

    # Snapshot accessors -----------------------------------------------

    @property
    def api_key(self) -> str | None:
        return self._api_key

    @property
    def endpoint(self) -> str:
        return self._endpoint

    @property
    def default_options(self) -> Options:
        """A copy of the default options; mutating it has no effect."""
        return self._default_options.copy()

    @property
    def http(self) -> HttpClient:
        return self._http

    def probe_set_options(self) -> Options:
        """Render the configured area and tag filters as query options."""
        opts = Options()
        if self.area_type and self.area_value:
            opts[self.area_type] = self.area_value
        return opts.merge(tag_options(self.tags))

    # Lifecycle ----------------------------------------------------------

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "Client":
        self._http.open()
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        self.close()

    # Categories ---------------------------------------------------------

    def enter(self, ctx: Ctx, *, method: str = "GET") -> RequestBuilder:
        return enter_category(self, ctx, method=method)

    def anchors(self) -> RequestBuilder:
        return self.enter(Ctx.ANCHORS)

    def anchor_measurements(self) -> RequestBuilder:
        return self.enter(Ctx.ANCHOR_MEASUREMENTS)

    def credits(self) -> RequestBuilder:
        return self.enter(Ctx.CREDITS)

    def keys(self, *, method: str = "GET") -> RequestBuilder:
        return self.enter(Ctx.KEYS, method=method)

    def measurements(self, *, method: str = "GET") -> RequestBuilder:
        return self.enter(Ctx.MEASUREMENTS, method=method)

    def participation_requests(self) -> RequestBuilder:
        return self.enter(Ctx.PARTICIPATION_REQUESTS)

    def probes(self, *, method: str = "GET") -> RequestBuilder:
        return self.enter(Ctx.PROBES, method=method)


def enter_category(client: Client, ctx: Ctx, *, method: str = "GET") -> RequestBuilder:
    """Return a builder for ``ctx`` with the client's options and API key.

    The defaults are cloned, then ``{"key": api_key}`` is merged in. Probes
    work without a key; every other category requires one.

    Raises:
        MissingAPIKeyError: When no API key is configured and ``ctx`` needs one.
        RuntimeError: When ``ctx`` is ``Ctx.NONE``.
    """
    if ctx is Ctx.NONE:
        raise RuntimeError("Cannot enter the Ctx.NONE category.")
    options = client.default_options
    if client.api_key:
        options = options.merge({"key": client.api_key})
    elif ctx not in _KEY_OPTIONAL:
        raise MissingAPIKeyError(f"An API key is required for {ctx.value}")
    else:
        log.debug("No API key set; some {} fields will be masked", ctx.value)
    return RequestBuilder(ctx, client.http, client.endpoint, options, method=method)
