"""Request building, execution and pagination.

A call chain always has the same shape::

    client.probes().get(666).call(Probe)
    client.credits().list().with_options({"type": "transactions"}).call(Transaction)

The category accessor on :class:`~atlas_api.client.Client` returns a
:class:`RequestBuilder` pre-loaded with the category, HTTP method, endpoint and
options (API key included). An action keyword (``get``, ``list``, ``info``,
``update``, ``delete``) fixes the :class:`~atlas_api.routing.Op` and chooses
the execution strategy: :class:`Single` decodes one object, :class:`Paged`
follows the ``next`` links of the list envelope until exhausted.

Every step consumes the value it is called on and returns a new one; using a
consumed value again raises ``RuntimeError`` instead of silently re-sending a
request.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Generic, Iterator, TypeVar

import httpx
from loguru import logger
from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from atlas_api.errors import APIError, PaginationError
from atlas_api.net.http import HttpClient, redact_url
from atlas_api.option import Options, OptionsLike
from atlas_api.param import Param, ParamLike
from atlas_api.routing import Ctx, Op, get_ops_url, query_options

__all__ = [
    "Page",
    "Paged",
    "RequestBuilder",
    "Return",
    "ReturnKind",
    "Single",
    "build_url",
    "collect_pages",
    "fetch_one_page",
    "iter_pages",
]

log = logger.bind(module="atlas_api.request")

T = TypeVar("T")


class ReturnKind(enum.Enum):
    SINGLE = "single"
    PAGED = "paged"
    NULL = "null"


@dataclass(frozen=True)
class Return(Generic[T]):
    """Result of a call; the variant is chosen by the action, not the payload."""

    kind: ReturnKind
    value: Any = None

    @classmethod
    def single(cls, value: T) -> "Return[T]":
        return cls(ReturnKind.SINGLE, value)

    @classmethod
    def paged(cls, items: list[T]) -> "Return[T]":
        return cls(ReturnKind.PAGED, list(items))

    @classmethod
    def null(cls) -> "Return[T]":
        return cls(ReturnKind.NULL, None)

    @property
    def is_null(self) -> bool:
        return self.kind is ReturnKind.NULL

    def unwrap_single(self) -> T:
        if self.kind is not ReturnKind.SINGLE:
            raise TypeError(f"Expected a single result, got {self.kind.value}")
        return self.value

    def unwrap_paged(self) -> list[T]:
        if self.kind is not ReturnKind.PAGED:
            raise TypeError(f"Expected a paged result, got {self.kind.value}")
        return self.value


class Page(BaseModel, Generic[T]):
    """List envelope returned by every list endpoint."""

    count: int = Field(ge=0)
    next: str | None = None
    previous: str | None = None
    results: list[T] = []


# ---------------------------------------------------------------------------
# Pagination engine


def _decode(adapter: TypeAdapter[Any], response: httpx.Response, *, pointer: str) -> Any:
    try:
        return adapter.validate_json(response.content)
    except ValidationError as exc:
        raise APIError.from_decode_error(exc, pointer=pointer) from exc


def fetch_one_page(
    http: HttpClient,
    url: str,
    model: Any,
    *,
    method: str = "GET",
    pointer: str = "fetch_one_page",
) -> Page[Any]:
    """Fetch ``url`` and decode it as a :class:`Page` of ``model``.

    Raises:
        APIError: On transport failure, on a non-success status (decoded from
            the service's error document) or when the body does not decode.
    """
    response = http.request(method, url, pointer=pointer)
    if not response.is_success:
        raise APIError.from_response(response, pointer=pointer)
    return _decode(TypeAdapter(Page[model]), response, pointer=pointer)


def iter_pages(
    http: HttpClient,
    url: str,
    model: Any,
    *,
    method: str = "GET",
    pointer: str = "fetch_one_page",
) -> Iterator[Page[Any]]:
    """Yield pages starting at ``url``, following ``next`` links verbatim.

    Raises:
        PaginationError: When a ``next`` link points at a page already read.
    """
    next_url: str | None = url
    visited: set[str] = set()
    while next_url:
        if next_url in visited:
            raise PaginationError.repeated_link(redact_url(next_url), pointer)
        visited.add(next_url)
        page = fetch_one_page(http, next_url, model, method=method, pointer=pointer)
        log.debug(
            "Page {} ({}): {} result(s), count={}",
            len(visited),
            redact_url(next_url),
            len(page.results),
            page.count,
        )
        yield page
        # Follow-up pages are always read with GET whatever the first method was.
        method = "GET"
        next_url = page.next


def collect_pages(
    http: HttpClient,
    url: str,
    model: Any,
    *,
    method: str = "GET",
    pointer: str = "fetch_one_page",
) -> list[Any]:
    """Fetch every page starting at ``url`` and concatenate the results.

    The first page's ``count`` is authoritative: a zero count is rejected,
    the chain stops as soon as it yields more results than ``count``, and the
    final total must match it. Any page failure aborts the whole call.

    Raises:
        PaginationError: When the first page is empty, a link repeats or the
            total does not match ``count``.
        APIError: When a page cannot be fetched or decoded.
    """
    pages = iter_pages(http, url, model, method=method, pointer=pointer)
    first = next(pages)
    if first.count == 0:
        raise PaginationError.empty(pointer)

    results: list[Any] = list(first.results)
    for page in pages:
        results.extend(page.results)
        if len(results) > first.count:
            raise PaginationError.count_mismatch(first.count, len(results), pointer)

    if len(results) != first.count:
        raise PaginationError.count_mismatch(first.count, len(results), pointer)
    return results


# ---------------------------------------------------------------------------
# Builder and executors


def build_url(endpoint: str, ctx: Ctx, op: Op, param: Param, options: Options) -> str:
    """Return the absolute URL for a call, options sorted into the query."""
    path = get_ops_url(ctx, op, param, options)
    query = query_options(ctx, options).to_query_string()
    if query and "?" in path:
        query = "&" + query[1:]
    return f"{endpoint.rstrip('/')}{path}{query}"


class _Linear:
    """Mixin making a value usable exactly once."""

    _consumed: bool

    def _consume(self) -> None:
        if self._consumed:
            raise RuntimeError(f"{type(self).__name__} has already been used")
        self._consumed = True


class RequestBuilder(_Linear):
    """Call context for one category, waiting for an action keyword."""

    def __init__(
        self,
        ctx: Ctx,
        http: HttpClient,
        endpoint: str,
        options: OptionsLike | None = None,
        *,
        method: str = "GET",
    ) -> None:
        self.ctx = ctx
        self.http = http
        self.endpoint = endpoint
        self.options = Options(options)
        self.method = method.upper()
        self._consumed = False

    def __repr__(self) -> str:
        return f"RequestBuilder(ctx={self.ctx.value}, method={self.method}, options={sorted(self.options)})"

    def with_options(self, options: OptionsLike) -> "RequestBuilder":
        """Overlay ``options`` on the accumulated ones, new values winning."""
        self._consume()
        return RequestBuilder(
            self.ctx,
            self.http,
            self.endpoint,
            self.options.merge(options),
            method=self.method,
        )

    def _single(self, op: Op, param: ParamLike = None) -> "Single":
        self._consume()
        return Single(self.ctx, op, Param.of(param), self.http, self.endpoint, self.options, self.method)

    def _paged(self, op: Op, param: ParamLike = None) -> "Paged":
        self._consume()
        return Paged(self.ctx, op, Param.of(param), self.http, self.endpoint, self.options, self.method)

    def get(self, param: ParamLike) -> "Single":
        return self._single(Op.GET, param)

    def list(self, param: ParamLike = None) -> "Paged":
        return self._paged(Op.LIST, param)

    def info(self) -> "Single":
        return self._single(Op.INFO)

    def update(self, param: ParamLike) -> "Single":
        return self._single(Op.UPDATE, param)

    def delete(self, param: ParamLike) -> "Single":
        return self._single(Op.DELETE, param)

    def single(self, op: Op, param: ParamLike = None) -> "Single":
        """Run any other single-object operation (``Op.PERMISSIONS``...)."""
        return self._single(op, param)

    def paged(self, op: Op, param: ParamLike = None) -> "Paged":
        """Run any other list operation (``Op.RANKINGS``, ``Op.TARGETS``...)."""
        return self._paged(op, param)


class _Call(_Linear):
    def __init__(
        self,
        ctx: Ctx,
        op: Op,
        param: Param,
        http: HttpClient,
        endpoint: str,
        options: Options,
        method: str,
    ) -> None:
        self.ctx = ctx
        self.op = op
        self.param = param
        self.http = http
        self.endpoint = endpoint
        self.options = Options(options)
        self.method = method
        self._consumed = False

    def __repr__(self) -> str:
        return f"{type(self).__name__}(ctx={self.ctx.value}, op={self.op.value}, param={self.param})"

    @property
    def pointer(self) -> str:
        return f"{self.ctx.value}.{self.op.value}"

    def with_options(self, options: OptionsLike):  # type: ignore[no-untyped-def]
        """Overlay ``options`` on the accumulated ones, new values winning."""
        self._consume()
        return type(self)(
            self.ctx,
            self.op,
            self.param,
            self.http,
            self.endpoint,
            self.options.merge(options),
            self.method,
        )

    def url(self) -> str:
        """Resolve the absolute URL this call will hit."""
        return build_url(self.endpoint, self.ctx, self.op, self.param, self.options)


class Single(_Call):
    """Executor returning one decoded object."""

    def call(self, model: Any) -> Return[Any]:
        """Send the request and decode the body as ``model``.

        An empty success body (e.g. ``204 No Content``) yields ``Return.null()``.
        """
        self._consume()
        url = self.url()
        response = self.http.request(self.method, url, pointer=self.pointer)
        if not response.is_success:
            raise APIError.from_response(response, pointer=self.pointer)
        if not response.content:
            return Return.null()
        return Return.single(_decode(TypeAdapter(model), response, pointer=self.pointer))


class Paged(_Call):
    """Executor collecting every page of a list call."""

    def call(self, model: Any) -> Return[Any]:
        self._consume()
        url = self.url()
        items = collect_pages(self.http, url, model, method=self.method, pointer=self.pointer)
        log.debug("{} returned {} item(s)", self.pointer, len(items))
        return Return.paged(items)
