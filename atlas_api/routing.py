"""URL routing for every API category.

Each category owns one pure function mapping ``(Op, Param)`` to a path
relative to the API endpoint. :func:`get_ops_url` dispatches on the category.
Paths always end with a slash (the probe tag slug listing excepted, as the
service defines it) and never include the caller's options, except for the
raw query fragments a probe listing carries in its :class:`Param`.

Credits is the odd one out: the service exposes its sub-resources as views
selected by a ``type`` option instead of by the operation, so its routing
function reads that option. ``type`` is reserved and is stripped from the
query string by :func:`query_options`.
"""

from __future__ import annotations

import enum
from typing import Callable, Mapping

from atlas_api.errors import InvalidOperationError
from atlas_api.option import Options
from atlas_api.param import Param, ParamKind

__all__ = [
    "CREDITS_TYPES",
    "Ctx",
    "Op",
    "RESERVED_TYPE_OPTION",
    "get_ops_url",
    "query_options",
]

RESERVED_TYPE_OPTION = "type"


class Ctx(enum.Enum):
    """API category; ``NONE`` is a sentinel that must never be routed."""

    NONE = "none"
    ANCHORS = "anchors"
    ANCHOR_MEASUREMENTS = "anchor-measurements"
    CREDITS = "credits"
    KEYS = "keys"
    MEASUREMENTS = "measurements"
    PARTICIPATION_REQUESTS = "participation-requests"
    PROBES = "probes"


class Op(enum.Enum):
    NULL = "null"
    ARCHIVE = "archive"
    CLAIM = "claim"
    CREATE = "create"
    DELETE = "delete"
    EXPENSES = "expenses"
    GET = "get"
    INCOMES = "incomes"
    INFO = "info"
    LIST = "list"
    MEASUREMENT = "measurement"
    MEMBERS = "members"
    PERMISSIONS = "permissions"
    RANKINGS = "rankings"
    SET = "set"
    SLUGS = "slugs"
    TAGS = "tags"
    TARGETS = "targets"
    TRANSACTIONS = "transactions"
    TRANSFERS = "transfers"
    UPDATE = "update"


# Values of the reserved ``type`` option and the credits view they select.
CREDITS_TYPES: dict[str, Op] = {
    "expense-items": Op.EXPENSES,
    "income-items": Op.INCOMES,
    "members": Op.MEMBERS,
    "transactions": Op.TRANSACTIONS,
    "transfer": Op.TRANSFERS,
}


def _invalid(ctx: Ctx, op: Op, param: Param | None = None) -> InvalidOperationError:
    suffix = f" with {param.kind.value} parameter" if param is not None else ""
    return InvalidOperationError(f"Operation {op.value!r} is not available for {ctx.value}{suffix}")


def _id(ctx: Ctx, op: Op, param: Param) -> str:
    if not param.is_id:
        raise _invalid(ctx, op, param)
    text = str(param)
    if not text:
        raise _invalid(ctx, op, param)
    return text


def _no_param(ctx: Ctx, op: Op, param: Param) -> None:
    if not param.is_none:
        raise _invalid(ctx, op, param)


def _fragments(ctx: Ctx, op: Op, param: Param) -> str:
    if param.kind is ParamKind.STRING_ARRAY:
        return str(param)
    if param.is_none:
        return ""
    raise _invalid(ctx, op, param)


def _simple(ctx: Ctx, op: Op, param: Param) -> str:
    """Routes shared by the categories that only support get and list."""
    base = f"/{ctx.value}/"
    if op is Op.GET:
        return f"{base}{_id(ctx, op, param)}/"
    if op is Op.LIST:
        _fragments(ctx, op, param)
        return base
    raise _invalid(ctx, op)


def probes_url(op: Op, param: Param, _options: Mapping[str, str]) -> str:
    ctx = Ctx.PROBES
    if op is Op.LIST:
        query = _fragments(ctx, op, param)
        return f"/probes/?{query}" if query else "/probes/"
    if op in (Op.GET, Op.SET, Op.UPDATE):
        return f"/probes/{_id(ctx, op, param)}/"
    if op is Op.MEASUREMENT:
        return f"/probes/{_id(ctx, op, param)}/measurements/"
    if op is Op.SLUGS:
        return f"/probes/tags/{_id(ctx, op, param)}/slugs"
    static = {Op.ARCHIVE: "/probes/archive/", Op.RANKINGS: "/probes/rankings/", Op.TAGS: "/probes/tags/"}
    if op in static:
        _no_param(ctx, op, param)
        return static[op]
    raise _invalid(ctx, op)


def keys_url(op: Op, param: Param, _options: Mapping[str, str]) -> str:
    ctx = Ctx.KEYS
    if op in (Op.GET, Op.SET, Op.DELETE):
        return f"/keys/{_id(ctx, op, param)}/"
    if op in (Op.LIST, Op.CREATE):
        _fragments(ctx, op, param)
        return "/keys/"
    if op is Op.PERMISSIONS:
        _no_param(ctx, op, param)
        return "/keys/permissions/"
    if op is Op.TARGETS:
        return f"/keys/permissions/{_id(ctx, op, param)}/targets/"
    raise _invalid(ctx, op)


_CREDITS_PATHS: dict[Op, str] = {
    Op.INFO: "/credits/",
    Op.INCOMES: "/credits/income-items/",
    Op.EXPENSES: "/credits/expense-items/",
    Op.MEMBERS: "/credits/members/",
    Op.CLAIM: "/credits/members/claim/",
    Op.TRANSACTIONS: "/credits/transactions/",
    Op.TRANSFERS: "/credits/transfers/",
}


def credits_url(op: Op, param: Param, options: Mapping[str, str]) -> str:
    ctx = Ctx.CREDITS
    # Credits views take no id and no query fragments; filters travel as options.
    _no_param(ctx, op, param)
    kind = options.get(RESERVED_TYPE_OPTION)
    if kind:
        selected = CREDITS_TYPES.get(kind)
        if selected is None:
            raise InvalidOperationError(f"Unknown credits type {kind!r}")
        return _CREDITS_PATHS[selected]
    # Without a type, get/list/info all address the summary endpoint.
    if op in (Op.GET, Op.LIST):
        op = Op.INFO
    path = _CREDITS_PATHS.get(op)
    if path is None:
        raise _invalid(ctx, op)
    return path


def measurements_url(op: Op, param: Param, _options: Mapping[str, str]) -> str:
    ctx = Ctx.MEASUREMENTS
    if op in (Op.GET, Op.UPDATE, Op.DELETE):
        return f"/measurements/{_id(ctx, op, param)}/"
    if op in (Op.LIST, Op.CREATE):
        _fragments(ctx, op, param)
        return "/measurements/"
    raise _invalid(ctx, op)


def anchors_url(op: Op, param: Param, _options: Mapping[str, str]) -> str:
    return _simple(Ctx.ANCHORS, op, param)


def anchor_measurements_url(op: Op, param: Param, _options: Mapping[str, str]) -> str:
    return _simple(Ctx.ANCHOR_MEASUREMENTS, op, param)


def participation_requests_url(op: Op, param: Param, _options: Mapping[str, str]) -> str:
    return _simple(Ctx.PARTICIPATION_REQUESTS, op, param)


_ROUTES: dict[Ctx, Callable[[Op, Param, Mapping[str, str]], str]] = {
    Ctx.ANCHORS: anchors_url,
    Ctx.ANCHOR_MEASUREMENTS: anchor_measurements_url,
    Ctx.CREDITS: credits_url,
    Ctx.KEYS: keys_url,
    Ctx.MEASUREMENTS: measurements_url,
    Ctx.PARTICIPATION_REQUESTS: participation_requests_url,
    Ctx.PROBES: probes_url,
}


def get_ops_url(
    ctx: Ctx,
    op: Op,
    param: Param | None = None,
    options: Mapping[str, str] | None = None,
) -> str:
    """Return the relative path for ``op`` in category ``ctx``.

    Raises:
        InvalidOperationError: When the category has no route for ``op`` or
            the parameter variant does not fit the operation.
        RuntimeError: When called with ``Ctx.NONE``.
    """
    if ctx is Ctx.NONE:
        raise RuntimeError("Request context was never set; Ctx.NONE cannot be routed.")
    route = _ROUTES[ctx]
    return route(op, param if param is not None else Param.none(), options or {})


def query_options(ctx: Ctx, options: Mapping[str, str]) -> Options:
    """Return the options that belong in the query string for ``ctx``."""
    if ctx is Ctx.CREDITS:
        return Options(options).without(RESERVED_TYPE_OPTION)
    return Options(options)
