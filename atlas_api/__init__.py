"""Blocking client for the RIPE Atlas REST API (probes, keys, credits, anchors, measurements)."""

from __future__ import annotations

__version__ = "0.6.0"

from atlas_api.client import Client, enter_category, version  # noqa: E402
from atlas_api.errors import (  # noqa: E402
    APIError,
    AtlasError,
    ConfigError,
    InvalidOperationError,
    MissingAPIKeyError,
    PaginationError,
)
from atlas_api.option import Options  # noqa: E402
from atlas_api.param import Param  # noqa: E402
from atlas_api.request import Paged, RequestBuilder, Return, Single  # noqa: E402
from atlas_api.routing import Ctx, Op, get_ops_url  # noqa: E402

__all__ = [
    "APIError",
    "AtlasError",
    "Client",
    "ConfigError",
    "Ctx",
    "InvalidOperationError",
    "MissingAPIKeyError",
    "Op",
    "Options",
    "PaginationError",
    "Paged",
    "Param",
    "RequestBuilder",
    "Return",
    "Single",
    "enter_category",
    "get_ops_url",
    "version",
]
