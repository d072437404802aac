"""Probe payloads."""

from __future__ import annotations

from pydantic import Field

from atlas_api.models.base import Payload


class Geometry(Payload):
    gtype: str = Field(default="Point", alias="type")
    coordinates: list[float] = []


class Status(Payload):
    id: int
    name: str
    since: str | None = None


class Tag(Payload):
    name: str
    slug: str


class Probe(Payload):
    id: int
    address_v4: str | None = None
    address_v6: str | None = None
    asn_v4: int | None = None
    asn_v6: int | None = None
    country_code: str | None = None
    description: str | None = None
    first_connected: int | None = None
    geometry: Geometry | None = None
    is_anchor: bool = False
    is_public: bool = False
    last_connected: int | None = None
    prefix_v4: str | None = None
    prefix_v6: str | None = None
    status: Status | None = None
    status_since: int | None = None
    tags: list[Tag] = []
    total_uptime: int = 0
    ptype: str = Field(default="Probe", alias="type")
