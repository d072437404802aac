"""Anchor and anchor-measurement payloads."""

from __future__ import annotations

from pydantic import Field

from atlas_api.models.base import Payload
from atlas_api.models.probes import Geometry


class Anchor(Payload):
    id: int
    fqdn: str = ""
    probe: int | None = None
    is_ipv4_only: bool = False
    ip_v4: str | None = None
    as_v4: int | None = None
    ip_v6: str | None = None
    as_v6: int | None = None
    city: str = ""
    country: str = ""
    geometry: Geometry | None = None
    tlsa_record: str = ""
    is_disabled: bool = False
    date_live: str | None = None
    hardware_version: int | None = None
    atype: str = Field(default="Anchor", alias="type")


class AnchorMeasurement(Payload):
    id: int
    date_created: str | None = None
    date_modified: str | None = None
    is_mesh: bool = False
    measurement: str = ""
    target: str = ""
    kind: str = Field(default="", alias="type")
