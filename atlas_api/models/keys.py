"""API key payloads."""

from __future__ import annotations

from pydantic import Field

from atlas_api.models.base import Payload


class Target(Payload):
    ttype: str = Field(alias="type")
    id: str


class Grant(Payload):
    permission: str
    target: Target | None = None


class Key(Payload):
    uuid: str
    label: str = ""
    enabled: bool = False
    is_active: bool = False
    created_at: str | None = None
    valid_from: str | None = None
    valid_to: str | None = None
    grants: list[Grant] = []
    ktype: str = Field(default="", alias="type")


class Permission(Payload):
    id: str
    name: str = ""
    description: str = ""
    grouping: str = ""
