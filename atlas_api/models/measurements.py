"""Measurement and participation request payloads."""

from __future__ import annotations

from pydantic import Field

from atlas_api.models.base import Payload


class Measurement(Payload):
    id: int
    af: int | None = None
    description: str = ""
    target: str | None = None
    status: dict[str, object] | None = None
    is_oneoff: bool = False
    is_public: bool = True
    start_time: int | None = None
    stop_time: int | None = None
    participant_count: int | None = None
    kind: str = Field(default="", alias="type")


class ParticipationRequest(Payload):
    id: int
    requested: int = 0
    value: str = ""
    action: str = ""
    tags_include: str | None = None
    tags_exclude: str | None = None
    created_at: int | None = None
    kind: str = Field(default="", alias="type")
