"""Common base for payload models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

__all__ = ["Payload"]


class Payload(BaseModel):
    """Base model for API payloads.

    Unknown fields are kept so that newer service versions do not break
    decoding, and ``str()`` renders the JSON form for diagnostics.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    def __str__(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)
