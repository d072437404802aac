"""Error types shared by the request engine and its callers.

Every failure the engine can hit (transport, I/O, JSON decoding, an error
document returned by the service, a broken pagination chain) is normalised
into an :class:`APIError` here. Routing gaps and configuration mistakes get
their own classes because they indicate a programming or setup problem rather
than something a caller should report as a remote failure.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

__all__ = [
    "APIError",
    "AtlasError",
    "ConfigError",
    "ErrorSource",
    "InvalidOperationError",
    "MissingAPIKeyError",
    "PaginationError",
]

_MAX_DETAIL_CHARS = 2048


class AtlasError(Exception):
    """Base class for every error raised by this library."""


class InvalidOperationError(AtlasError, ValueError):
    """Raised when a (category, operation, parameter) triple has no route."""


class MissingAPIKeyError(AtlasError):
    """Raised when a category that requires an API key is entered without one."""


class ConfigError(AtlasError):
    """Raised when configuration cannot be loaded."""


@dataclass(frozen=True, slots=True)
class ErrorSource:
    detail: str
    pointer: str


class _SourceBody(BaseModel):
    pointer: str = ""


class _ErrorItemBody(BaseModel):
    model_config = ConfigDict(extra="ignore")

    detail: str = ""
    source: _SourceBody | None = None


class _ErrorBody(BaseModel):
    model_config = ConfigDict(extra="ignore")

    status: int
    code: int = 0
    title: str = ""
    detail: str = ""
    errors: list[_ErrorItemBody] = []


class _ErrorEnvelope(BaseModel):
    error: _ErrorBody


def _truncate(text: str, *, limit: int = _MAX_DETAIL_CHARS) -> str:
    if len(text) <= limit:
        return text
    return f"{text[: max(0, limit - 3)].rstrip()}..."


@dataclass(eq=False)
class APIError(AtlasError):
    """Normalised error for anything that went wrong while talking to the API.

    The field layout mirrors the error document returned by the service so
    that remote errors pass through with little change.
    """

    status: int
    title: str
    detail: str
    code: int = 0
    errors: list[ErrorSource] = field(default_factory=list)

    def __post_init__(self) -> None:
        Exception.__init__(self, self.title, self.detail)
        if not self.code:
            self.code = self.status

    def __str__(self) -> str:
        return f"{self.title}: {self.detail} (status={self.status})"

    @classmethod
    def new(cls, status: int, title: str, detail: str, pointer: str) -> "APIError":
        """Build an error whose single source points at ``pointer``."""
        return cls(
            status=status,
            title=title,
            detail=detail,
            errors=[ErrorSource(detail=detail, pointer=pointer)],
        )

    @classmethod
    def from_io_error(cls, exc: OSError) -> "APIError":
        return cls.new(500, "I/O error", str(exc), "io")

    @classmethod
    def from_decode_error(cls, exc: Exception, *, pointer: str = "decode") -> "APIError":
        return cls.new(500, "decode", _truncate(str(exc)), pointer)

    @classmethod
    def from_transport_error(cls, exc: httpx.HTTPError, *, pointer: str = "transport") -> "APIError":
        status = 500
        if isinstance(exc, httpx.HTTPStatusError):
            status = int(exc.response.status_code)
        detail = str(exc) or exc.__class__.__name__
        return cls.new(status, "transport", _truncate(detail), pointer)

    @classmethod
    def from_response(cls, response: httpx.Response, *, pointer: str) -> "APIError":
        """Decode the service's error document from a non-success response.

        The originating call is appended as an extra source pointer. When the
        body is not a valid error document a decode error is returned instead
        so that the real problem is not masked.
        """
        try:
            envelope = _ErrorEnvelope.model_validate_json(response.content)
        except (ValidationError, ValueError) as exc:
            text = response.content.decode("utf-8", errors="replace").strip()
            err = cls.from_decode_error(exc, pointer=pointer)
            err.status = int(response.status_code)
            if text:
                err.detail = _truncate(f"{err.detail}; body: {text}")
            return err

        body = envelope.error
        sources = [
            ErrorSource(detail=item.detail, pointer=item.source.pointer if item.source else "")
            for item in body.errors
        ]
        sources.append(ErrorSource(detail=body.detail, pointer=pointer))
        return cls(
            status=body.status or int(response.status_code),
            code=body.code,
            title=body.title,
            detail=body.detail,
            errors=sources,
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the error in the service's own wire shape."""
        return {
            "error": {
                "status": self.status,
                "code": self.code,
                "title": self.title,
                "detail": self.detail,
                "errors": [
                    {"detail": src.detail, "source": {"pointer": src.pointer}}
                    for src in self.errors
                ],
            }
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


@dataclass(eq=False)
class PaginationError(APIError):
    """Raised when a list call breaks the pagination invariants."""

    @classmethod
    def empty(cls, pointer: str) -> "PaginationError":
        return cls.new(400, "empty result", "no data returned on pagination", pointer)

    @classmethod
    def count_mismatch(cls, expected: int, got: int, pointer: str) -> "PaginationError":
        return cls.new(
            500,
            "decode",
            f"pagination returned {got} results, expected {expected}",
            pointer,
        )

    @classmethod
    def repeated_link(cls, url: str, pointer: str) -> "PaginationError":
        return cls.new(500, "decode", f"pagination link repeats: {url}", pointer)
