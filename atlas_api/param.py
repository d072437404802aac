"""The single argument an operation may carry.

A call like ``probes().get(666)`` or ``probes().list(["country_code=fr"])``
hands the routing layer one value whose shape depends on the operation: an
integer id, a string id (key UUIDs, tag names), a list of raw query fragments,
or nothing at all. :class:`Param` keeps that closed set explicit.

Conversions out of a ``Param`` are total: asking for a variant the value does
not hold returns the zero value of the requested type instead of raising.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterable, Union

__all__ = ["Param", "ParamKind", "ParamLike"]

_I32_MIN, _I32_MAX = -(2**31), 2**31 - 1
_U32_MAX = 2**32 - 1
_I64_MIN, _I64_MAX = -(2**63), 2**63 - 1


class ParamKind(enum.Enum):
    INT32 = "int32"
    UINT32 = "uint32"
    INT64 = "int64"
    STRING = "string"
    STRING_ARRAY = "string_array"
    NONE = "none"


@dataclass(frozen=True, slots=True)
class Param:
    """Tagged value; build it through the classmethods, not the constructor."""

    kind: ParamKind
    value: int | str | tuple[str, ...] | None = None

    # Constructors -------------------------------------------------------

    @classmethod
    def int32(cls, value: int) -> "Param":
        _check_range(value, _I32_MIN, _I32_MAX, "int32")
        return cls(ParamKind.INT32, int(value))

    @classmethod
    def uint32(cls, value: int) -> "Param":
        _check_range(value, 0, _U32_MAX, "uint32")
        return cls(ParamKind.UINT32, int(value))

    @classmethod
    def int64(cls, value: int) -> "Param":
        _check_range(value, _I64_MIN, _I64_MAX, "int64")
        return cls(ParamKind.INT64, int(value))

    @classmethod
    def string(cls, value: str) -> "Param":
        return cls(ParamKind.STRING, str(value))

    @classmethod
    def string_array(cls, values: Iterable[str]) -> "Param":
        return cls(ParamKind.STRING_ARRAY, tuple(str(v) for v in values))

    @classmethod
    def none(cls) -> "Param":
        return _NONE

    @classmethod
    def of(cls, value: "ParamLike") -> "Param":
        """Wrap a plain Python value into the matching variant.

        Non-negative integers become ``uint32`` when they fit, negative ones
        ``int32``, anything wider ``int64``.
        """
        if isinstance(value, Param):
            return value
        if value is None:
            return _NONE
        if isinstance(value, bool):
            raise TypeError("bool is not a valid Param value")
        if isinstance(value, int):
            if 0 <= value <= _U32_MAX:
                return cls.uint32(value)
            if _I32_MIN <= value < 0:
                return cls.int32(value)
            return cls.int64(value)
        if isinstance(value, str):
            return cls.string(value)
        if isinstance(value, (list, tuple)):
            return cls.string_array(value)
        raise TypeError(f"Unsupported Param value type: {type(value).__name__}")

    # Conversions --------------------------------------------------------

    def as_int32(self) -> int:
        return int(self.value) if self.kind is ParamKind.INT32 else 0  # type: ignore[arg-type]

    def as_uint32(self) -> int:
        return int(self.value) if self.kind is ParamKind.UINT32 else 0  # type: ignore[arg-type]

    def as_int64(self) -> int:
        return int(self.value) if self.kind is ParamKind.INT64 else 0  # type: ignore[arg-type]

    def as_str(self) -> str:
        return str(self.value) if self.kind is ParamKind.STRING else ""

    def as_list(self) -> list[str]:
        if self.kind is ParamKind.STRING_ARRAY:
            return list(self.value)  # type: ignore[arg-type]
        return []

    # Predicates ---------------------------------------------------------

    @property
    def is_none(self) -> bool:
        return self.kind is ParamKind.NONE

    @property
    def is_id(self) -> bool:
        """True for the variants usable as a path segment."""
        return self.kind in (ParamKind.INT32, ParamKind.UINT32, ParamKind.INT64, ParamKind.STRING)

    def __str__(self) -> str:
        if self.kind is ParamKind.STRING_ARRAY:
            return "&".join(self.value)  # type: ignore[arg-type]
        if self.kind is ParamKind.NONE:
            return ""
        return str(self.value)


def _check_range(value: int, low: int, high: int, name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} Param requires an int, got {type(value).__name__}")
    if not low <= value <= high:
        raise ValueError(f"{value} does not fit in {name}")


_NONE = Param(ParamKind.NONE)

ParamLike = Union[Param, int, str, list[str], tuple[str, ...], None]
