"""Query options attached to every call.

Options are plain ``name -> value`` strings. Keys are sorted when serialised
so the same set of options always produces the same query string.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Tuple, Union
from urllib.parse import urlencode

__all__ = ["Options", "OptionsLike", "tag_options"]

OptionsLike = Union["Options", Mapping[str, Any], Iterable[Tuple[str, Any]], Tuple[str, Any]]


class Options(dict[str, str]):
    """``dict[str, str]`` with right-biased merging and a canonical query string."""

    def __init__(self, data: OptionsLike | None = None, /, **kwargs: Any) -> None:
        super().__init__()
        if data is not None:
            self.update(_pairs(data))
        if kwargs:
            self.update(_pairs(kwargs))

    def __setitem__(self, key: str, value: Any) -> None:
        super().__setitem__(str(key), _stringify(value))

    def update(self, *args: Any, **kwargs: Any) -> None:  # type: ignore[override]
        for key, value in dict(*args, **kwargs).items():
            self[key] = value

    def copy(self) -> "Options":
        return Options(self)

    def merge(self, other: OptionsLike | None) -> "Options":
        """Return a new set where ``other``'s values win on shared keys."""
        merged = self.copy()
        if other is not None:
            merged.update(_pairs(other))
        return merged

    def without(self, *keys: str) -> "Options":
        return Options((k, v) for k, v in self.items() if k not in keys)

    def to_query_string(self) -> str:
        """Return ``?k=v&...`` with keys in lexicographic order, or ``""``."""
        if not self:
            return ""
        return "?" + urlencode(sorted(self.items()))

    def __repr__(self) -> str:
        return f"Options({dict(sorted(self.items()))!r})"


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _pairs(data: OptionsLike) -> list[tuple[str, Any]]:
    if isinstance(data, Mapping):
        return list(data.items())
    if isinstance(data, tuple) and len(data) == 2 and isinstance(data[0], str):
        return [data]  # type: ignore[list-item]
    return [(k, v) for k, v in data]  # type: ignore[misc]


def tag_options(tags: str) -> Options:
    """Translate a tag filter string into probe query options.

    Tags are whitespace separated. ``tag`` and ``+tag`` are included,
    ``-tag`` and ``!tag`` excluded.
    """
    include: list[str] = []
    exclude: list[str] = []
    for raw in (tags or "").split():
        if raw[0] in "-!":
            name = raw[1:]
            target = exclude
        else:
            name = raw[1:] if raw[0] == "+" else raw
            target = include
        if name and name not in target:
            target.append(name)

    opts = Options()
    if include:
        opts["tags_include"] = ",".join(include)
    if exclude:
        opts["tags_exclude"] = ",".join(exclude)
    return opts
