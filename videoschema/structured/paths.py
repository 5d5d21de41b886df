"""Dot-path resolution over nested field values.

A mapping such as ``work_thumbnail.sizes.large`` names a provider-level
field (``work_thumbnail``) followed by structural steps into its value.
Every step either finds an explicitly present key or yields ``MISS``;
resolution never raises.

Examples
--------
>>> PathResolver.resolve({"a": {"b": 5}}, "a.b")
5
>>> PathResolver.resolve({"a": {}}, "a.b")
MISS
"""

from __future__ import annotations

import collections.abc as cabc
import typing as typ

from .domain import MISS
from .extensions import guarded_call

if typ.TYPE_CHECKING:
    from .domain import Missing

PATH_SEPARATOR = "."


def split_path(path: str) -> list[str]:
    """Split ``path`` into segments, ignoring surrounding whitespace."""
    return [segment.strip() for segment in path.strip().split(PATH_SEPARATOR)]


def _step(current: object, segment: str) -> object | Missing:
    """Take one structural step from ``current`` into ``segment``."""
    if isinstance(current, cabc.Mapping):
        mapping = typ.cast("cabc.Mapping[object, object]", current)
        if segment in mapping:
            return mapping[segment]
        # Integer-keyed mappings, as decoded from list-like structures.
        if segment.isdecimal() and int(segment) in mapping:
            return mapping[int(segment)]
        return MISS
    if isinstance(current, cabc.Sequence) and not isinstance(current, (str, bytes)):
        if segment.isdecimal() and int(segment) < len(current):
            return current[int(segment)]
    return MISS


class PathResolver:
    """Resolve dot-path expressions against nested structures."""

    @staticmethod
    def walk(value: object, segments: cabc.Iterable[str]) -> object | Missing:
        """Walk ``segments`` structurally starting from ``value``."""
        current = value
        for segment in segments:
            current = _step(current, segment)
            if current is MISS:
                return MISS
        return current

    @classmethod
    def resolve(cls, root: object, path: str) -> object | Missing:
        """Resolve ``path`` against ``root`` using structural steps only."""
        if not path or not path.strip():
            return MISS
        return cls.walk(root, split_path(path))

    @classmethod
    def resolve_with(
        cls,
        lookup: cabc.Callable[[str], object],
        path: str,
    ) -> object | Missing:
        """Resolve ``path`` whose first segment is a provider field lookup.

        Parameters
        ----------
        lookup : collections.abc.Callable[[str], object]
            Provider-level field lookup. ``False``, ``MISS`` or an
            exception from it mean the field is missing.
        path : str
            Dot-separated path such as ``group.subfield``.

        Returns
        -------
        object | Missing
            The resolved value, or ``MISS``.
        """
        if not path or not path.strip():
            return MISS
        field, *rest = split_path(path)
        value = guarded_call(lookup, field, label=f"field lookup {field!r}").value_or(
            MISS
        )
        if value is MISS or value is False:
            return MISS
        return cls.walk(value, rest)


__all__ = ["PATH_SEPARATOR", "PathResolver", "split_path"]
