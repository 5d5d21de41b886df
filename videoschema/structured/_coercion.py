"""Shared coercion helpers for loosely typed field values."""

from __future__ import annotations

import math
import re

_NUMERIC_RE = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")
_TRUTHY_FALSE_STRINGS = frozenset({"", "0", "false", "no", "off"})


def coerce_int(value: object, default: int | None) -> int | None:
    """Truncate ``value`` to ``int`` and return ``default`` on failure.

    Parameters
    ----------
    value : object
        Candidate value. Integers and floats are truncated; strings are
        accepted only when they are numeric (``"12"``, ``" 12.7 "``).
        Non-finite values such as ``"1e400"`` or ``nan`` use ``default``.
        Booleans and every other type use ``default``.
    default : int | None
        Fallback returned when ``value`` is not numeric.

    Returns
    -------
    int | None
        The truncated integer, or ``default``.
    """
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _NUMERIC_RE.fullmatch(value.strip()):
        value = float(value.strip())
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else default
    return default


def coerce_flag(value: object) -> bool:
    """Interpret checkbox-style values such as ``"1"``, ``"on"`` or ``True``."""
    if isinstance(value, str):
        return value.strip().lower() not in _TRUTHY_FALSE_STRINGS
    return bool(value)


__all__ = ["coerce_flag", "coerce_int"]
