"""Parse chapter markers into ``ClipRecord`` values.

Rows come from repeating field groups or from a saved JSON array and use
loose key names. Parsing is fail-soft: malformed input loses the clips for
an item, never the document.
"""

from __future__ import annotations

import collections.abc as cabc
import json
import typing as typ

from videoschema.logging import get_logger, log_debug, log_warning

from ._coercion import coerce_int
from .domain import ClipRecord, is_empty

logger = get_logger(__name__)

NAME_ALIASES: tuple[str, ...] = ("clip_name", "name")
START_ALIASES: tuple[str, ...] = ("start", "startOffset")
END_ALIASES: tuple[str, ...] = ("end", "endOffset")


def first_present(row: cabc.Mapping[str, object], aliases: tuple[str, ...]) -> object:
    """Return the first non-``None`` value among ``aliases`` in ``row``."""
    for alias in aliases:
        value = row.get(alias)
        if value is not None:
            return value
    return None


class ClipsParser:
    """Build clip records whose default URLs deep-link into ``permalink``."""

    def __init__(self, permalink: str) -> None:
        self.permalink = permalink

    def clip_url(self, start_offset: int) -> str:
        """Return the permalink with a ``t`` timestamp parameter."""
        return f"{self.permalink}?t={start_offset}"

    def parse_row(self, row: cabc.Mapping[str, object]) -> ClipRecord:
        """Map one row's aliased keys onto a ``ClipRecord``."""
        name = first_present(row, NAME_ALIASES)
        start = max(coerce_int(first_present(row, START_ALIASES), 0) or 0, 0)
        end = coerce_int(first_present(row, END_ALIASES), None)
        url = row.get("url")
        return ClipRecord(
            name="" if name is None else str(name),
            start_offset=start,
            end_offset=end,
            url=str(url).strip() if not is_empty(url) else self.clip_url(start),
        )

    def parse_from_rows(self, rows: cabc.Iterable[object]) -> list[ClipRecord]:
        """Parse structured rows, skipping anything that is not a mapping."""
        clips: list[ClipRecord] = []
        for index, row in enumerate(rows):
            if not isinstance(row, cabc.Mapping):
                log_debug(logger, "Skipping clip row %d: not a mapping.", index)
                continue
            clips.append(self.parse_row(typ.cast("cabc.Mapping[str, object]", row)))
        return clips

    def parse_from_json(self, serialized: object) -> list[ClipRecord]:
        """Parse a JSON array of rows.

        Returns an empty list when ``serialized`` is empty, is not valid
        JSON, or does not hold an array at the top level.

        Examples
        --------
        >>> parser = ClipsParser("https://example.com/v")
        >>> parser.parse_from_json('[{"name": "Intro", "startOffset": 0}]')[0].url
        'https://example.com/v?t=0'
        >>> parser.parse_from_json("not json")
        []
        """
        if not isinstance(serialized, (str, bytes, bytearray)) or is_empty(serialized):
            return []
        try:
            decoded = json.loads(serialized)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            log_warning(logger, "Ignoring malformed clips JSON: %s", exc)
            return []
        if not isinstance(decoded, list):
            log_warning(logger, "Ignoring clips JSON whose top level is not an array.")
            return []
        return self.parse_from_rows(typ.cast("list[object]", decoded))


__all__ = [
    "END_ALIASES",
    "NAME_ALIASES",
    "START_ALIASES",
    "ClipsParser",
    "first_present",
]
