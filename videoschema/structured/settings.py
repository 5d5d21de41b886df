"""Sanitise administrative settings and per-item override payloads.

Everything written through the administrative surface passes through the
functions here before it is persisted: mapping rules, the content-type
allowlist and per-item override fields. Payloads of the wrong overall
shape raise ``InvalidSettingsError``; individual bad entries are dropped.
"""

from __future__ import annotations

import collections.abc as cabc
import json
import re
import typing as typ

from videoschema.config import DEFAULT_CONTENT_TYPES
from videoschema.logging import get_logger, log_debug

from ._coercion import coerce_flag, coerce_int
from .clips import END_ALIASES, NAME_ALIASES, START_ALIASES, first_present
from .domain import (
    FEATURED_IMAGE_TOKEN,
    FeaturedImageRule,
    ImageCoercion,
    LogicalKey,
    PathRule,
    is_empty,
)
from .mapper import parse_mapping_rule
from .text import is_valid_url, sanitize_text_field, strip_unsafe_markup

if typ.TYPE_CHECKING:
    from .domain import JsonMapping, MappingRule

logger = get_logger(__name__)

#: Content types that can never opt in.
EXCLUDED_CONTENT_TYPES = frozenset({"attachment"})

_KEY_RE = re.compile(r"[^a-z0-9_\-]")


class VideoSchemaError(Exception):
    """Base exception carrying a machine-readable error code."""

    error_code: typ.ClassVar[str] = "videoschema_error"

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.code = code if code is not None else type(self).error_code


class InvalidSettingsError(VideoSchemaError, ValueError):
    """Raised when a settings or override payload has the wrong shape."""

    error_code: typ.ClassVar[str] = "invalid_settings"


def sanitize_key(value: object) -> str:
    """Lower-case ``value`` and drop characters other than ``[a-z0-9_-]``."""
    return _KEY_RE.sub("", str(value).strip().lower())


def _require_mapping(payload: object, what: str) -> cabc.Mapping[str, object]:
    if not isinstance(payload, cabc.Mapping):
        msg = f"{what} must be a JSON object."
        raise InvalidSettingsError(msg)
    return typ.cast("cabc.Mapping[str, object]", payload)


def _clean_rule_source(key: LogicalKey, raw: object) -> object:
    """Sanitise the field path and default image coercion of one rule."""
    if isinstance(raw, str):
        raw = {"field": raw}
    if not isinstance(raw, cabc.Mapping):
        return None
    entry = typ.cast("cabc.Mapping[str, object]", raw)
    field = sanitize_text_field(entry.get("field", entry.get("path", "")))
    if not field:
        return None
    if field == FEATURED_IMAGE_TOKEN or not key.is_image:
        return field
    coercion = sanitize_key(entry.get("image_type", entry.get("coercion", "")))
    if coercion not in ImageCoercion._value2member_map_:
        coercion = ImageCoercion.URL.value
    return {"field": field, "image_type": coercion}


def sanitize_mapping_settings(payload: object) -> dict[LogicalKey, MappingRule]:
    """Turn an administrative mapping payload into mapping rules.

    Parameters
    ----------
    payload : object
        JSON object keyed by logical key. Each value is a field path or a
        ``{"field": ..., "image_type": ...}`` object.

    Returns
    -------
    dict[LogicalKey, MappingRule]
        Rules for the recognised keys with non-empty paths. Image keys get
        ``url`` coercion unless a valid one is given; other keys never
        carry coercion.

    Raises
    ------
    InvalidSettingsError
        If ``payload`` is not a JSON object.

    Examples
    --------
    >>> rules = sanitize_mapping_settings({"thumbnail_url": "hero"})
    >>> rules[LogicalKey.THUMBNAIL_URL]
    PathRule(path='hero', coercion=<ImageCoercion.URL: 'url'>)
    """
    entries = _require_mapping(payload, "Mapping settings")
    rules: dict[LogicalKey, MappingRule] = {}
    for raw_key, raw_rule in entries.items():
        if raw_key not in LogicalKey._value2member_map_:
            log_debug(logger, "Dropping mapping for unknown key %r.", raw_key)
            continue
        key = LogicalKey(raw_key)
        rule = parse_mapping_rule(_clean_rule_source(key, raw_rule), key)
        if rule is not None:
            rules[key] = rule
    return rules


def rule_to_payload(rule: MappingRule) -> object:
    """Return the JSON form of a persistable rule, or ``None``.

    Callable rules only exist at runtime and have no JSON form.
    """
    match rule:
        case FeaturedImageRule(token=token):
            return token
        case PathRule(path=path, coercion=None):
            return path
        case PathRule(path=path, coercion=coercion):
            return {"field": path, "image_type": str(coercion)}
    return None


def rules_to_payload(rules: cabc.Mapping[LogicalKey, MappingRule]) -> JsonMapping:
    """Return the JSON form of ``rules``, skipping callable rules."""
    payload: JsonMapping = {}
    for key, rule in rules.items():
        value = rule_to_payload(rule)
        if value is not None:
            payload[key.value] = value
    return payload


def sanitize_content_types(
    payload: object,
    *,
    known: cabc.Collection[str] | None = None,
) -> tuple[str, ...]:
    """Sanitise a content-type allowlist.

    Parameters
    ----------
    payload : object
        JSON array of content-type identifiers.
    known : collections.abc.Collection[str] | None, optional
        When given, identifiers outside it are dropped.

    Returns
    -------
    tuple[str, ...]
        Unique normalised identifiers in input order, never including
        ``attachment``. An empty result falls back to the default
        allowlist.

    Raises
    ------
    InvalidSettingsError
        If ``payload`` is not a JSON array.
    """
    if isinstance(payload, (str, bytes)) or not isinstance(payload, cabc.Sequence):
        msg = "Content types must be a JSON array."
        raise InvalidSettingsError(msg)
    cleaned: list[str] = []
    for raw in typ.cast("cabc.Sequence[object]", payload):
        content_type = sanitize_key(raw)
        if not content_type or content_type in EXCLUDED_CONTENT_TYPES:
            continue
        if known is not None and content_type not in known:
            continue
        cleaned.append(content_type)
    return tuple(dict.fromkeys(cleaned)) or DEFAULT_CONTENT_TYPES


def _clean_clip_row(row: cabc.Mapping[str, object]) -> JsonMapping:
    raw_url = row.get("url")
    url = raw_url.strip() if isinstance(raw_url, str) else ""
    name = first_present(row, NAME_ALIASES)
    return {
        "name": sanitize_text_field(name or ""),
        "startOffset": coerce_int(first_present(row, START_ALIASES), 0),
        "endOffset": coerce_int(first_present(row, END_ALIASES), None),
        "url": url if is_valid_url(url) else "",
    }


def sanitize_clips_json(raw: object) -> str:
    """Re-serialise clip rows as a clean JSON array string.

    ``raw`` may be a JSON string or an already decoded list. Invalid JSON
    or a non-array top level yields ``""``; rows that are not objects are
    dropped.

    Examples
    --------
    >>> sanitize_clips_json('[{"name": "<b>Intro</b>", "startOffset": "3"}]')
    '[{"name": "Intro", "startOffset": 3, "endOffset": null, "url": ""}]'
    >>> sanitize_clips_json("not json")
    ''
    """
    decoded: object = raw
    if isinstance(raw, str):
        if not raw.strip():
            return ""
        try:
            decoded = json.loads(raw)
        except json.JSONDecodeError:
            log_debug(logger, "Discarding clips that are not valid JSON.")
            return ""
    if not isinstance(decoded, list):
        return ""
    rows = [
        _clean_clip_row(typ.cast("cabc.Mapping[str, object]", row))
        for row in typ.cast("list[object]", decoded)
        if isinstance(row, cabc.Mapping)
    ]
    return json.dumps(rows, ensure_ascii=False)


def _checkbox(value: object) -> str:
    return "1" if coerce_flag(value) else ""


def _url(value: object) -> str:
    text = "" if value is None else str(value).strip()
    return text if is_valid_url(text) else ""


def _trimmed(value: object) -> str:
    return "" if value is None else str(value).strip()


#: Per-item override fields and the cleaner applied to each.
OVERRIDE_FIELD_CLEANERS: dict[str, cabc.Callable[[object], str]] = {
    "enabled": _checkbox,
    LogicalKey.TITLE.value: sanitize_text_field,
    LogicalKey.DESCRIPTION.value: strip_unsafe_markup,
    LogicalKey.UPLOAD_DATE.value: sanitize_text_field,
    LogicalKey.DURATION_ISO.value: sanitize_text_field,
    LogicalKey.THUMBNAIL_URL.value: sanitize_text_field,
    LogicalKey.CONTENT_URL.value: _url,
    LogicalKey.EMBED_URL.value: _url,
    LogicalKey.TRANSCRIPT_URL.value: _trimmed,
    LogicalKey.LANGUAGE.value: sanitize_text_field,
    LogicalKey.SEEKTOACTION.value: _checkbox,
    "clips_json": sanitize_clips_json,
    LogicalKey.VISUAL_DESCRIPTION.value: strip_unsafe_markup,
}


def sanitize_overrides(payload: object) -> dict[str, str]:
    """Clean a per-item override payload.

    Unknown keys are ignored and fields that clean to an empty value are
    left out, so saving a blank field removes the override.

    Raises
    ------
    InvalidSettingsError
        If ``payload`` is not a JSON object.
    """
    entries = _require_mapping(payload, "Item overrides")
    cleaned: dict[str, str] = {}
    for name, cleaner in OVERRIDE_FIELD_CLEANERS.items():
        if name not in entries:
            continue
        value = cleaner(entries[name])
        if not is_empty(value):
            cleaned[name] = value
    return cleaned


__all__ = [
    "EXCLUDED_CONTENT_TYPES",
    "OVERRIDE_FIELD_CLEANERS",
    "InvalidSettingsError",
    "VideoSchemaError",
    "rule_to_payload",
    "rules_to_payload",
    "sanitize_clips_json",
    "sanitize_content_types",
    "sanitize_key",
    "sanitize_mapping_settings",
    "sanitize_overrides",
]
