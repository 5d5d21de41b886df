"""Record-to-domain mapping helpers for settings persistence.

Examples
--------
Convert a record to a mapping rule:

>>> key, rule = _rule_from_record(record)
"""

from __future__ import annotations

import typing as typ

from videoschema.logging import get_logger, log_warning
from videoschema.structured.domain import (
    FEATURED_IMAGE_TOKEN,
    FeaturedImageRule,
    ImageCoercion,
    LogicalKey,
    PathRule,
)

from .models import FieldMappingRecord

if typ.TYPE_CHECKING:
    from videoschema.structured.domain import MappingRule

logger = get_logger(__name__)


def _rule_from_record(
    record: FieldMappingRecord,
) -> tuple[LogicalKey, MappingRule] | None:
    """Map a mapping record to a ``(key, rule)`` pair.

    Rows with an unknown logical key are skipped with a warning; an
    unknown coercion is dropped.
    """
    if record.logical_key not in LogicalKey._value2member_map_:
        log_warning(logger, "Ignoring stored mapping for %r.", record.logical_key)
        return None
    key = LogicalKey(record.logical_key)
    if record.path == FEATURED_IMAGE_TOKEN:
        return key, FeaturedImageRule()
    coercion = (
        ImageCoercion(record.coercion)
        if key.is_image and record.coercion in ImageCoercion._value2member_map_
        else None
    )
    return key, PathRule(record.path, coercion)


def _rule_to_record(key: LogicalKey, rule: MappingRule) -> FieldMappingRecord | None:
    """Map a rule to a record; callable rules have no stored form."""
    match rule:
        case FeaturedImageRule(token=token):
            return FieldMappingRecord(logical_key=key.value, path=token, coercion=None)
        case PathRule(path=path, coercion=coercion):
            return FieldMappingRecord(
                logical_key=key.value,
                path=path,
                coercion=None if coercion is None else coercion.value,
            )
    return None
