"""Response serializers for the administrative endpoints."""

from __future__ import annotations

import typing as typ

from videoschema.structured.settings import rules_to_payload

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from videoschema.structured.domain import ItemPreview, LogicalKey, MappingRule

    from .types import JsonPayload


def serialize_mappings(rules: cabc.Mapping[LogicalKey, MappingRule]) -> JsonPayload:
    """Serialize persisted mapping rules."""
    return {"mappings": rules_to_payload(rules)}


def serialize_content_types(
    content_types: cabc.Sequence[str],
    *,
    configured: bool,
) -> JsonPayload:
    """Serialize the content-type allowlist.

    ``configured`` is False when the default allowlist is being reported.
    """
    return {"content_types": list(content_types), "configured": configured}


def serialize_overrides(
    item_id: str,
    overrides: cabc.Mapping[str, object],
) -> JsonPayload:
    """Serialize one item's override set."""
    return {"item_id": item_id, "overrides": dict(overrides)}


def serialize_preview(item_id: str, preview: ItemPreview) -> JsonPayload:
    """Serialize an item preview with its diagnostics."""
    return {
        "item_id": item_id,
        "document": preview.document,
        "eligible": preview.eligible,
        "missing_fields": list(preview.missing_fields),
        "fields": preview.fields,
    }


__all__ = [
    "serialize_content_types",
    "serialize_mappings",
    "serialize_overrides",
    "serialize_preview",
]
