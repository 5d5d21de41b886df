"""In-memory reference adapters for the synchronous ports.

These adapters hold already-fetched data. The administrative preview
builds them from a JSON snapshot of one item, and tests use them as
fixtures.

Examples
--------
>>> snapshot = ItemSnapshot.from_payload("42", {"item": {"title": "Demo"}})
>>> snapshot.content.get_item("42").title
'Demo'
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import datetime as dt
import typing as typ

from videoschema.structured._coercion import coerce_int
from videoschema.structured.domain import (
    AttachmentInfo,
    ContentItem,
    MappingConfig,
    as_attachment_id,
)
from videoschema.structured.settings import InvalidSettingsError

if typ.TYPE_CHECKING:
    from videoschema.structured.domain import ItemId


class InMemoryContentProvider:
    """Serve ``ContentItem`` values from a mapping."""

    def __init__(self, items: cabc.Mapping[ItemId, ContentItem]) -> None:
        self._items = dict(items)

    def get_item(self, item_id: ItemId) -> ContentItem | None:
        """Return the item or ``None``."""
        return self._items.get(item_id)


class InMemoryFieldProvider:
    """Serve custom fields per item; unknown fields are ``False``."""

    def __init__(
        self,
        fields: cabc.Mapping[ItemId, cabc.Mapping[str, object]],
    ) -> None:
        self._fields = {item_id: dict(values) for item_id, values in fields.items()}

    def get_field(self, name: str, item_id: ItemId) -> object:
        """Return the named field, or ``False`` when it does not exist."""
        return self._fields.get(item_id, {}).get(name, False)


class InMemoryAttachmentProvider:
    """Serve attachment metadata by numeric identifier."""

    def __init__(self, attachments: cabc.Mapping[int, AttachmentInfo]) -> None:
        self._attachments = dict(attachments)

    def get_attachment(self, attachment_id: int) -> AttachmentInfo | None:
        """Return attachment metadata or ``None``."""
        return self._attachments.get(attachment_id)


@dc.dataclass(frozen=True, slots=True)
class StaticConfigStore:
    """Config store returning a fixed ``MappingConfig``."""

    config: MappingConfig = dc.field(default_factory=MappingConfig)

    def load_mapping_config(self) -> MappingConfig:
        """Return the held configuration."""
        return self.config


class InMemoryOverrideStore:
    """Serve per-item override sets from a mapping."""

    def __init__(
        self,
        overrides: cabc.Mapping[ItemId, cabc.Mapping[str, object]] | None = None,
    ) -> None:
        self._overrides = {
            item_id: dict(values) for item_id, values in (overrides or {}).items()
        }

    def overrides_for(self, item_id: ItemId) -> cabc.Mapping[str, object]:
        """Return the override set for ``item_id`` (empty when absent)."""
        return self._overrides.get(item_id, {})


def _object_field(
    payload: cabc.Mapping[str, object], name: str
) -> cabc.Mapping[str, object]:
    value = payload.get(name, {})
    if value is None:
        return {}
    if not isinstance(value, cabc.Mapping):
        msg = f"Snapshot field {name!r} must be a JSON object."
        raise InvalidSettingsError(msg)
    return typ.cast("cabc.Mapping[str, object]", value)


def _parse_datetime(value: object) -> dt.datetime | None:
    if isinstance(value, dt.datetime):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return dt.datetime.fromisoformat(value.strip())
    except ValueError as exc:
        msg = f"Invalid ISO-8601 published_at: {value!r}."
        raise InvalidSettingsError(msg) from exc


def _text(value: object) -> str:
    return "" if value is None else str(value)


def _parse_item(item_id: ItemId, payload: cabc.Mapping[str, object]) -> ContentItem:
    return ContentItem(
        item_id=item_id,
        title=_text(payload.get("title")),
        excerpt=_text(payload.get("excerpt")),
        permalink=_text(payload.get("permalink")),
        published_at=_parse_datetime(payload.get("published_at")),
        content_type=_text(payload.get("content_type")) or "post",
        featured_image_id=as_attachment_id(payload.get("featured_image_id")),
    )


def _parse_attachment(raw_id: object, payload: object) -> tuple[int, AttachmentInfo]:
    attachment_id = as_attachment_id(raw_id)
    if attachment_id is None or not isinstance(payload, cabc.Mapping):
        msg = f"Invalid attachment entry for {raw_id!r}."
        raise InvalidSettingsError(msg)
    entry = typ.cast("cabc.Mapping[str, object]", payload)
    mime_type = entry.get("mime_type")
    return attachment_id, AttachmentInfo(
        url=_text(entry.get("url")),
        mime_type=mime_type if isinstance(mime_type, str) and mime_type else None,
        byte_size=coerce_int(entry.get("byte_size"), None),
        width=coerce_int(entry.get("width"), None),
        height=coerce_int(entry.get("height"), None),
    )


@dc.dataclass(frozen=True, slots=True)
class ItemSnapshot:
    """Providers holding the already-fetched data of one item.

    Attributes
    ----------
    content : InMemoryContentProvider
        Serves the item itself.
    fields : InMemoryFieldProvider | None
        Serves custom fields; ``None`` when the snapshot carries none,
        which means no field provider is available.
    attachments : InMemoryAttachmentProvider
        Serves attachment metadata.
    """

    content: InMemoryContentProvider
    fields: InMemoryFieldProvider | None
    attachments: InMemoryAttachmentProvider

    @classmethod
    def from_payload(cls, item_id: ItemId, payload: object) -> ItemSnapshot:
        """Build a snapshot from ``{"item", "fields", "attachments"}`` JSON.

        Raises
        ------
        InvalidSettingsError
            If the payload or one of its parts has the wrong shape.
        """
        if not isinstance(payload, cabc.Mapping):
            msg = "Item snapshot must be a JSON object."
            raise InvalidSettingsError(msg)
        body = typ.cast("cabc.Mapping[str, object]", payload)
        item = _parse_item(item_id, _object_field(body, "item"))
        fields = body.get("fields")
        attachments = dict(
            _parse_attachment(raw_id, entry)
            for raw_id, entry in _object_field(body, "attachments").items()
        )
        return cls(
            content=InMemoryContentProvider({item_id: item}),
            fields=(
                None
                if fields is None
                else InMemoryFieldProvider({item_id: _object_field(body, "fields")})
            ),
            attachments=InMemoryAttachmentProvider(attachments),
        )


__all__ = [
    "InMemoryAttachmentProvider",
    "InMemoryContentProvider",
    "InMemoryFieldProvider",
    "InMemoryOverrideStore",
    "ItemSnapshot",
    "StaticConfigStore",
]
