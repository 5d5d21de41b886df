"""Ports for the collaborators the structured-data pipeline depends on.

The synchronous ports describe the per-request lookups the assembler
makes: the host content model, an optional custom-field provider, the
attachment store, persisted settings and per-item overrides. The async
ports describe the persistence boundary used by the service layer and
the administrative API.

Examples
--------
A field provider only needs ``get_field``:

>>> class DictFieldProvider:
...     def __init__(self, fields):
...         self._fields = fields
...
...     def get_field(self, name, item_id):
...         return self._fields.get(item_id, {}).get(name, False)
"""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from types import TracebackType

    from .domain import (
        AttachmentInfo,
        ContentItem,
        ItemId,
        JsonMapping,
        LogicalKey,
        MappingConfig,
        MappingRule,
        OutputDocument,
    )


class ContentProvider(typ.Protocol):
    """Host content model lookups for one item."""

    def get_item(self, item_id: ItemId) -> ContentItem | None:
        """Return the content item, or ``None`` when it does not exist."""
        ...


class FieldProvider(typ.Protocol):
    """Custom-field lookups, in the manner of an ACF ``get_field``.

    Implementations return ``False`` (or ``MISS``) for unknown fields;
    any other value, ``None`` included, is a stored value.
    """

    def get_field(self, name: str, item_id: ItemId) -> object:
        """Return the stored value of field ``name`` for ``item_id``."""
        ...


class AttachmentProvider(typ.Protocol):
    """Attachment metadata lookups."""

    def get_attachment(self, attachment_id: int) -> AttachmentInfo | None:
        """Return metadata for ``attachment_id`` or ``None`` if unresolvable."""
        ...


class ConfigStore(typ.Protocol):
    """Read-only view of persisted mapping settings."""

    def load_mapping_config(self) -> MappingConfig:
        """Return the current mapping configuration."""
        ...


class OverrideStore(typ.Protocol):
    """Read-only view of per-item override values."""

    def overrides_for(self, item_id: ItemId) -> cabc.Mapping[str, object]:
        """Return the override set for ``item_id`` (empty when none)."""
        ...


#: Filter-style mapping hook, called once per logical key. It returns a
#: rule, a raw rule value (path string, ``{"field", "image_type"}``), a
#: callable resolver, or ``None``.
type FilterMapping = cabc.Callable[[LogicalKey], object]

#: Final augmentation hook receiving the pruned document and item id.
type PayloadAugmenter = cabc.Callable[[OutputDocument, ItemId], OutputDocument]


class FieldMappingRepository(typ.Protocol):
    """Persistence interface for per-key mapping rules."""

    async def list_all(self) -> dict[LogicalKey, MappingRule]:
        """Return every stored rule keyed by logical key."""
        ...

    async def replace_all(
        self,
        rules: cabc.Mapping[LogicalKey, MappingRule],
    ) -> None:
        """Replace the stored rules with ``rules``."""
        ...


class ContentTypeRepository(typ.Protocol):
    """Persistence interface for the content-type allowlist."""

    async def list_all(self) -> tuple[str, ...] | None:
        """Return the stored allowlist, or ``None`` when never configured."""
        ...

    async def replace_all(self, content_types: cabc.Sequence[str]) -> None:
        """Replace the stored allowlist."""
        ...


class ItemOverrideRepository(typ.Protocol):
    """Persistence interface for per-item override values."""

    async def get_for_item(self, item_id: ItemId) -> JsonMapping:
        """Return the stored override values for ``item_id``."""
        ...

    async def replace_for_item(
        self,
        item_id: ItemId,
        values: cabc.Mapping[str, object],
    ) -> None:
        """Replace the stored override values for ``item_id``."""
        ...


class SettingsUnitOfWork(typ.Protocol):
    """Transactional boundary over the settings repositories.

    Attributes
    ----------
    field_mappings : FieldMappingRepository
        Mapping rule persistence.
    content_types : ContentTypeRepository
        Content-type allowlist persistence.
    item_overrides : ItemOverrideRepository
        Per-item override persistence.
    """

    field_mappings: FieldMappingRepository
    content_types: ContentTypeRepository
    item_overrides: ItemOverrideRepository

    async def __aenter__(self) -> SettingsUnitOfWork:
        """Enter the unit-of-work context."""
        ...

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        """Leave the unit-of-work context."""
        ...

    async def commit(self) -> None:
        """Commit the current transaction."""
        ...

    async def rollback(self) -> None:
        """Roll back the current transaction."""
        ...


__all__ = [
    "AttachmentProvider",
    "ConfigStore",
    "ContentProvider",
    "ContentTypeRepository",
    "FieldMappingRepository",
    "FieldProvider",
    "FilterMapping",
    "ItemOverrideRepository",
    "OverrideStore",
    "PayloadAugmenter",
    "SettingsUnitOfWork",
]
