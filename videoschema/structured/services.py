"""Async service layer for mapping settings, overrides and previews.

Service functions receive an already-entered ``SettingsUnitOfWork``.
Writes sanitise their payload first, so ``InvalidSettingsError`` is raised
before anything touches storage, and commit on success.

Examples
--------
>>> async with SqlAlchemySettingsUnitOfWork(session_factory) as uow:
...     rules = await replace_mapping_config(uow, {"title": "headline"})
"""

from __future__ import annotations

import typing as typ

from videoschema.logging import get_logger, log_info

from .adapters import InMemoryOverrideStore, ItemSnapshot, StaticConfigStore
from .assembler import PayloadAssembler
from .domain import MappingConfig
from .settings import (
    sanitize_content_types,
    sanitize_mapping_settings,
    sanitize_overrides,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from videoschema.config import AssemblySettings

    from .domain import ItemId, ItemPreview, JsonMapping, LogicalKey, MappingRule
    from .ports import FilterMapping, PayloadAugmenter, SettingsUnitOfWork

logger = get_logger(__name__)


async def load_mapping_config(uow: SettingsUnitOfWork) -> MappingConfig:
    """Load the persisted rules and content-type allowlist."""
    rules = await uow.field_mappings.list_all()
    content_types = await uow.content_types.list_all()
    return MappingConfig(rules=rules, content_types=content_types)


async def replace_mapping_config(
    uow: SettingsUnitOfWork,
    payload: object,
) -> dict[LogicalKey, MappingRule]:
    """Sanitise and persist a mapping settings payload.

    Parameters
    ----------
    uow : SettingsUnitOfWork
        Active unit-of-work.
    payload : object
        JSON object keyed by logical key.

    Returns
    -------
    dict[LogicalKey, MappingRule]
        The rules that were stored.

    Raises
    ------
    InvalidSettingsError
        If ``payload`` is not a JSON object.
    """
    rules = sanitize_mapping_settings(payload)
    await uow.field_mappings.replace_all(rules)
    await uow.commit()
    log_info(logger, "Stored %d mapping rules.", len(rules))
    return rules


async def replace_content_types(
    uow: SettingsUnitOfWork,
    payload: object,
    *,
    known: cabc.Collection[str] | None = None,
) -> tuple[str, ...]:
    """Sanitise and persist the content-type allowlist.

    Raises
    ------
    InvalidSettingsError
        If ``payload`` is not a JSON array.
    """
    content_types = sanitize_content_types(payload, known=known)
    await uow.content_types.replace_all(content_types)
    await uow.commit()
    log_info(logger, "Stored content types %s.", ",".join(content_types))
    return content_types


async def get_item_overrides(uow: SettingsUnitOfWork, item_id: ItemId) -> JsonMapping:
    """Return the stored override set of one item."""
    return await uow.item_overrides.get_for_item(item_id)


async def replace_item_overrides(
    uow: SettingsUnitOfWork,
    item_id: ItemId,
    payload: object,
) -> dict[str, str]:
    """Sanitise and persist the override set of one item.

    Fields that clean to an empty value are dropped, so an all-blank
    payload clears the stored overrides.

    Raises
    ------
    InvalidSettingsError
        If ``payload`` is not a JSON object.
    """
    overrides = sanitize_overrides(payload)
    await uow.item_overrides.replace_for_item(item_id, overrides)
    await uow.commit()
    log_info(logger, "Stored %d override fields for item %s.", len(overrides), item_id)
    return overrides


async def preview_item(  # noqa: PLR0913
    uow: SettingsUnitOfWork,
    item_id: ItemId,
    snapshot_payload: object,
    *,
    settings: AssemblySettings,
    filter_mapping: FilterMapping | None = None,
    augmenter: PayloadAugmenter | None = None,
) -> ItemPreview:
    """Assemble one item from a snapshot and the persisted settings.

    Parameters
    ----------
    uow : SettingsUnitOfWork
        Active unit-of-work supplying settings and overrides.
    item_id : ItemId
        Item to preview.
    snapshot_payload : object
        ``{"item", "fields", "attachments"}`` JSON carrying the item's
        already-fetched data. Omitting ``fields`` previews the item as if
        no field provider were installed.
    settings : AssemblySettings
        Site-wide values for the publisher and defaults.
    filter_mapping : FilterMapping | None, optional
        Filter-style mapping hook.
    augmenter : PayloadAugmenter | None, optional
        Final augmentation hook.

    Returns
    -------
    ItemPreview
        The document together with eligibility diagnostics.

    Raises
    ------
    InvalidSettingsError
        If ``snapshot_payload`` has the wrong shape.
    """
    snapshot = ItemSnapshot.from_payload(item_id, snapshot_payload)
    config = await load_mapping_config(uow)
    overrides = await get_item_overrides(uow, item_id)
    assembler = PayloadAssembler(
        content=snapshot.content,
        config_store=StaticConfigStore(config),
        overrides=InMemoryOverrideStore({item_id: overrides}),
        attachments=snapshot.attachments,
        field_provider=snapshot.fields,
        filter_mapping=filter_mapping,
        augmenter=augmenter,
        settings=settings,
    )
    return assembler.preview(item_id)


__all__ = [
    "get_item_overrides",
    "load_mapping_config",
    "preview_item",
    "replace_content_types",
    "replace_item_overrides",
    "replace_mapping_config",
]
