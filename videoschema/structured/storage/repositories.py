"""SQLAlchemy repositories for structured-data settings.

Repositories operate within a supplied async session and are composed
through the settings unit-of-work.

Examples
--------
Replace the stored mappings inside a unit-of-work:

>>> async with SqlAlchemySettingsUnitOfWork(session_factory) as uow:
...     await uow.field_mappings.replace_all(rules)
...     await uow.commit()
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import sqlalchemy as sa

from videoschema.structured.ports import (
    ContentTypeRepository,
    FieldMappingRepository,
    ItemOverrideRepository,
)

from .mappers import _rule_from_record, _rule_to_record
from .models import EnabledContentTypeRecord, FieldMappingRecord, ItemOverrideRecord

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from sqlalchemy.ext.asyncio import AsyncSession

    from videoschema.structured.domain import (
        ItemId,
        JsonMapping,
        LogicalKey,
        MappingRule,
    )


@dc.dataclass(slots=True)
class _RepositoryBase:
    """Shared helpers for SQLAlchemy repositories."""

    _session: AsyncSession

    async def _list_ordered[RecordT](
        self,
        record_type: type[RecordT],
        order_by_clause: typ.Any,  # noqa: ANN401  # SQLAlchemy clause typing.
    ) -> list[RecordT]:
        """List every record of ``record_type`` in the given order."""
        result = await self._session.execute(
            sa.select(record_type).order_by(order_by_clause)
        )
        return list(result.scalars())

    async def _delete_all(self, record_type: type[object]) -> None:
        """Delete every record of ``record_type``."""
        await self._session.execute(sa.delete(record_type))

    async def _add_records[RecordT](self, records: cabc.Iterable[RecordT]) -> None:
        """Add records to the current SQLAlchemy session."""
        self._session.add_all(list(records))


class SqlAlchemyFieldMappingRepository(_RepositoryBase, FieldMappingRepository):
    """Persist mapping rules, one row per logical key."""

    async def list_all(self) -> dict[LogicalKey, MappingRule]:
        """Return every stored rule keyed by logical key."""
        records = await self._list_ordered(
            FieldMappingRecord, FieldMappingRecord.logical_key
        )
        pairs = (_rule_from_record(record) for record in records)
        return dict(pair for pair in pairs if pair is not None)

    async def replace_all(
        self,
        rules: cabc.Mapping[LogicalKey, MappingRule],
    ) -> None:
        """Replace the stored rules; callable rules are not persisted."""
        await self._delete_all(FieldMappingRecord)
        records = (_rule_to_record(key, rule) for key, rule in rules.items())
        await self._add_records(record for record in records if record is not None)


class SqlAlchemyContentTypeRepository(_RepositoryBase, ContentTypeRepository):
    """Persist the ordered content-type allowlist."""

    async def list_all(self) -> tuple[str, ...] | None:
        """Return the stored allowlist, or ``None`` when empty."""
        records = await self._list_ordered(
            EnabledContentTypeRecord, EnabledContentTypeRecord.position
        )
        return tuple(record.content_type for record in records) or None

    async def replace_all(self, content_types: cabc.Sequence[str]) -> None:
        """Replace the stored allowlist, keeping its order."""
        await self._delete_all(EnabledContentTypeRecord)
        await self._add_records(
            EnabledContentTypeRecord(content_type=content_type, position=position)
            for position, content_type in enumerate(dict.fromkeys(content_types))
        )


class SqlAlchemyItemOverrideRepository(_RepositoryBase, ItemOverrideRepository):
    """Persist one JSONB override set per content item."""

    async def get_for_item(self, item_id: ItemId) -> JsonMapping:
        """Return the stored override values (empty when none)."""
        record = await self._session.get(ItemOverrideRecord, item_id)
        if record is None:
            return {}
        return dict(record.overrides or {})

    async def replace_for_item(
        self,
        item_id: ItemId,
        values: cabc.Mapping[str, object],
    ) -> None:
        """Replace the stored values; an empty set deletes the row."""
        record = await self._session.get(ItemOverrideRecord, item_id)
        if not values:
            if record is not None:
                await self._session.delete(record)
            return
        if record is None:
            record = ItemOverrideRecord(item_id=item_id, overrides=dict(values))
            self._session.add(record)
            return
        record.overrides = dict(values)
