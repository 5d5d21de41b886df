"""SQLAlchemy ORM models for structured-data settings.

Three tables back the administrative surface: one row per mapped logical
key, the ordered content-type allowlist, and one JSONB override set per
content item.

Examples
--------
Use the base metadata to create the settings tables:

>>> from sqlalchemy import create_engine
>>> engine = create_engine("postgresql://example")
>>> Base.metadata.create_all(engine)
"""

from __future__ import annotations

# SQLAlchemy evaluates annotations at runtime; keep stdlib types imported.
import datetime as dt  # noqa: TC003
import typing as typ

import sqlalchemy as sa
from sqlalchemy import orm
from sqlalchemy.dialects import postgresql


class Base(orm.DeclarativeBase):
    """Base class for settings models.

    Notes
    -----
    Alembic and test scaffolding rely on ``Base.metadata`` when applying
    migrations or creating schema definitions.
    """


class FieldMappingRecord(Base):
    """SQLAlchemy model for one persisted mapping rule.

    Attributes
    ----------
    logical_key : str
        Logical key the rule sources; primary key.
    path : str
        Dot path, or the ``featured_image`` token.
    coercion : str | None
        Image coercion (``url``, ``array`` or ``id``) for image keys.
    updated_at : datetime.datetime
        Timestamp of the last change.
    """

    __tablename__ = "field_mappings"

    logical_key: orm.Mapped[str] = orm.mapped_column(sa.String(64), primary_key=True)
    path: orm.Mapped[str] = orm.mapped_column(sa.String(512))
    coercion: orm.Mapped[str | None] = orm.mapped_column(sa.String(16), nullable=True)
    updated_at: orm.Mapped[dt.datetime] = orm.mapped_column(
        sa.DateTime(timezone=True),
        server_default=sa.func.now(),
        onupdate=sa.func.now(),
    )


class EnabledContentTypeRecord(Base):
    """SQLAlchemy model for one allowlisted content type.

    Attributes
    ----------
    content_type : str
        Content-type identifier; primary key.
    position : int
        Order in the configured allowlist.
    """

    __tablename__ = "enabled_content_types"

    content_type: orm.Mapped[str] = orm.mapped_column(sa.String(64), primary_key=True)
    position: orm.Mapped[int] = orm.mapped_column(sa.Integer, default=0)


class ItemOverrideRecord(Base):
    """SQLAlchemy model for a content item's override set.

    Attributes
    ----------
    item_id : str
        Opaque content item identifier; primary key.
    overrides : dict[str, typing.Any]
        Sanitised override values keyed by field name.
    updated_at : datetime.datetime
        Timestamp of the last change.
    """

    __tablename__ = "item_overrides"

    item_id: orm.Mapped[str] = orm.mapped_column(sa.String(191), primary_key=True)
    overrides: orm.Mapped[dict[str, typ.Any]] = orm.mapped_column(
        postgresql.JSONB,
        default=dict,
    )
    updated_at: orm.Mapped[dt.datetime] = orm.mapped_column(
        sa.DateTime(timezone=True),
        server_default=sa.func.now(),
        onupdate=sa.func.now(),
    )


__all__ = [
    "Base",
    "EnabledContentTypeRecord",
    "FieldMappingRecord",
    "ItemOverrideRecord",
]
