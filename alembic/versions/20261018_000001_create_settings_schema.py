"""Create the structured-data settings schema.

This migration creates the tables backing the administrative surface:
persisted field mappings, the content-type allowlist and per-item
override sets.

Examples
--------
Apply the migration with Alembic:

>>> alembic upgrade head
"""

from __future__ import annotations

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

revision = "20261018_000001"
down_revision = None
branch_labels = None
depends_on = None


def _updated_at_column() -> sa.Column:
    """Create the shared updated_at column."""
    return sa.Column(
        "updated_at",
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.func.now(),
    )


def upgrade() -> None:
    """Create the settings tables."""
    op.create_table(
        "field_mappings",
        sa.Column("logical_key", sa.String(64), primary_key=True),
        sa.Column("path", sa.String(512), nullable=False),
        sa.Column("coercion", sa.String(16), nullable=True),
        _updated_at_column(),
    )
    op.create_table(
        "enabled_content_types",
        sa.Column("content_type", sa.String(64), primary_key=True),
        sa.Column("position", sa.Integer(), nullable=False),
    )
    op.create_table(
        "item_overrides",
        sa.Column("item_id", sa.String(191), primary_key=True),
        sa.Column("overrides", postgresql.JSONB(), nullable=False),
        _updated_at_column(),
    )


def downgrade() -> None:
    """Drop the settings tables."""
    op.drop_table("item_overrides")
    op.drop_table("enabled_content_types")
    op.drop_table("field_mappings")
