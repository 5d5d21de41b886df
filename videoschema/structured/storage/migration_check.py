"""Schema drift detection between the settings models and migrations.

The check applies every Alembic migration to an ephemeral PostgreSQL
database and compares the result with ``Base.metadata``. Any difference
means a model changed without a matching migration.

Examples
--------
Run the drift check from the command line:

>>> python -m videoschema.structured.storage.migration_check
"""

from __future__ import annotations

import asyncio
import pathlib
import sys
import tempfile
import typing as typ

from alembic.autogenerate import compare_metadata
from alembic.migration import MigrationContext
from sqlalchemy.ext.asyncio import create_async_engine

from videoschema.logging import (
    configure_logging_from_environment,
    get_logger,
    log_error,
    log_info,
)

from .alembic_helpers import apply_migrations
from .models import Base

if typ.TYPE_CHECKING:
    import sqlalchemy as sa
    from sqlalchemy.engine import Connection
    from sqlalchemy.ext.asyncio import AsyncEngine

_logger = get_logger(__name__)


def _compare_schema(
    connection: Connection,
    metadata: sa.MetaData,
) -> list[tuple[object, ...]]:
    """Compare a migrated database against ORM model metadata."""
    ctx = MigrationContext.configure(connection)
    return typ.cast("list[tuple[object, ...]]", compare_metadata(ctx, metadata))


async def detect_schema_drift(engine: AsyncEngine) -> list[tuple[object, ...]]:
    """Return differences between applied migrations and the ORM models.

    Parameters
    ----------
    engine : AsyncEngine
        Engine whose database already has every migration applied.

    Returns
    -------
    list[tuple[object, ...]]
        Differences; an empty list means models and migrations agree.
    """
    async with engine.connect() as connection:
        return await connection.run_sync(_compare_schema, Base.metadata)


async def check_migrations_cli() -> int:
    """Run the schema drift check as a CLI entrypoint.

    Returns
    -------
    int
        0 when models and migrations match, 1 on drift, 2 when no
        ephemeral database can be started.
    """
    try:
        from py_pglite import PGliteConfig, PGliteManager
    except ModuleNotFoundError:
        log_error(_logger, "py-pglite is not installed; cannot check migrations.")
        return 2

    work_dir = pathlib.Path(tempfile.mkdtemp(prefix="videoschema-migration-check-"))
    config = PGliteConfig(work_dir=work_dir)

    with PGliteManager(config):
        engine = create_async_engine(config.get_connection_string(), pool_pre_ping=True)
        try:
            log_info(_logger, "Applying migrations to ephemeral database.")
            await apply_migrations(engine)
            diffs = await detect_schema_drift(engine)
        finally:
            await engine.dispose()

    if diffs:
        log_error(_logger, "Schema drift detected (%s difference(s)):", len(diffs))
        for diff in diffs:
            log_error(_logger, "  %s", diff)
        return 1

    log_info(_logger, "No schema drift detected.")
    return 0


def main() -> int:
    """Configure logging from the environment and run the drift check."""
    configure_logging_from_environment()
    return asyncio.run(check_migrations_cli())


if __name__ == "__main__":
    sys.exit(main())
