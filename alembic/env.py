"""Alembic environment for the settings schema.

Migrations run on a connection handed over through
``config.attributes["connection"]`` (see ``apply_migrations``) or, from
the ``alembic`` command line, on an async engine built from
``DATABASE_URL`` with ``sqlalchemy.url`` as the fallback.
"""

from __future__ import annotations

import asyncio
import typing as typ

from sqlalchemy import pool
from sqlalchemy.ext.asyncio import AsyncConnection, async_engine_from_config

from alembic import context
from videoschema.config import database_url_from_environment
from videoschema.logging import configure_logging_from_environment, get_logger, log_info
from videoschema.structured.storage import Base

if typ.TYPE_CHECKING:
    from sqlalchemy.engine import Connection

_logger = get_logger("videoschema.migrations")


def _database_url() -> str:
    """Return the target URL, preferring ``DATABASE_URL`` over the ini file."""
    url = database_url_from_environment() or context.config.get_main_option(
        "sqlalchemy.url"
    )
    if not url:
        msg = "DATABASE_URL is not set and sqlalchemy.url is empty."
        raise RuntimeError(msg)
    return url


def _migrate(connection: Connection | None = None, *, url: str | None = None) -> None:
    """Run pending migrations on ``connection``, or render them for ``url``."""
    context.configure(
        connection=connection,
        url=url,
        target_metadata=Base.metadata,
        compare_type=True,
        literal_binds=connection is None,
    )
    with context.begin_transaction():
        context.run_migrations()


async def _migrate_with_engine(url: str) -> None:
    engine = async_engine_from_config(
        {"sqlalchemy.url": url}, prefix="sqlalchemy.", poolclass=pool.NullPool
    )
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_migrate)
    finally:
        await engine.dispose()


def _run() -> None:
    handed_over = context.config.attributes.get("connection")
    match handed_over:
        case None:
            # Invoked by the alembic CLI rather than by apply_migrations.
            configure_logging_from_environment()
            if context.is_offline_mode():
                log_info(_logger, "Rendering settings migrations as SQL.")
                _migrate(url=_database_url())
                return
            log_info(_logger, "Applying settings migrations.")
            asyncio.run(_migrate_with_engine(_database_url()))
        case AsyncConnection():
            asyncio.run(handed_over.run_sync(_migrate))
        case _:
            _migrate(typ.cast("Connection", handed_over))


_run()
