"""Pytest fixtures for assembly and database-backed tests.

Database fixtures run against py-pglite Postgres; set
``VIDEOSCHEMA_TEST_DB=sqlite`` to skip them.

Examples
--------
Run database-backed tests with py-pglite:

>>> VIDEOSCHEMA_TEST_DB=pglite pytest -k storage
"""

from __future__ import annotations

import asyncio
import contextlib
import os
import typing as typ

import pytest
import pytest_asyncio
import sqlalchemy as sa
import sqlalchemy.exc as sa_exc

from _assembly_helpers import DEMO_PERMALINK, DEMO_SETTINGS
from videoschema.structured.storage.alembic_helpers import apply_migrations

if typ.TYPE_CHECKING:
    from pathlib import Path

    from falcon import testing
    from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

try:
    from py_pglite import PGliteConfig, PGliteManager

    _PGLITE_AVAILABLE = True
except ModuleNotFoundError:  # pragma: no cover - optional dependency
    _PGLITE_AVAILABLE = False


def _should_use_pglite() -> bool:
    """Return True when tests should attempt py-pglite.

    If a non-SQLite backend is requested but py-pglite is unavailable,
    fail fast with a clear error instead of silently skipping tests.
    """
    target = os.getenv("VIDEOSCHEMA_TEST_DB", "pglite").lower()
    if target == "sqlite":
        return False
    if not _PGLITE_AVAILABLE:
        msg = (
            "Database-backed tests requested via VIDEOSCHEMA_TEST_DB="
            f"{target!r}, but py-pglite is not installed or unavailable. "
            "Install the test extra or set VIDEOSCHEMA_TEST_DB=sqlite."
        )
        raise RuntimeError(msg)
    return True


@contextlib.asynccontextmanager
async def _pglite_engine(tmp_path: Path) -> typ.AsyncIterator[AsyncEngine]:
    """Start a py-pglite Postgres and yield an async engine bound to it."""
    if not _PGLITE_AVAILABLE:  # pragma: no cover - defensive guard
        msg = "py-pglite is not available for test fixtures."
        raise RuntimeError(msg)

    work_dir = tmp_path / "pglite"
    config = PGliteConfig(work_dir=work_dir)

    with PGliteManager(config):
        from sqlalchemy.ext.asyncio import create_async_engine

        dsn = config.get_connection_string()
        engine = create_async_engine(dsn, pool_pre_ping=True)
        try:
            await _wait_for_engine_ready(engine)
            yield engine
        finally:
            await engine.dispose()


async def _wait_for_engine_ready(engine: AsyncEngine) -> None:
    """Wait for py-pglite to accept SQLAlchemy connections."""
    max_attempts = 30
    delay_seconds = 0.1
    for attempt in range(1, max_attempts + 1):
        try:
            async with engine.connect() as connection:
                await connection.execute(sa.text("SELECT 1"))
        except sa_exc.OperationalError:
            if attempt == max_attempts:
                raise
            await asyncio.sleep(delay_seconds)
        else:
            return


@pytest.fixture
def demo_snapshot_payload() -> dict[str, object]:
    """Return a preview snapshot for the demo item."""
    return {
        "item": {
            "title": "Demo",
            "excerpt": "A short demo clip.",
            "permalink": DEMO_PERMALINK,
            "published_at": "2025-01-01T00:00:00+00:00",
            "content_type": "post",
        },
        "fields": {
            "hero": 7,
            "video_duration_iso": "PT1M30S",
        },
        "attachments": {
            "7": {
                "url": "https://example.com/hero.jpg",
                "mime_type": "image/jpeg",
                "width": 800,
                "height": 450,
            }
        },
    }


@pytest_asyncio.fixture
async def pglite_engine(tmp_path: Path) -> typ.AsyncIterator[AsyncEngine]:
    """Yield an async engine backed by py-pglite Postgres."""
    if not _should_use_pglite():
        pytest.skip("VIDEOSCHEMA_TEST_DB=sqlite disables py-pglite-backed fixtures.")

    async with _pglite_engine(tmp_path) as engine:
        yield engine


@pytest.fixture
def _function_scoped_runner() -> typ.Iterator[asyncio.Runner]:
    """Provide a function-scoped asyncio.Runner for sync BDD steps."""
    with asyncio.Runner() as runner:
        yield runner


@pytest_asyncio.fixture
async def migrated_engine(
    pglite_engine: AsyncEngine,
) -> typ.AsyncIterator[AsyncEngine]:
    """Yield a py-pglite engine with migrations applied."""
    await apply_migrations(pglite_engine)
    yield pglite_engine


@pytest.fixture
def session_factory(
    migrated_engine: AsyncEngine,
) -> async_sessionmaker[AsyncSession]:
    """Yield an async session factory bound to the migrated engine."""
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    return async_sessionmaker(
        migrated_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
def settings_api_client(
    session_factory: async_sessionmaker[AsyncSession],
) -> testing.TestClient:
    """Build a Falcon test client for the administrative endpoints."""
    from falcon import testing

    from videoschema.api import create_app
    from videoschema.structured.storage import SqlAlchemySettingsUnitOfWork

    app = create_app(
        lambda: SqlAlchemySettingsUnitOfWork(session_factory),
        settings=DEMO_SETTINGS,
    )
    return testing.TestClient(app)
