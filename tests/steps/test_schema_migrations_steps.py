"""Behavioural tests for schema migration drift detection.

Examples
--------
Run the schema migration BDD scenarios:

>>> pytest tests/steps/test_schema_migrations_steps.py -k schema
"""

from __future__ import annotations

import contextlib
import typing as typ

import pytest
from pytest_bdd import given, scenario, then, when

from _storage_helpers import temporary_drift_table
from videoschema.structured.storage.migration_check import detect_schema_drift

if typ.TYPE_CHECKING:
    import asyncio
    import collections.abc as cabc

    from sqlalchemy.ext.asyncio import AsyncEngine


class DriftContext(typ.TypedDict, total=False):
    """Shared state for schema migration BDD steps."""

    engine: AsyncEngine
    diffs: list[tuple[object, ...]]


def _run_async_step(
    runner: asyncio.Runner,
    step_fn: cabc.Callable[[], typ.Awaitable[None]],
) -> None:
    """Execute an async BDD step via the provided runner."""
    coro = typ.cast("typ.Coroutine[object, object, None]", step_fn())
    runner.run(coro)


@scenario(
    "../features/schema_migrations.feature",
    "No drift when models match migrations",
)
def test_no_drift_when_models_match_migrations() -> None:
    """Run the no-drift scenario."""


@scenario(
    "../features/schema_migrations.feature",
    "Drift detected when models diverge from migrations",
)
def test_drift_detected_when_models_diverge() -> None:
    """Run the drift-detected scenario."""


@pytest.fixture
def metadata_changes() -> typ.Iterator[contextlib.ExitStack]:
    """Undo temporary metadata changes after the scenario."""
    with contextlib.ExitStack() as stack:
        yield stack


@pytest.fixture
def drift_context() -> DriftContext:
    """Share state between BDD steps."""
    return typ.cast("DriftContext", {})


@given("all Alembic migrations have been applied")
def migrations_applied(
    migrated_engine: AsyncEngine,
    drift_context: DriftContext,
) -> None:
    """Store the migrated engine in the shared context."""
    drift_context["engine"] = migrated_engine


@given("an unmigrated table has been added to the ORM metadata")
def unmigrated_table_added(metadata_changes: contextlib.ExitStack) -> None:
    """Add a temporary table to Base.metadata that has no migration."""
    metadata_changes.enter_context(temporary_drift_table())


@when("the schema drift check runs")
def drift_check_runs(
    _function_scoped_runner: asyncio.Runner,
    drift_context: DriftContext,
) -> None:
    """Run the schema drift detection."""

    async def _check() -> None:
        engine = drift_context["engine"]
        drift_context["diffs"] = await detect_schema_drift(engine)

    _run_async_step(_function_scoped_runner, _check)


@then("no drift is detected")
def no_drift(drift_context: DriftContext) -> None:
    """Assert the drift check found no differences."""
    diffs = drift_context["diffs"]
    assert diffs == [], f"Expected no schema drift, found: {diffs}"


@then("schema drift is reported")
def drift_reported(drift_context: DriftContext) -> None:
    """Assert the drift check found at least one difference."""
    diffs = drift_context["diffs"]
    assert len(diffs) > 0, "Expected schema drift to be detected."
