"""Unit tests for the femtologging helpers."""

from __future__ import annotations

import typing as typ

import pytest

from videoschema import logging as vs_logging


class _RecordingLogger:
    """Logger double capturing ``log`` calls."""

    def __init__(self) -> None:
        self.records: list[tuple[str, str, object | None]] = []

    def log(
        self,
        level: str,
        message: str,
        /,
        *,
        exc_info: object | None = None,
        stack_info: bool = False,
    ) -> None:
        self.records.append((level, message, exc_info))


@pytest.fixture
def configured_levels(monkeypatch: pytest.MonkeyPatch) -> list[dict[str, typ.Any]]:
    """Capture ``basicConfig`` calls instead of configuring femtologging."""
    calls: list[dict[str, typ.Any]] = []

    def fake_basic_config(**kwargs: typ.Any) -> None:  # noqa: ANN401
        calls.append(kwargs)

    monkeypatch.setattr(vs_logging, "basicConfig", fake_basic_config)
    return calls


@pytest.mark.parametrize(
    ("requested", "expected", "used_default"),
    [
        ("debug", "DEBUG", False),
        (" warn ", "WARNING", False),
        ("FATAL", "CRITICAL", False),
        ("verbose", "INFO", True),
        (None, "INFO", True),
    ],
)
def test_configure_logging_normalises_levels(
    configured_levels: list[dict[str, typ.Any]],
    requested: str | None,
    expected: str,
    used_default: bool,  # noqa: FBT001
) -> None:
    """Aliases map onto canonical levels; unknown values use INFO."""
    assert vs_logging.configure_logging(requested) == (expected, used_default), (
        f"Expected {requested!r} to configure {expected}."
    )
    assert configured_levels == [{"level": expected, "force": False}], (
        "Expected one basicConfig call."
    )


def test_configure_logging_from_environment(
    configured_levels: list[dict[str, typ.Any]],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """The level is read from ``VIDEOSCHEMA_LOG_LEVEL``."""
    monkeypatch.setenv(vs_logging.LOG_LEVEL_ENV, "error")

    level, used_default = vs_logging.configure_logging_from_environment(force=True)

    assert (level, used_default) == ("ERROR", False), "Expected ERROR."
    assert configured_levels == [{"level": "ERROR", "force": True}], (
        "Expected force to be forwarded."
    )


def test_log_helpers_format_messages() -> None:
    """Helpers interpolate percent-style arguments at their level."""
    logger = _RecordingLogger()
    error = RuntimeError("boom")

    vs_logging.log_debug(logger, "Resolved %s for item %s", "title", "42")
    vs_logging.log_info(logger, "100% literal")
    vs_logging.log_warning(logger, "Hook failed: %s", error, exc_info=error)
    vs_logging.log_error(logger, "Stored %d rules", 3)

    assert logger.records == [
        ("DEBUG", "Resolved title for item 42", None),
        ("INFO", "100% literal", None),
        ("WARNING", "Hook failed: boom", error),
        ("ERROR", "Stored 3 rules", None),
    ], "Expected formatted records at each level."


def test_log_helpers_reject_mismatched_arguments() -> None:
    """Templates and arguments must line up."""
    with pytest.raises(TypeError):
        vs_logging.log_info(_RecordingLogger(), "%s and %s", "one")
