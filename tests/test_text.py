"""Unit tests for markup stripping and URL checks."""

from __future__ import annotations

import pytest

from videoschema.structured.text import (
    is_valid_url,
    sanitize_text_field,
    strip_all_tags,
    strip_unsafe_markup,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("<p>Hello <b>there</b></p><script>x()</script>", "Hello there"),
        ("<style>p {}</style>  plain  ", "plain"),
        ("  no markup ", "no markup"),
        (None, ""),
        (42, "42"),
    ],
)
def test_strip_all_tags(raw: object, expected: str) -> None:
    """Markup and script or style content are removed."""
    assert strip_all_tags(raw) == expected, f"Expected {raw!r} -> {expected!r}."


def test_strip_unsafe_markup_keeps_ordinary_tags() -> None:
    """Active content and event handlers go; formatting stays."""
    cleaned = strip_unsafe_markup(
        '<p onmouseover="x()">A <em>cat</em><iframe src="e"></iframe></p>'
    )

    assert cleaned == "<p>A <em>cat</em></p>", "Expected formatting markup to remain."


def test_sanitize_text_field_collapses_whitespace() -> None:
    """Text fields are single-line with runs of whitespace collapsed."""
    assert sanitize_text_field("<b>Big</b>\n\n  launch\tday") == "Big launch day", (
        "Expected collapsed whitespace."
    )


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("https://example.com/a.jpg", True),
        ("ftp://files.example.com/v.mp4", True),
        ("example.com/a.jpg", False),
        ("https:///missing-host", False),
        ("javascript:alert(1)", False),
        (" https://example.com", False),
        ("https://example.com/a b", False),
        (None, False),
    ],
)
def test_is_valid_url(value: object, expected: bool) -> None:  # noqa: FBT001
    """Only absolute URLs with a known scheme and host are valid."""
    assert is_valid_url(value) is expected, f"Expected {value!r} -> {expected}."
