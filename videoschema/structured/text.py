"""Markup stripping and URL checks shared by the normalisers."""

from __future__ import annotations

import re
import urllib.parse

from bs4 import BeautifulSoup

_WHITESPACE_RE = re.compile(r"\s+")
_URL_SCHEMES = frozenset({"http", "https", "ftp", "ftps"})
_UNSAFE_TAGS = ["script", "style", "iframe", "object", "embed", "form"]


def strip_all_tags(text: object) -> str:
    """Return ``text`` without markup, script or style content.

    Non-string values are stringified first; ``None`` becomes ``""``.

    Examples
    --------
    >>> strip_all_tags("<p>Hello <b>there</b></p><script>x()</script>")
    'Hello there'
    """
    if text is None:
        return ""
    raw = str(text)
    if "<" not in raw:
        return raw.strip()
    soup = BeautifulSoup(raw, "html.parser")
    for element in soup(["script", "style"]):
        element.decompose()
    return soup.get_text().strip()


def strip_unsafe_markup(text: object) -> str:
    """Keep ordinary markup but drop active content such as scripts.

    Examples
    --------
    >>> strip_unsafe_markup("<p>Hi<script>x()</script></p>")
    '<p>Hi</p>'
    """
    if text is None:
        return ""
    raw = str(text)
    if "<" not in raw:
        return raw.strip()
    soup = BeautifulSoup(raw, "html.parser")
    for element in soup(_UNSAFE_TAGS):
        element.decompose()
    for element in soup.find_all(True):
        handlers = [name for name in element.attrs if name.lower().startswith("on")]
        for attribute in handlers:
            del element[attribute]
    return str(soup).strip()


def sanitize_text_field(text: object) -> str:
    """Strip markup and collapse runs of whitespace into single spaces."""
    return _WHITESPACE_RE.sub(" ", strip_all_tags(text)).strip()


def is_valid_url(value: object) -> bool:
    """Return True when ``value`` is an absolute URL with a host.

    Examples
    --------
    >>> is_valid_url("https://example.com/a.jpg")
    True
    >>> is_valid_url("example.com/a.jpg")
    False
    """
    if not isinstance(value, str) or not value or value != value.strip():
        return False
    if any(char.isspace() for char in value):
        return False
    try:
        parts = urllib.parse.urlsplit(value)
    except ValueError:
        return False
    return parts.scheme.lower() in _URL_SCHEMES and bool(parts.netloc)


__all__ = [
    "is_valid_url",
    "sanitize_text_field",
    "strip_all_tags",
    "strip_unsafe_markup",
]
