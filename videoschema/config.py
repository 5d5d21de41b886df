"""Environment-driven configuration for document assembly and storage."""

from __future__ import annotations

import dataclasses as dc
import os

SITE_NAME_ENV = "VIDEOSCHEMA_SITE_NAME"
SITE_LOGO_URL_ENV = "VIDEOSCHEMA_SITE_LOGO_URL"
DEFAULT_LANGUAGE_ENV = "VIDEOSCHEMA_DEFAULT_LANGUAGE"
DEFAULT_CONTENT_TYPES_ENV = "VIDEOSCHEMA_DEFAULT_CONTENT_TYPES"
DATABASE_URL_ENV = "DATABASE_URL"

_DEFAULT_LANGUAGE = "en"

#: Content-type allowlist used when none is configured.
DEFAULT_CONTENT_TYPES: tuple[str, ...] = ("post", "page")


def _parse_text(value: str | None, default: str) -> str:
    if value is None:
        return default
    text = value.strip()
    return text or default


def _parse_content_types(value: str | None) -> tuple[str, ...]:
    """Parse a comma-separated content-type list.

    Blank or empty input falls back to ``DEFAULT_CONTENT_TYPES``.
    """
    if value is None:
        return DEFAULT_CONTENT_TYPES
    parts = (part.strip().lower() for part in value.split(","))
    parsed = tuple(dict.fromkeys(part for part in parts if part))
    return parsed or DEFAULT_CONTENT_TYPES


@dc.dataclass(frozen=True, slots=True)
class AssemblySettings:
    """Site-wide values the assembler needs beyond per-item data.

    Attributes
    ----------
    site_name : str
        Publisher organisation name.
    site_logo_url : str
        Publisher logo URL; an empty value removes the logo URL.
    default_language : str
        ``inLanguage`` used when no language is mapped.
    default_content_types : tuple[str, ...]
        Allowlist used when mapping settings store none.
    """

    site_name: str = ""
    site_logo_url: str = ""
    default_language: str = _DEFAULT_LANGUAGE
    default_content_types: tuple[str, ...] = DEFAULT_CONTENT_TYPES

    @classmethod
    def from_environment(cls) -> AssemblySettings:
        """Build settings from ``VIDEOSCHEMA_*`` environment variables."""
        return cls(
            site_name=_parse_text(os.getenv(SITE_NAME_ENV), ""),
            site_logo_url=_parse_text(os.getenv(SITE_LOGO_URL_ENV), ""),
            default_language=_parse_text(
                os.getenv(DEFAULT_LANGUAGE_ENV), _DEFAULT_LANGUAGE
            ),
            default_content_types=_parse_content_types(
                os.getenv(DEFAULT_CONTENT_TYPES_ENV)
            ),
        )


def database_url_from_environment() -> str | None:
    """Return ``DATABASE_URL`` or ``None`` when it is unset or blank."""
    value = os.getenv(DATABASE_URL_ENV)
    if value is None or not value.strip():
        return None
    return value.strip()


__all__ = [
    "DATABASE_URL_ENV",
    "DEFAULT_CONTENT_TYPES",
    "DEFAULT_CONTENT_TYPES_ENV",
    "DEFAULT_LANGUAGE_ENV",
    "SITE_LOGO_URL_ENV",
    "SITE_NAME_ENV",
    "AssemblySettings",
    "database_url_from_environment",
]
