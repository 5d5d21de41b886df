"""Reference adapters for the structured-data ports."""

from __future__ import annotations

from .memory import (
    InMemoryAttachmentProvider,
    InMemoryContentProvider,
    InMemoryFieldProvider,
    InMemoryOverrideStore,
    ItemSnapshot,
    StaticConfigStore,
)

__all__ = [
    "InMemoryAttachmentProvider",
    "InMemoryContentProvider",
    "InMemoryFieldProvider",
    "InMemoryOverrideStore",
    "ItemSnapshot",
    "StaticConfigStore",
]
