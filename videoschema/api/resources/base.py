"""Shared base resource for the administrative Falcon adapters."""

from __future__ import annotations

import typing as typ

from videoschema.config import AssemblySettings

if typ.TYPE_CHECKING:
    from videoschema.api.types import UowFactory


class _ResourceBase:
    """Store the unit-of-work factory and site-wide settings.

    Parameters
    ----------
    uow_factory : UowFactory
        Factory used to create request-scoped units of work.
    settings : AssemblySettings | None, optional
        Site-wide assembly settings; defaults to ``AssemblySettings()``.
    """

    def __init__(
        self,
        uow_factory: UowFactory,
        *,
        settings: AssemblySettings | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._settings = settings or AssemblySettings()
