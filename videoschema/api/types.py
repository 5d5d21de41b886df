"""Shared types for the Falcon administrative API adapter.

This module defines ``UowFactory`` for request-scoped settings units of
work and ``JsonPayload`` for JSON request and response objects.

Example
-------
Define a unit-of-work factory:

>>> factory: UowFactory = (  # doctest: +SKIP
...     lambda: SqlAlchemySettingsUnitOfWork(session_factory)
... )
"""

from __future__ import annotations

import collections.abc as cabc
import typing as typ

if typ.TYPE_CHECKING:
    from videoschema.structured.ports import SettingsUnitOfWork

type UowFactory = cabc.Callable[[], SettingsUnitOfWork]
type JsonPayload = dict[str, object]

__all__ = ["JsonPayload", "UowFactory"]
