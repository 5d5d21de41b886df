"""Unit-of-work implementation for settings persistence.

Examples
--------
Commit work in a single unit-of-work:

>>> async with SqlAlchemySettingsUnitOfWork(session_factory) as uow:
...     await uow.content_types.replace_all(("post", "video"))
...     await uow.commit()
"""

from __future__ import annotations

import typing as typ

from videoschema.logging import get_logger, log_info
from videoschema.structured.ports import SettingsUnitOfWork

from .repositories import (
    SqlAlchemyContentTypeRepository,
    SqlAlchemyFieldMappingRepository,
    SqlAlchemyItemOverrideRepository,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from types import TracebackType

    from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


class SqlAlchemySettingsUnitOfWork(SettingsUnitOfWork):
    """Async unit-of-work backed by SQLAlchemy sessions.

    Parameters
    ----------
    session_factory : collections.abc.Callable[[], AsyncSession]
        Factory that produces new async sessions for the unit-of-work scope.

    Attributes
    ----------
    field_mappings : SqlAlchemyFieldMappingRepository
        Repository for mapping rules.
    content_types : SqlAlchemyContentTypeRepository
        Repository for the content-type allowlist.
    item_overrides : SqlAlchemyItemOverrideRepository
        Repository for per-item override sets.
    """

    def __init__(self, session_factory: cabc.Callable[[], AsyncSession]) -> None:
        self._session_factory = session_factory
        self._session: AsyncSession | None = None

    async def __aenter__(self) -> SqlAlchemySettingsUnitOfWork:
        """Open a unit-of-work session.

        Returns
        -------
        SqlAlchemySettingsUnitOfWork
            The active unit-of-work instance.
        """
        self._session = self._session_factory()
        self.field_mappings = SqlAlchemyFieldMappingRepository(self._session)
        self.content_types = SqlAlchemyContentTypeRepository(self._session)
        self.item_overrides = SqlAlchemyItemOverrideRepository(self._session)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        """Close the session, rolling back first if the block raised."""
        if self._session is None:
            return
        try:
            if exc is not None:
                await self._session.rollback()
        finally:
            await self._session.close()

    def _require_session(self) -> AsyncSession:
        """Return the active session or raise when missing."""
        if self._session is None:
            msg = "Session not initialized for unit of work."
            raise RuntimeError(msg)
        return self._session

    async def commit(self) -> None:
        """Commit the current unit-of-work transaction.

        Raises
        ------
        RuntimeError
            If no session has been initialized for the unit of work.
        """
        await self._require_session().commit()
        log_info(logger, "Committed settings unit of work.")

    async def flush(self) -> None:
        """Flush pending unit-of-work changes."""
        await self._require_session().flush()

    async def rollback(self) -> None:
        """Roll back the current unit-of-work session."""
        await self._require_session().rollback()
