"""Logging helpers built on femtologging.

The structured-data pipeline degrades instead of raising, so most of what
goes wrong during assembly is only visible through these log records. The
helpers keep level handling and percent-style formatting consistent.

Examples
--------
Configure logging from the environment and emit a message:

>>> level, used_default = configure_logging_from_environment()
>>> log_debug(get_logger(__name__), "Resolved %s for item %s", "title", "42")
"""

from __future__ import annotations

import enum
import os
import typing as typ

from femtologging import basicConfig, get_logger

LOG_LEVEL_ENV = "VIDEOSCHEMA_LOG_LEVEL"


class LogLevel(enum.StrEnum):
    """Log levels accepted by ``configure_logging``."""

    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


#: Aliases accepted from configuration and mapped onto canonical levels.
_LEVEL_ALIASES: dict[str, LogLevel] = {
    "WARN": LogLevel.WARNING,
    "FATAL": LogLevel.CRITICAL,
}


def _parse_level(level: str | None) -> LogLevel | None:
    """Return the canonical level for ``level`` or ``None`` if unknown."""
    if not level:
        return None
    requested = level.strip().upper()
    if requested in _LEVEL_ALIASES:
        return _LEVEL_ALIASES[requested]
    if requested in LogLevel.__members__:
        return LogLevel(requested)
    return None


def configure_logging(level: str | None, *, force: bool = False) -> tuple[str, bool]:
    """Configure femtologging and return the effective level.

    Parameters
    ----------
    level : str | None
        Requested level name. Aliases such as ``WARN`` are accepted.
    force : bool, optional
        Whether to replace handlers that are already configured.

    Returns
    -------
    tuple[str, bool]
        ``(effective_level, used_default)``; ``used_default`` is True when
        the requested level was missing or not recognised and ``INFO`` was
        applied instead.
    """
    parsed = _parse_level(level)
    effective = LogLevel.INFO if parsed is None else parsed
    basicConfig(level=effective, force=force)
    return (effective, parsed is None)


def configure_logging_from_environment(*, force: bool = False) -> tuple[str, bool]:
    """Configure logging from ``VIDEOSCHEMA_LOG_LEVEL``."""
    return configure_logging(os.getenv(LOG_LEVEL_ENV), force=force)


class _SupportsLog(typ.Protocol):
    """Structural type for femtologging loggers."""

    def log(
        self,
        level: str,
        message: str,
        /,
        *,
        exc_info: object | None = None,
        stack_info: bool = False,
    ) -> None: ...


def _emit(
    logger: _SupportsLog,
    level: LogLevel,
    template: str,
    args: tuple[object, ...],
    exc_info: object | None,
) -> None:
    message = template % args if args else template
    logger.log(level, message, exc_info=exc_info, stack_info=False)


def log_debug(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Format and emit a DEBUG record."""
    _emit(logger, LogLevel.DEBUG, template, args, exc_info)


def log_info(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Format and emit an INFO record.

    Parameters
    ----------
    logger : _SupportsLog
        Logger supporting the femtologging ``log`` API.
    template : str
        Percent-style template.
    *args : object
        Values interpolated into ``template``.
    exc_info : object | None, optional
        Exception information attached to the record.

    Raises
    ------
    TypeError
        If the template and arguments do not line up.
    """
    _emit(logger, LogLevel.INFO, template, args, exc_info)


def log_warning(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Format and emit a WARNING record."""
    _emit(logger, LogLevel.WARNING, template, args, exc_info)


def log_error(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Format and emit an ERROR record."""
    _emit(logger, LogLevel.ERROR, template, args, exc_info)


__all__ = (
    "LOG_LEVEL_ENV",
    "LogLevel",
    "configure_logging",
    "configure_logging_from_environment",
    "get_logger",
    "log_debug",
    "log_error",
    "log_info",
    "log_warning",
)
