"""Failure boundary for extension points and external provider calls.

Integrations plug callables into the pipeline (filter mappings, callable
rules, the final augmentation hook) and the pipeline calls out to
providers it does not own. ``guarded_call`` runs such a callable and
turns any exception into a ``Failure`` value, so a misbehaving
integration costs one field rather than the whole document.

Examples
--------
>>> result = guarded_call(int, "12", label="parse")
>>> result.value_or(0)
12
>>> guarded_call(int, "twelve", label="parse").value_or(0)
0
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from videoschema.logging import get_logger, log_warning

if typ.TYPE_CHECKING:
    import collections.abc as cabc

logger = get_logger(__name__)


@dc.dataclass(frozen=True, slots=True)
class Ok[T]:
    """Successful call result."""

    value: T

    def value_or[D](self, default: D) -> T | D:  # noqa: ARG002
        """Return the wrapped value."""
        return self.value


@dc.dataclass(frozen=True, slots=True)
class Failure:
    """Failed call result carrying the swallowed exception."""

    label: str
    error: Exception

    def value_or[D](self, default: D) -> D:
        """Return ``default``."""
        return default


type Result[T] = Ok[T] | Failure


def guarded_call[T](
    fn: cabc.Callable[..., T],
    *args: object,
    label: str,
) -> Result[T]:
    """Call ``fn(*args)`` and capture any exception as a ``Failure``.

    Parameters
    ----------
    fn : collections.abc.Callable[..., T]
        Callable to invoke.
    *args : object
        Positional arguments for ``fn``.
    label : str
        Short description used in the warning logged on failure.

    Returns
    -------
    Result[T]
        ``Ok`` with the return value, or ``Failure`` with the exception.
    """
    try:
        return Ok(fn(*args))
    except Exception as exc:  # noqa: BLE001
        log_warning(logger, "%s failed: %s", label, exc, exc_info=exc)
        return Failure(label=label, error=exc)


__all__ = ["Failure", "Ok", "Result", "guarded_call"]
