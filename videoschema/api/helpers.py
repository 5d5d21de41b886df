"""Request parsing helpers for Falcon resource adapters.

Examples
--------
Validate a request body before service dispatch:

>>> payload = require_payload_dict(await req.get_media())
>>> item_id = parse_item_id(raw_item_id)
"""

from __future__ import annotations

import contextlib
import typing as typ

import falcon

from videoschema.structured.settings import InvalidSettingsError

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .types import JsonPayload

#: Longest item identifier the override table accepts.
MAX_ITEM_ID_LENGTH = 191


def parse_item_id(raw_value: str) -> str:
    """Validate an item identifier taken from the request path.

    Raises
    ------
    falcon.HTTPBadRequest
        Raised when the identifier is blank or too long.
    """
    item_id = raw_value.strip()
    if not item_id or len(item_id) > MAX_ITEM_ID_LENGTH:
        msg = f"Invalid item identifier: {raw_value!r}."
        raise falcon.HTTPBadRequest(description=msg)
    return item_id


def require_payload_dict(payload: object) -> JsonPayload:
    """Validate that request media is a JSON object mapping.

    Parameters
    ----------
    payload : object
        Parsed Falcon request media.

    Returns
    -------
    JsonPayload
        Validated JSON object payload.

    Raises
    ------
    falcon.HTTPBadRequest
        Raised when request media is not a JSON object.
    """
    if not isinstance(payload, dict):
        msg = "JSON object payload is required."
        raise falcon.HTTPBadRequest(description=msg)
    return typ.cast("JsonPayload", payload)


def require_field(payload: JsonPayload, field_name: str) -> object:
    """Return a required payload field or raise HTTP 400."""
    if field_name not in payload:
        msg = f"Missing required field: {field_name}"
        raise falcon.HTTPBadRequest(description=msg)
    return payload[field_name]


@contextlib.contextmanager
def invalid_settings_as_bad_request() -> cabc.Iterator[None]:
    """Translate ``InvalidSettingsError`` into HTTP 400.

    Raises
    ------
    falcon.HTTPBadRequest
        Raised when the wrapped block rejects a payload.
    """
    try:
        yield
    except InvalidSettingsError as exc:
        raise falcon.HTTPBadRequest(
            title=exc.code,
            description=str(exc),
        ) from exc


__all__ = [
    "MAX_ITEM_ID_LENGTH",
    "invalid_settings_as_bad_request",
    "parse_item_id",
    "require_field",
    "require_payload_dict",
]
