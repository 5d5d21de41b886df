"""Unit tests for request helpers in ``videoschema.api.helpers``."""

from __future__ import annotations

import falcon
import pytest

from videoschema.api import helpers
from videoschema.structured.settings import InvalidSettingsError


class TestItemIds:
    """Tests for ``parse_item_id``."""

    @staticmethod
    def test_item_id_is_trimmed() -> None:
        """Surrounding whitespace is removed."""
        assert helpers.parse_item_id(" 42 ") == "42", "Expected a trimmed id."

    @staticmethod
    @pytest.mark.parametrize(
        "raw", ["", "   ", "x" * (helpers.MAX_ITEM_ID_LENGTH + 1)]
    )
    def test_invalid_item_ids_are_rejected(raw: str) -> None:
        """Blank and over-long identifiers raise HTTP 400."""
        with pytest.raises(falcon.HTTPBadRequest):
            helpers.parse_item_id(raw)


class TestPayloads:
    """Tests for payload validation helpers."""

    @staticmethod
    def test_require_payload_dict_accepts_objects() -> None:
        """JSON objects pass through unchanged."""
        payload = {"title": "headline"}

        assert helpers.require_payload_dict(payload) is payload, (
            "Expected the payload itself."
        )

    @staticmethod
    @pytest.mark.parametrize("payload", [None, [], "title"])
    def test_require_payload_dict_rejects_other_media(payload: object) -> None:
        """Anything but a JSON object raises HTTP 400."""
        with pytest.raises(falcon.HTTPBadRequest):
            helpers.require_payload_dict(payload)

    @staticmethod
    def test_require_field_reports_missing_name() -> None:
        """Missing fields raise HTTP 400 naming the field."""
        with pytest.raises(falcon.HTTPBadRequest) as excinfo:
            helpers.require_field({}, "content_types")

        assert excinfo.value.description == (
            "Missing required field: content_types"
        ), "Expected the missing field in the description."


def test_invalid_settings_become_bad_requests() -> None:
    """``InvalidSettingsError`` maps onto HTTP 400 with its code as title."""
    with (
        pytest.raises(falcon.HTTPBadRequest) as excinfo,
        helpers.invalid_settings_as_bad_request(),
    ):
        msg = "Content types must be a JSON array."
        raise InvalidSettingsError(msg)

    assert excinfo.value.title == "invalid_settings", "Expected the error code."
    assert excinfo.value.description == "Content types must be a JSON array.", (
        "Expected the error message as description."
    )


def test_other_errors_propagate() -> None:
    """Errors other than ``InvalidSettingsError`` are not translated."""
    with (
        pytest.raises(KeyError),
        helpers.invalid_settings_as_bad_request(),
    ):
        msg = "title"
        raise KeyError(msg)
