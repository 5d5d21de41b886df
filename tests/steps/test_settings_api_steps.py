"""Behavioural tests for the administrative settings API."""

from __future__ import annotations

import typing as typ

import pytest
from pytest_bdd import given, scenario, then, when

from _assembly_helpers import DEMO_ITEM_ID

if typ.TYPE_CHECKING:
    from falcon import testing


class SettingsApiContext(typ.TypedDict, total=False):
    """Shared state for settings API BDD steps."""

    preview: dict[str, typ.Any]


def _assert_ok(response: testing.Result, action: str) -> dict[str, typ.Any]:
    """Assert a 200 response and return its JSON payload."""
    assert response.status_code == 200, f"Expected {action} to return 200."
    return typ.cast("dict[str, typ.Any]", response.json)


@scenario(
    "../features/settings_api.feature",
    "Editor maps a thumbnail and previews an item",
)
def test_settings_api_behaviour() -> None:
    """Run the settings API scenario."""


@pytest.fixture
def context() -> SettingsApiContext:
    """Share state between settings API steps."""
    return typ.cast("SettingsApiContext", {})


@given("the settings API is available")
def api_available(settings_api_client: testing.TestClient) -> None:
    """Check the mapping endpoint responds."""
    _assert_ok(settings_api_client.simulate_get("/settings/mappings"), "mapping read")


@when("the thumbnail is mapped to the hero field")
def map_thumbnail(settings_api_client: testing.TestClient) -> None:
    """Store a thumbnail mapping."""
    _assert_ok(
        settings_api_client.simulate_put(
            "/settings/mappings",
            json={"thumbnail_url": {"field": "hero", "image_type": "id"}},
        ),
        "mapping update",
    )


@when("the item title is overridden")
def override_title(settings_api_client: testing.TestClient) -> None:
    """Store a title override for the demo item."""
    _assert_ok(
        settings_api_client.simulate_put(
            f"/items/{DEMO_ITEM_ID}/overrides", json={"title": "Launch day"}
        ),
        "override update",
    )


@when("the item snapshot is previewed")
def preview_snapshot(
    settings_api_client: testing.TestClient,
    demo_snapshot_payload: dict[str, object],
    context: SettingsApiContext,
) -> None:
    """Preview the demo item snapshot."""
    context["preview"] = _assert_ok(
        settings_api_client.simulate_post(
            f"/items/{DEMO_ITEM_ID}/preview", json=demo_snapshot_payload
        ),
        "preview",
    )


@then("the preview is eligible")
def preview_is_eligible(context: SettingsApiContext) -> None:
    """Assert the preview has every required field."""
    preview = context["preview"]
    assert preview["eligible"] is True, "Expected an eligible preview."
    assert preview["missing_fields"] == [], "Expected no missing fields."


@then("the preview uses the overridden title")
def preview_uses_override(context: SettingsApiContext) -> None:
    """Assert the override won over the item title."""
    preview = context["preview"]
    assert preview["document"]["name"] == "Launch day", "Expected the override."
    assert preview["fields"]["title"]["source"] == "override", (
        "Expected the override to be reported as the title source."
    )
