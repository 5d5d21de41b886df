"""Behavioural tests for VideoObject document assembly."""

from __future__ import annotations

import typing as typ

import pytest
from pytest_bdd import given, scenario, then, when

from _assembly_helpers import DEMO_ITEM_ID, DEMO_PERMALINK, _make_assembler
from videoschema.structured.domain import (
    AttachmentInfo,
    LogicalKey,
    MappingConfig,
    PathRule,
)

if typ.TYPE_CHECKING:
    from videoschema.structured.assembler import PayloadAssembler
    from videoschema.structured.domain import OutputDocument


class AssemblyContext(typ.TypedDict, total=False):
    """Shared state for assembly BDD steps."""

    assembler: PayloadAssembler
    document: OutputDocument | None


_CHAPTERS = (
    '[{"name": "Intro", "startOffset": 0, "endOffset": 15},'
    ' {"name": "Main", "startOffset": 15}]'
)


@scenario(
    "../features/videoobject_assembly.feature",
    "Mapped fields produce an eligible document",
)
def test_mapped_fields_produce_document() -> None:
    """Run the mapped-fields scenario."""


@scenario(
    "../features/videoobject_assembly.feature",
    "Items that have not opted in produce no document",
)
def test_items_not_opted_in() -> None:
    """Run the not-opted-in scenario."""


@scenario(
    "../features/videoobject_assembly.feature",
    "Saved chapter markers become clips",
)
def test_chapter_markers_become_clips() -> None:
    """Run the chapter-marker scenario."""


@pytest.fixture
def context() -> AssemblyContext:
    """Share state between assembly steps."""
    return typ.cast("AssemblyContext", {})


@given("a content item with a mapped thumbnail attachment")
def item_with_mapped_thumbnail(context: AssemblyContext) -> None:
    """Map the thumbnail to a field holding an attachment id."""
    context["assembler"] = _make_assembler(
        fields={"hero": 7},
        config=MappingConfig(rules={LogicalKey.THUMBNAIL_URL: PathRule("hero")}),
        attachments={
            7: AttachmentInfo(
                url="https://example.com/hero.jpg",
                mime_type="image/jpeg",
                width=1280,
                height=720,
            )
        },
    )


@given("a content item without mappings or an enabled flag")
def item_not_opted_in(context: AssemblyContext) -> None:
    """Build an assembler with no mapping and no overrides."""
    context["assembler"] = _make_assembler()


@given("an enabled content item with saved chapter markers")
def item_with_chapters(context: AssemblyContext) -> None:
    """Enable the item through overrides and save clips JSON."""
    context["assembler"] = _make_assembler(
        with_field_provider=False,
        overrides={"enabled": "1", "clips_json": _CHAPTERS},
    )


@when("the VideoObject document is assembled")
def assemble_document(context: AssemblyContext) -> None:
    """Assemble the demo item."""
    context["document"] = context["assembler"].assemble(DEMO_ITEM_ID)


@then("the document has a name, thumbnail and upload date")
def document_is_eligible(context: AssemblyContext) -> None:
    """Assert the required properties are present."""
    document = context["document"]
    assert document is not None, "Expected a document."
    assert context["assembler"].is_eligible_for_display(document), (
        "Expected the document to be eligible for display."
    )


@then("the thumbnail is an ImageObject")
def thumbnail_is_image_object(context: AssemblyContext) -> None:
    """Assert the thumbnail was promoted from the attachment id."""
    document = context["document"]
    assert document is not None, "Expected a document."
    assert document["thumbnailUrl"] == {
        "@type": "ImageObject",
        "url": "https://example.com/hero.jpg",
        "width": 1280,
        "height": 720,
        "encodingFormat": "image/jpeg",
    }, "Expected an ImageObject thumbnail."


@then("no document is produced")
def no_document(context: AssemblyContext) -> None:
    """Assert assembly produced nothing."""
    assert context["document"] is None, "Expected no document."


@then("the document has one clip per chapter marker")
def one_clip_per_marker(context: AssemblyContext) -> None:
    """Assert two Clip parts were produced."""
    document = context["document"]
    assert document is not None, "Expected a document."
    parts = typ.cast("list[dict[str, object]]", document["hasPart"])
    assert [(part["name"], part["startOffset"]) for part in parts] == [
        ("Intro", 0),
        ("Main", 15),
    ], "Expected the Intro and Main clips."


@then("every clip links into the item permalink")
def clips_link_into_permalink(context: AssemblyContext) -> None:
    """Assert clip URLs carry their start offset."""
    document = context["document"]
    assert document is not None, "Expected a document."
    parts = typ.cast("list[dict[str, object]]", document["hasPart"])
    assert [part["url"] for part in parts] == [
        f"{DEMO_PERMALINK}?t=0",
        f"{DEMO_PERMALINK}?t=15",
    ], "Expected timestamped permalink URLs."
