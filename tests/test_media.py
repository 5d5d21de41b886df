"""Unit tests for thumbnail and media-file normalisation."""

from __future__ import annotations

import pytest

from videoschema.structured.adapters import (
    InMemoryAttachmentProvider,
    InMemoryContentProvider,
)
from videoschema.structured.domain import AttachmentInfo, ContentItem
from videoschema.structured.media import MediaNormalizer

IMAGE_URL = "https://example.com/a.jpg"
OTHER_URL = "https://example.com/b.jpg"
JPEG = AttachmentInfo(
    url="https://example.com/hero.jpg", mime_type="image/jpeg", width=800, height=450
)


@pytest.fixture
def normalizer() -> MediaNormalizer:
    """Return a normaliser over a small attachment store."""
    attachments = InMemoryAttachmentProvider({
        7: JPEG,
        8: AttachmentInfo(url="https://example.com/bare.jpg"),
        9: AttachmentInfo(
            url="https://example.com/video.mp4",
            mime_type="video/mp4",
            byte_size=1048576,
        ),
        10: AttachmentInfo(url=""),
    })
    content = InMemoryContentProvider({
        "42": ContentItem(item_id="42", featured_image_id=7),
        "43": ContentItem(item_id="43"),
    })
    return MediaNormalizer(attachments, content)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (None, None),
        ("", None),
        (False, None),
        ({"url": IMAGE_URL}, IMAGE_URL),
        ({"sizes": {"thumb": OTHER_URL, "full": IMAGE_URL}}, IMAGE_URL),
        ({"sizes": {"thumb": OTHER_URL}}, OTHER_URL),
        ([{"url": IMAGE_URL}, IMAGE_URL, OTHER_URL], [IMAGE_URL, OTHER_URL]),
        ([{"url": IMAGE_URL}], IMAGE_URL),
        (["not a url"], None),
        (f"{IMAGE_URL}, not-a-url, {OTHER_URL}", [IMAGE_URL, OTHER_URL]),
        (f"{IMAGE_URL}, {IMAGE_URL}", IMAGE_URL),
        (IMAGE_URL, IMAGE_URL),
        ("example.com/a.jpg", None),
    ],
)
def test_normalize_thumbnail_shapes(
    normalizer: MediaNormalizer, raw: object, expected: object
) -> None:
    """Each raw shape normalises to a URL, URL list or nothing."""
    assert normalizer.normalize_thumbnail(raw) == expected, (
        f"Expected {raw!r} to normalise to {expected!r}."
    )


def test_numeric_thumbnail_with_metadata_becomes_image_object(
    normalizer: MediaNormalizer,
) -> None:
    """Attachment ids with dimensions or MIME type become ImageObjects."""
    expected = {
        "@type": "ImageObject",
        "url": "https://example.com/hero.jpg",
        "width": 800,
        "height": 450,
        "encodingFormat": "image/jpeg",
    }

    assert normalizer.normalize_thumbnail(7) == expected, "Expected an ImageObject."
    assert normalizer.normalize_thumbnail("7") == expected, (
        "Expected digit strings to be treated as identifiers."
    )


def test_numeric_thumbnail_without_metadata_is_a_url(
    normalizer: MediaNormalizer,
) -> None:
    """Attachment ids without metadata resolve to the bare URL."""
    assert normalizer.normalize_thumbnail(8) == "https://example.com/bare.jpg", (
        "Expected the bare attachment URL."
    )


@pytest.mark.parametrize("attachment_id", [10, 99])
def test_unresolvable_attachment_is_none(
    normalizer: MediaNormalizer, attachment_id: int
) -> None:
    """Attachments without a URL or unknown ids resolve to nothing."""
    assert normalizer.normalize_thumbnail(attachment_id) is None, (
        f"Expected attachment {attachment_id} not to resolve."
    )


def test_single_url_normalisation_is_idempotent(normalizer: MediaNormalizer) -> None:
    """Normalising a canonical URL again leaves it unchanged."""
    once = normalizer.normalize_thumbnail(f"{IMAGE_URL}, {IMAGE_URL}")

    assert normalizer.normalize_thumbnail(once) == once, "Expected idempotence."


def test_resolve_sentinel(normalizer: MediaNormalizer) -> None:
    """The featured_image token becomes the item's primary image id."""
    assert normalizer.resolve_sentinel("featured_image", "42") == 7, (
        "Expected the featured image id."
    )
    assert normalizer.resolve_sentinel("featured_image", "43") == "", (
        "Expected an empty value without a featured image."
    )
    assert normalizer.resolve_sentinel(IMAGE_URL, "42") == IMAGE_URL, (
        "Expected other values to pass through."
    )


def test_file_to_media_object(normalizer: MediaNormalizer) -> None:
    """File ids become MediaObjects carrying only supplied metadata."""
    assert normalizer.file_to_media_object(9) == {
        "@type": "MediaObject",
        "contentUrl": "https://example.com/video.mp4",
        "encodingFormat": "video/mp4",
        "contentSize": "1048576",
    }, "Expected a MediaObject with a string contentSize."


@pytest.mark.parametrize("file_id", [None, "", "abc", 0, 99])
def test_file_to_media_object_misses(
    normalizer: MediaNormalizer, file_id: object
) -> None:
    """Non-numeric or unresolvable file ids produce no MediaObject."""
    assert normalizer.file_to_media_object(file_id) is None, (
        f"Expected {file_id!r} not to produce a MediaObject."
    )


def test_attachment_to_image_object(normalizer: MediaNormalizer) -> None:
    """Attachment ids resolve to ImageObjects."""
    image = normalizer.attachment_to_image_object(8)

    assert image == {"@type": "ImageObject", "url": "https://example.com/bare.jpg"}, (
        "Expected an ImageObject with only a URL."
    )


def test_failing_attachment_provider_is_contained() -> None:
    """Provider exceptions mean the attachment does not resolve."""

    class BrokenAttachments:
        def get_attachment(self, attachment_id: int) -> AttachmentInfo | None:
            msg = f"attachment store down for {attachment_id}"
            raise ConnectionError(msg)

    assert MediaNormalizer(BrokenAttachments()).normalize_thumbnail(7) is None, (
        "Expected a provider failure to yield no thumbnail."
    )


@pytest.mark.parametrize("raw", ["²", " ³ ", "①"])
def test_non_ascii_digit_thumbnail_is_not_an_attachment(
    normalizer: MediaNormalizer, raw: str
) -> None:
    """Superscripts and circled digits are plain strings, not attachment ids."""
    assert normalizer.normalize_thumbnail(raw) is None, (
        f"Expected {raw!r} to normalise to nothing without raising."
    )
    assert normalizer.attachment_to_image_object(raw) is None, (
        f"Expected {raw!r} not to resolve to an ImageObject."
    )


@pytest.mark.parametrize("attachment_id", [7, "7", 7.0])
def test_numeric_thumbnail_matches_attachment_image_object(
    normalizer: MediaNormalizer, attachment_id: object
) -> None:
    """Numeric thumbnails promote to the same ImageObject as the attachment."""
    assert normalizer.normalize_thumbnail(
        attachment_id
    ) == normalizer.attachment_to_image_object(attachment_id), (
        f"Expected {attachment_id!r} to promote to the attachment ImageObject."
    )


def test_bare_attachment_thumbnail_collapses_to_url(
    normalizer: MediaNormalizer,
) -> None:
    """An attachment ImageObject holding only a URL collapses to that URL."""
    image = normalizer.attachment_to_image_object(8)

    assert image is not None, "Expected attachment 8 to resolve."
    assert normalizer.normalize_thumbnail(8) == image["url"], (
        "Expected the bare ImageObject URL as the thumbnail."
    )
