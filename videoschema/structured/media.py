"""Normalise image and file values into canonical JSON-LD media shapes.

Thumbnails end up as a URL string, a de-duplicated list of URLs, or an
``ImageObject`` mapping. Uploaded video files become ``MediaObject``
mappings. Attachment metadata is only ever copied from the attachment
provider; nothing is synthesised.
"""

from __future__ import annotations

import collections.abc as cabc
import typing as typ

from videoschema.logging import get_logger, log_debug

from .domain import (
    FEATURED_IMAGE_TOKEN,
    ImageFields,
    ImageList,
    ImageRef,
    RowList,
    ScalarValue,
    as_attachment_id,
    classify_raw_value,
    is_empty,
)
from .extensions import guarded_call
from .mapper import image_url_from_fields
from .text import is_valid_url

if typ.TYPE_CHECKING:
    from .domain import AttachmentInfo, CanonicalMediaValue, ItemId, JsonMapping
    from .ports import AttachmentProvider, ContentProvider

logger = get_logger(__name__)

_BARE_IMAGE_KEYS = frozenset({"@type", "url"})


def _collapse_urls(urls: cabc.Iterable[str]) -> CanonicalMediaValue | None:
    unique = list(dict.fromkeys(urls))
    if not unique:
        return None
    if len(unique) == 1:
        return unique[0]
    return unique


def _urls_from_items(items: cabc.Iterable[object]) -> list[str]:
    urls: list[str] = []
    for item in items:
        if isinstance(item, cabc.Mapping):
            url = typ.cast("cabc.Mapping[str, object]", item).get("url")
            if is_valid_url(url):
                urls.append(typ.cast("str", url))
        elif is_valid_url(item):
            urls.append(typ.cast("str", item))
    return urls


def _normalize_string(value: str) -> CanonicalMediaValue | None:
    text = value.strip()
    if "," in text:
        parts = (part.strip() for part in text.split(","))
        return _collapse_urls(part for part in parts if is_valid_url(part))
    return text if is_valid_url(text) else None


def _image_fields_to_url(
    fields: cabc.Mapping[str, object],
) -> CanonicalMediaValue | None:
    url = fields.get("url")
    if is_valid_url(url):
        return typ.cast("str", url)
    sizes = fields.get("sizes")
    if isinstance(sizes, cabc.Mapping) and sizes:
        found = image_url_from_fields({"sizes": sizes})
        return typ.cast("str", found) if isinstance(found, str) else None
    # A mapping of image items keyed by position.
    return _collapse_urls(_urls_from_items(fields.values()))


class MediaNormalizer:
    """Turn raw image and file values into canonical media values.

    Parameters
    ----------
    attachments : AttachmentProvider | None
        Attachment metadata lookup. Without one, numeric identifiers
        cannot be resolved.
    content : ContentProvider | None, optional
        Content lookup used to resolve the ``featured_image`` token.
    """

    def __init__(
        self,
        attachments: AttachmentProvider | None,
        content: ContentProvider | None = None,
    ) -> None:
        self._attachments = attachments
        self._content = content

    def _attachment(self, attachment_id: int) -> AttachmentInfo | None:
        if self._attachments is None:
            return None
        info = guarded_call(
            self._attachments.get_attachment,
            attachment_id,
            label=f"attachment lookup {attachment_id}",
        ).value_or(None)
        if info is None or not info.url:
            log_debug(logger, "Attachment %s did not resolve to a URL.", attachment_id)
            return None
        return info

    def resolve_sentinel(self, raw: object, item_id: ItemId) -> object:
        """Replace the ``featured_image`` token with the item's image id.

        Any other value is returned unchanged. When the item has no primary
        image the token resolves to ``""``.
        """
        if raw != FEATURED_IMAGE_TOKEN:
            return raw
        if self._content is None:
            return ""
        item = guarded_call(
            self._content.get_item, item_id, label=f"content lookup {item_id}"
        ).value_or(None)
        if item is None or item.featured_image_id is None:
            return ""
        return item.featured_image_id

    def normalize_thumbnail(self, raw: object) -> CanonicalMediaValue | None:
        """Normalise a thumbnail value.

        Parameters
        ----------
        raw : object
            Attachment id, structured image object, list of images or
            URLs, comma-separated URL string, or a single URL.

        Returns
        -------
        CanonicalMediaValue | None
            A URL, a list of unique URLs, an ``ImageObject`` for attachment
            ids that carry dimensions or a MIME type, or ``None``.

        Examples
        --------
        >>> normalizer = MediaNormalizer(None)
        >>> normalizer.normalize_thumbnail("https://e.com/a.jpg, https://e.com/a.jpg")
        'https://e.com/a.jpg'
        """
        match classify_raw_value(raw):
            case None:
                return None
            case ImageFields(fields=fields):
                return _image_fields_to_url(fields)
            case ImageList(items=items):
                return _collapse_urls(_urls_from_items(items))
            case RowList(rows=rows):
                return _collapse_urls(_urls_from_items(rows))
            case ImageRef(attachment_id=attachment_id):
                image = self.attachment_to_image_object(attachment_id)
                if image is None or image.keys() - _BARE_IMAGE_KEYS:
                    return image
                # Without dimensions or a MIME type the bare URL is enough.
                return typ.cast("str", image["url"])
            case ScalarValue(value=str() as text):
                return _normalize_string(text)
        return None

    def attachment_to_image_object(self, attachment_id: object) -> JsonMapping | None:
        """Return an ``ImageObject`` for a numeric attachment id, if it resolves."""
        numeric = as_attachment_id(attachment_id)
        if not numeric:
            return None
        info = self._attachment(numeric)
        return None if info is None else self._image_object(info)

    def file_to_media_object(self, file_id: object) -> JsonMapping | None:
        """Return a ``MediaObject`` for a numeric file id, if it resolves.

        ``contentSize`` is the byte count as a decimal string. Width, height
        and ``encodingFormat`` appear only when the provider reports them.
        """
        if is_empty(file_id):
            return None
        numeric = as_attachment_id(file_id)
        if not numeric:
            return None
        info = self._attachment(numeric)
        if info is None:
            return None
        media: JsonMapping = {"@type": "MediaObject", "contentUrl": info.url}
        if info.mime_type:
            media["encodingFormat"] = info.mime_type
        if info.byte_size:
            media["contentSize"] = str(info.byte_size)
        if info.width:
            media["width"] = int(info.width)
        if info.height:
            media["height"] = int(info.height)
        return media

    @staticmethod
    def _image_object(info: AttachmentInfo) -> JsonMapping:
        image: JsonMapping = {"@type": "ImageObject", "url": info.url}
        if info.width:
            image["width"] = int(info.width)
        if info.height:
            image["height"] = int(info.height)
        if info.mime_type:
            image["encodingFormat"] = info.mime_type
        return image


__all__ = ["MediaNormalizer"]
