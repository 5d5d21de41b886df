"""Domain types for VideoObject mapping and assembly.

The types here are deliberately small and immutable. Mapping rules and raw
field values are closed tagged variants so that resolution and
normalisation can ``match`` on them instead of re-inspecting the shape of
arbitrary provider data at every step.
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import enum
import typing as typ

if typ.TYPE_CHECKING:
    import datetime as dt

type JsonMapping = dict[str, object]
type ItemId = str
type OutputDocument = dict[str, object]
type CanonicalMediaValue = str | list[str] | JsonMapping

#: Reserved mapping value selecting the item's primary designated image.
FEATURED_IMAGE_TOKEN = "featured_image"

#: Properties a document needs before it may be published.
REQUIRED_DOCUMENT_FIELDS: tuple[str, ...] = ("name", "thumbnailUrl", "uploadDate")


class _Miss(enum.Enum):
    MISS = "miss"

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISS"


#: Definite "nothing found" marker, distinct from a stored ``None``.
MISS: typ.Final = _Miss.MISS
type Missing = typ.Literal[_Miss.MISS]


class LogicalKey(enum.StrEnum):
    """Logical keys a mapping configuration can source values for."""

    TITLE = "title"
    DESCRIPTION = "description"
    UPLOAD_DATE = "upload_date"
    DURATION_ISO = "duration_iso"
    THUMBNAIL_URL = "thumbnail_url"
    MAIN_TITLE_IMAGE = "main_title_image"
    CONTENT_URL = "content_url"
    EMBED_URL = "embed_url"
    TRANSCRIPT_URL = "transcript_url"
    LANGUAGE = "language"
    CLIPS = "clips"
    SEEKTOACTION = "seektoaction"
    VISUAL_DESCRIPTION = "visual_description"
    HTML5_MP4 = "html5_mp4"
    HTML5_WEBM = "html5_webm"

    @property
    def is_image(self) -> bool:
        """Return whether image coercion applies to this key."""
        return self in IMAGE_KEYS


IMAGE_KEYS: frozenset[LogicalKey] = frozenset({
    LogicalKey.THUMBNAIL_URL,
    LogicalKey.MAIN_TITLE_IMAGE,
})


class ImageCoercion(enum.StrEnum):
    """Shapes an image-bearing value can be coerced into."""

    URL = "url"
    ARRAY = "array"
    ID = "id"


class ResolutionSource(enum.StrEnum):
    """Where a resolved field value came from."""

    OVERRIDE = "override"
    CONFIG = "config"
    FILTER = "filter"
    CONVENTION = "convention"
    NONE = "none"


# -- Mapping rules ---------------------------------------------------------


@dc.dataclass(frozen=True, slots=True)
class PathRule:
    """Resolve a dot path against the item's field provider."""

    path: str
    coercion: ImageCoercion | None = None


@dc.dataclass(frozen=True, slots=True)
class FeaturedImageRule:
    """Defer to the item's primary designated image."""

    token: str = FEATURED_IMAGE_TOKEN


@dc.dataclass(frozen=True, slots=True)
class CallableRule:
    """Resolve a value by calling ``resolver(item_id)``.

    Only extension points can supply callable rules; persisted settings
    cannot hold them.
    """

    resolver: cabc.Callable[[ItemId], object]


type MappingRule = PathRule | FeaturedImageRule | CallableRule


@dc.dataclass(frozen=True, slots=True)
class MappingConfig:
    """Persisted mapping settings.

    Attributes
    ----------
    rules : Mapping[LogicalKey, MappingRule]
        Rule per logical key. Keys without a rule are simply absent.
    content_types : tuple[str, ...] | None
        Content types allowed to opt in without a minimum mapping.
        ``None`` means unconfigured.
    """

    rules: cabc.Mapping[LogicalKey, MappingRule] = dc.field(default_factory=dict)
    content_types: tuple[str, ...] | None = None

    def rule_for(self, key: LogicalKey) -> MappingRule | None:
        """Return the rule configured for ``key``, if any."""
        return self.rules.get(key)


@dc.dataclass(frozen=True, slots=True)
class FieldResolution:
    """A resolved value together with the source that produced it."""

    value: object
    source: ResolutionSource

    @property
    def found(self) -> bool:
        """Return True when some source produced a value."""
        return self.source is not ResolutionSource.NONE


# -- External provider views ----------------------------------------------


@dc.dataclass(frozen=True, slots=True)
class ContentItem:
    """The content provider's view of one item.

    Attributes
    ----------
    item_id : ItemId
        Opaque item identifier.
    title : str
        Item title used when no mapping supplies one.
    excerpt : str
        Item excerpt; markup is stripped before use.
    permalink : str
        Canonical public URL of the item.
    published_at : datetime.datetime | None
        Publish time used as the upload-date fallback.
    content_type : str
        Content-type identifier checked against the allowlist.
    featured_image_id : int | None
        Attachment identifier of the primary designated image.
    """

    item_id: ItemId
    title: str = ""
    excerpt: str = ""
    permalink: str = ""
    published_at: dt.datetime | None = None
    content_type: str = "post"
    featured_image_id: int | None = None


@dc.dataclass(frozen=True, slots=True)
class AttachmentInfo:
    """Attachment metadata returned by the attachment provider."""

    url: str
    mime_type: str | None = None
    byte_size: int | None = None
    width: int | None = None
    height: int | None = None


# -- Raw field values ------------------------------------------------------


@dc.dataclass(frozen=True, slots=True)
class ScalarValue:
    """A string, boolean or non-identifier number."""

    value: str | bool | float


@dc.dataclass(frozen=True, slots=True)
class ImageRef:
    """A bare numeric attachment identifier."""

    attachment_id: int


@dc.dataclass(frozen=True, slots=True)
class ImageFields:
    """A structured image object such as ``{"url": ..., "sizes": ...}``."""

    fields: cabc.Mapping[str, object]


@dc.dataclass(frozen=True, slots=True)
class ImageList:
    """A list of image objects or URL strings."""

    items: tuple[object, ...]


@dc.dataclass(frozen=True, slots=True)
class RowList:
    """A list of structured rows, as produced by repeating groups."""

    rows: tuple[cabc.Mapping[str, object], ...]


type RawFieldValue = ScalarValue | ImageRef | ImageFields | ImageList | RowList


def as_attachment_id(value: object) -> int | None:
    """Return ``value`` as an attachment identifier when it is numeric.

    Integers, integral floats and strings of digits qualify. Booleans do
    not.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().isdecimal():
        return int(value.strip())
    return None


def is_empty(value: object) -> bool:
    """Return True for ``MISS``, ``None``, empty strings and empty containers."""
    if value is MISS or value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (cabc.Mapping, list, tuple)):
        return len(value) == 0
    return False


def classify_raw_value(value: object) -> RawFieldValue | None:
    """Classify provider data into the closed ``RawFieldValue`` variant.

    Returns ``None`` for empty values and for types the pipeline does not
    understand.
    """
    if is_empty(value) or value is False:
        return None
    attachment_id = as_attachment_id(value)
    if attachment_id is not None:
        return ImageRef(attachment_id)
    if isinstance(value, (str, bool, float)):
        return ScalarValue(value)
    if isinstance(value, cabc.Mapping):
        return ImageFields(typ.cast("cabc.Mapping[str, object]", value))
    if isinstance(value, (list, tuple)):
        items = tuple(value)
        if all(isinstance(item, cabc.Mapping) for item in items) and not any(
            "url" in item or "sizes" in item
            for item in typ.cast("tuple[cabc.Mapping[str, object], ...]", items)
        ):
            return RowList(typ.cast("tuple[cabc.Mapping[str, object], ...]", items))
        return ImageList(items)
    return None


@dc.dataclass(frozen=True, slots=True)
class ClipRecord:
    """One chapter marker of a video.

    Attributes
    ----------
    name : str
        Chapter label.
    start_offset : int
        Start position in seconds, never negative.
    end_offset : int | None
        End position in seconds, if known.
    url : str
        Deep link into the video at ``start_offset``.
    """

    name: str
    start_offset: int
    end_offset: int | None
    url: str

    def to_json_ld(self) -> JsonMapping:
        """Return the schema.org ``Clip`` representation."""
        return {
            "@type": "Clip",
            "name": self.name,
            "startOffset": self.start_offset,
            "endOffset": self.end_offset,
            "url": self.url,
        }


@dc.dataclass(frozen=True, slots=True)
class ItemPreview:
    """Administrative preview of one item's structured data.

    Attributes
    ----------
    document : OutputDocument | None
        The assembled document, or ``None`` when the item is not eligible
        for assembly at all.
    eligible : bool
        Whether the document may be published.
    missing_fields : tuple[str, ...]
        Required document properties that are missing.
    fields : JsonMapping
        Raw resolved value and source per logical key.
    """

    document: OutputDocument | None
    eligible: bool
    missing_fields: tuple[str, ...]
    fields: JsonMapping


__all__ = [
    "FEATURED_IMAGE_TOKEN",
    "IMAGE_KEYS",
    "MISS",
    "REQUIRED_DOCUMENT_FIELDS",
    "AttachmentInfo",
    "CallableRule",
    "CanonicalMediaValue",
    "ClipRecord",
    "ContentItem",
    "FeaturedImageRule",
    "FieldResolution",
    "ImageCoercion",
    "ImageFields",
    "ImageList",
    "ImageRef",
    "ItemId",
    "ItemPreview",
    "JsonMapping",
    "LogicalKey",
    "MappingConfig",
    "MappingRule",
    "Missing",
    "OutputDocument",
    "PathRule",
    "RawFieldValue",
    "ResolutionSource",
    "RowList",
    "ScalarValue",
    "as_attachment_id",
    "classify_raw_value",
    "is_empty",
]
