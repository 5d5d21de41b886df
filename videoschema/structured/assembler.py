"""Assemble schema.org ``VideoObject`` documents for content items.

``PayloadAssembler`` ties the pipeline together: it resolves every logical
key through ``FieldMapper``, gates items that have not opted in, merges the
mapped values with item defaults, normalises media, clips and embeds,
prunes empty values and finally hands the document to an optional
augmentation hook.

Examples
--------
>>> assembler = PayloadAssembler(
...     content=content,
...     config_store=config_store,
...     overrides=overrides,
...     attachments=attachments,
...     field_provider=fields,
... )
>>> document = assembler.assemble("42")
>>> assembler.is_eligible_for_display(document)
True
"""

from __future__ import annotations

import collections.abc as cabc
import datetime as dt
import typing as typ

from videoschema.config import AssemblySettings
from videoschema.logging import get_logger, log_debug

from ._coercion import coerce_flag
from .clips import ClipsParser
from .domain import (
    REQUIRED_DOCUMENT_FIELDS,
    ItemPreview,
    LogicalKey,
    MappingConfig,
    ResolutionSource,
    is_empty,
)
from .extensions import guarded_call
from .mapper import FieldMapper
from .media import MediaNormalizer
from .oembed import to_embed_url
from .text import is_valid_url, strip_all_tags

if typ.TYPE_CHECKING:
    from .domain import (
        ClipRecord,
        ContentItem,
        FieldResolution,
        ItemId,
        JsonMapping,
        OutputDocument,
    )
    from .ports import (
        AttachmentProvider,
        ConfigStore,
        ContentProvider,
        FieldProvider,
        FilterMapping,
        OverrideStore,
        PayloadAugmenter,
    )

logger = get_logger(__name__)

SCHEMA_CONTEXT = "https://schema.org"
SEEK_TO_PARAMETER = "seek_to_second_number"
VISUAL_DESCRIPTION_PROPERTY = "visualDescription"

#: Override keys that are not logical keys.
ENABLED_OVERRIDE = "enabled"
CLIPS_JSON_OVERRIDE = "clips_json"

#: Keys whose mapped value alone makes an item eligible.
MINIMUM_MAPPING_KEYS: tuple[LogicalKey, ...] = (
    LogicalKey.TITLE,
    LogicalKey.THUMBNAIL_URL,
    LogicalKey.UPLOAD_DATE,
)

#: File-identifier media sources, in priority order.
MEDIA_SOURCE_KEYS: tuple[LogicalKey, ...] = (
    LogicalKey.HTML5_MP4,
    LogicalKey.HTML5_WEBM,
)

#: Top-level properties copied from a single resolved media source.
_PROMOTED_MEDIA_FIELDS: tuple[str, ...] = (
    "contentUrl",
    "encodingFormat",
    "contentSize",
)

_MAPPING_SOURCES = frozenset({
    ResolutionSource.CONFIG,
    ResolutionSource.FILTER,
    ResolutionSource.CONVENTION,
})


def _present(value: object) -> bool:
    return not is_empty(value) and value is not False and value != 0


def _or_default(value: object, default: object) -> object:
    return value if _present(value) else default


def format_upload_date(published_at: dt.datetime | None) -> str:
    """Render a publish time as UTC ISO-8601 with seconds precision.

    Naive datetimes are taken to be UTC already.

    Examples
    --------
    >>> format_upload_date(dt.datetime(2025, 1, 1, tzinfo=dt.UTC))
    '2025-01-01T00:00:00+00:00'
    """
    if published_at is None:
        return ""
    if published_at.tzinfo is None:
        published_at = published_at.replace(tzinfo=dt.UTC)
    return published_at.astimezone(dt.UTC).isoformat(timespec="seconds")


def _is_pruned(value: object) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (cabc.Mapping, list, tuple)):
        return len(value) == 0
    return False


def prune_document(value: object) -> object:
    """Recursively drop ``""``, ``None``, ``[]`` and ``{}`` values.

    Pruning runs bottom-up, so containers emptied by pruning their
    children are removed too. ``0`` and ``False`` are kept.

    Examples
    --------
    >>> prune_document({"a": "", "b": {"c": None}, "d": [None, 1]})
    {'d': [1]}
    """
    if isinstance(value, cabc.Mapping):
        pruned: dict[object, object] = {}
        for key, child in typ.cast("cabc.Mapping[object, object]", value).items():
            child = prune_document(child)
            if not _is_pruned(child):
                pruned[key] = child
        return pruned
    if isinstance(value, (list, tuple)):
        items = (prune_document(child) for child in value)
        return [child for child in items if not _is_pruned(child)]
    return value


def missing_required_fields(
    document: cabc.Mapping[str, object] | None,
) -> tuple[str, ...]:
    """Return the required properties ``document`` lacks."""
    if document is None:
        return REQUIRED_DOCUMENT_FIELDS
    return tuple(
        name for name in REQUIRED_DOCUMENT_FIELDS if is_empty(document.get(name))
    )


def is_eligible_for_display(document: cabc.Mapping[str, object] | None) -> bool:
    """Return True when ``document`` has a name, thumbnail and upload date."""
    return document is not None and not missing_required_fields(document)


class PayloadAssembler:
    """Build ``VideoObject`` documents from providers, settings and overrides.

    Parameters
    ----------
    content : ContentProvider
        Host content model.
    config_store : ConfigStore
        Persisted mapping settings, read once per assembly.
    overrides : OverrideStore
        Per-item override values.
    attachments : AttachmentProvider | None, optional
        Attachment metadata for images and uploaded files.
    field_provider : FieldProvider | None, optional
        Custom-field provider. Its presence is what lets mappings alone
        make an item eligible.
    filter_mapping : FilterMapping | None, optional
        Extension point supplying mapping rules per logical key.
    augmenter : PayloadAugmenter | None, optional
        Extension point receiving the pruned document last.
    settings : AssemblySettings | None, optional
        Site-wide values; defaults to ``AssemblySettings()``.
    """

    def __init__(  # noqa: PLR0913
        self,
        *,
        content: ContentProvider,
        config_store: ConfigStore,
        overrides: OverrideStore,
        attachments: AttachmentProvider | None = None,
        field_provider: FieldProvider | None = None,
        filter_mapping: FilterMapping | None = None,
        augmenter: PayloadAugmenter | None = None,
        settings: AssemblySettings | None = None,
    ) -> None:
        self._content = content
        self._config_store = config_store
        self._overrides = overrides
        self._field_provider = field_provider
        self._filter_mapping = filter_mapping
        self._augmenter = augmenter
        self._settings = settings or AssemblySettings()
        self._media = MediaNormalizer(attachments, content)

    is_eligible_for_display = staticmethod(is_eligible_for_display)
    missing_required_fields = staticmethod(missing_required_fields)
    prune_document = staticmethod(prune_document)

    def assemble(self, item_id: ItemId) -> OutputDocument | None:
        """Return the ``VideoObject`` document for ``item_id``.

        Returns ``None`` when the item does not exist or has not opted in.
        No exception escapes; failures degrade to ``None``.
        """
        document, _ = guarded_call(
            self._assemble_traced, item_id, label=f"assembly of item {item_id}"
        ).value_or((None, {}))
        return document

    def preview(self, item_id: ItemId) -> ItemPreview:
        """Assemble ``item_id`` and report per-key sources and missing fields."""
        document, resolutions = guarded_call(
            self._assemble_traced,
            item_id,
            label=f"preview of item {item_id}",
        ).value_or((None, {}))
        fields: JsonMapping = {
            key.value: {"value": resolution.value, "source": resolution.source.value}
            for key, resolution in resolutions.items()
        }
        return ItemPreview(
            document=document,
            eligible=is_eligible_for_display(document),
            missing_fields=missing_required_fields(document),
            fields=fields,
        )

    def has_minimum_mapping(self, mapper: FieldMapper, item_id: ItemId) -> bool:
        """Return whether mappings alone resolve a title, thumbnail or date."""
        if not mapper.has_field_provider:
            return False
        for key in MINIMUM_MAPPING_KEYS:
            resolution = mapper.resolve_traced(key, item_id, include_overrides=False)
            if resolution.source in _MAPPING_SOURCES and _present(resolution.value):
                return True
        return False

    def _load_config(self) -> MappingConfig:
        config = guarded_call(
            self._config_store.load_mapping_config, label="mapping settings load"
        ).value_or(None)
        return config if isinstance(config, MappingConfig) else MappingConfig()

    def _is_opted_in(
        self,
        item: ContentItem,
        config: MappingConfig,
        mapper: FieldMapper,
    ) -> bool:
        if self.has_minimum_mapping(mapper, item.item_id):
            return True
        overrides = mapper.overrides_for(item.item_id)
        enabled = coerce_flag(overrides.get(ENABLED_OVERRIDE))
        allowed = config.content_types or self._settings.default_content_types
        if not enabled or item.content_type not in allowed:
            log_debug(
                logger,
                "Item %s not opted in (enabled=%s, content type %s).",
                item.item_id,
                enabled,
                item.content_type,
            )
            return False
        return True

    def _assemble_traced(
        self, item_id: ItemId
    ) -> tuple[OutputDocument | None, dict[LogicalKey, FieldResolution]]:
        item = guarded_call(
            self._content.get_item, item_id, label=f"content lookup {item_id}"
        ).value_or(None)
        if item is None:
            log_debug(logger, "Item %s not found; no document.", item_id)
            return None, {}
        config = self._load_config()
        mapper = FieldMapper(
            config,
            self._overrides,
            field_provider=self._field_provider,
            filter_mapping=self._filter_mapping,
        )
        resolutions = mapper.resolve_all(item_id)
        if not self._is_opted_in(item, config, mapper):
            return None, resolutions
        values = {key: resolution.value for key, resolution in resolutions.items()}
        document = self._build_document(item, values, mapper)
        return self._augment(prune_document(document), item_id), resolutions

    def _build_document(
        self,
        item: ContentItem,
        values: cabc.Mapping[LogicalKey, object],
        mapper: FieldMapper,
    ) -> JsonMapping:
        name = _or_default(values[LogicalKey.TITLE], item.title)
        description = _or_default(values[LogicalKey.DESCRIPTION], item.excerpt)
        upload_date = _or_default(
            values[LogicalKey.UPLOAD_DATE], format_upload_date(item.published_at)
        )
        language = _or_default(
            values[LogicalKey.LANGUAGE], self._settings.default_language
        )
        thumbnail_raw = self._media.resolve_sentinel(
            values[LogicalKey.THUMBNAIL_URL], item.item_id
        )

        document: JsonMapping = {
            "@context": SCHEMA_CONTEXT,
            "@type": "VideoObject",
            "name": str(name),
            "description": strip_all_tags(description),
            "thumbnailUrl": self._media.normalize_thumbnail(thumbnail_raw),
            "uploadDate": str(upload_date),
            "duration": _or_default(values[LogicalKey.DURATION_ISO], None),
            "inLanguage": language,
            "embedUrl": None,
            "contentUrl": None,
            "publisher": self._publisher(),
            "mainEntityOfPage": item.permalink,
        }

        embed = values[LogicalKey.EMBED_URL]
        if _present(embed):
            document["embedUrl"] = to_embed_url(embed)

        clips = [clip.to_json_ld() for clip in self._clips(item, values, mapper)]
        self._apply_media_sources(document, values, clips)

        transcript = values[LogicalKey.TRANSCRIPT_URL]
        if _present(transcript):
            text = str(transcript).strip()
            document["transcript"] = (
                text if is_valid_url(text) else strip_all_tags(text)
            )

        if coerce_flag(values[LogicalKey.SEEKTOACTION]):
            document["potentialAction"] = {
                "@type": "SeekToAction",
                "target": f"{item.permalink}?t={{{SEEK_TO_PARAMETER}}}",
                "startOffset-input": f"required name={SEEK_TO_PARAMETER}",
            }

        visual = values[LogicalKey.VISUAL_DESCRIPTION]
        if _present(visual):
            document["additionalProperty"] = [
                {
                    "@type": "PropertyValue",
                    "name": VISUAL_DESCRIPTION_PROPERTY,
                    "value": strip_all_tags(visual),
                }
            ]
        return document

    def _publisher(self) -> JsonMapping | None:
        settings = self._settings
        if not settings.site_name and not settings.site_logo_url:
            return None
        publisher: JsonMapping = {"@type": "Organization", "name": settings.site_name}
        if settings.site_logo_url:
            publisher["logo"] = {"@type": "ImageObject", "url": settings.site_logo_url}
        return publisher

    def _apply_media_sources(
        self,
        document: JsonMapping,
        values: cabc.Mapping[LogicalKey, object],
        clips: list[JsonMapping],
    ) -> None:
        sources = [
            media
            for key in MEDIA_SOURCE_KEYS
            if (media := self._media.file_to_media_object(values[key])) is not None
        ]
        if not sources:
            legacy = values[LogicalKey.CONTENT_URL]
            if isinstance(legacy, str) and is_valid_url(legacy.strip()):
                document["contentUrl"] = legacy.strip()
            if clips:
                document["hasPart"] = clips
            return
        if len(sources) == 1:
            for field in _PROMOTED_MEDIA_FIELDS:
                if not is_empty(sources[0].get(field)):
                    document[field] = sources[0][field]
        document["hasPart"] = [*clips, *sources]

    def _clips(
        self,
        item: ContentItem,
        values: cabc.Mapping[LogicalKey, object],
        mapper: FieldMapper,
    ) -> list[ClipRecord]:
        parser = ClipsParser(item.permalink)
        raw = values[LogicalKey.CLIPS]
        if mapper.has_field_provider and isinstance(raw, (list, tuple)) and raw:
            return parser.parse_from_rows(raw)
        if isinstance(raw, str) and raw.strip():
            return parser.parse_from_json(raw)
        return parser.parse_from_json(
            mapper.overrides_for(item.item_id).get(CLIPS_JSON_OVERRIDE)
        )

    def _augment(self, document: object, item_id: ItemId) -> OutputDocument:
        pruned = typ.cast("OutputDocument", document)
        if self._augmenter is None:
            return pruned
        augmented = guarded_call(
            self._augmenter, dict(pruned), item_id, label="document augmentation"
        ).value_or(pruned)
        if not isinstance(augmented, cabc.Mapping):
            log_debug(logger, "Augmentation for %s returned a non-mapping.", item_id)
            return pruned
        return dict(typ.cast("cabc.Mapping[str, object]", augmented))


__all__ = [
    "CLIPS_JSON_OVERRIDE",
    "ENABLED_OVERRIDE",
    "MEDIA_SOURCE_KEYS",
    "MINIMUM_MAPPING_KEYS",
    "SCHEMA_CONTEXT",
    "PayloadAssembler",
    "format_upload_date",
    "is_eligible_for_display",
    "missing_required_fields",
    "prune_document",
]
