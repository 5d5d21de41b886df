"""VideoObject structured-data mapping, normalisation and assembly.

This package turns heterogeneous content metadata into one schema.org
``VideoObject`` JSON-LD document per content item, and exposes the async
service functions used by the administrative adapters.

Examples
--------
Assemble a document from reference adapters:

>>> snapshot = ItemSnapshot.from_payload("42", payload)
>>> assembler = PayloadAssembler(
...     content=snapshot.content,
...     config_store=StaticConfigStore(config),
...     overrides=InMemoryOverrideStore(),
...     attachments=snapshot.attachments,
...     field_provider=snapshot.fields,
... )
>>> document = assembler.assemble("42")
"""

from .domain import (
    FEATURED_IMAGE_TOKEN,
    MISS,
    AttachmentInfo,
    CallableRule,
    ClipRecord,
    ContentItem,
    FeaturedImageRule,
    FieldResolution,
    ImageCoercion,
    ItemPreview,
    LogicalKey,
    MappingConfig,
    PathRule,
    ResolutionSource,
)
from .extensions import Failure, Ok, guarded_call
from .settings import (
    InvalidSettingsError,
    VideoSchemaError,
    sanitize_content_types,
    sanitize_mapping_settings,
    sanitize_overrides,
)

# isort: split
from .adapters import (
    InMemoryAttachmentProvider,
    InMemoryContentProvider,
    InMemoryFieldProvider,
    InMemoryOverrideStore,
    ItemSnapshot,
    StaticConfigStore,
)
from .assembler import PayloadAssembler, is_eligible_for_display, prune_document
from .clips import ClipsParser
from .mapper import FieldMapper
from .media import MediaNormalizer
from .oembed import to_embed_url
from .paths import PathResolver
from .services import (
    get_item_overrides,
    load_mapping_config,
    preview_item,
    replace_content_types,
    replace_item_overrides,
    replace_mapping_config,
)

__all__ = [
    "FEATURED_IMAGE_TOKEN",
    "MISS",
    "AttachmentInfo",
    "CallableRule",
    "ClipRecord",
    "ClipsParser",
    "ContentItem",
    "Failure",
    "FeaturedImageRule",
    "FieldMapper",
    "FieldResolution",
    "ImageCoercion",
    "InMemoryAttachmentProvider",
    "InMemoryContentProvider",
    "InMemoryFieldProvider",
    "InMemoryOverrideStore",
    "InvalidSettingsError",
    "ItemPreview",
    "ItemSnapshot",
    "LogicalKey",
    "MappingConfig",
    "MediaNormalizer",
    "Ok",
    "PathResolver",
    "PathRule",
    "PayloadAssembler",
    "ResolutionSource",
    "StaticConfigStore",
    "VideoSchemaError",
    "get_item_overrides",
    "guarded_call",
    "is_eligible_for_display",
    "load_mapping_config",
    "preview_item",
    "prune_document",
    "replace_content_types",
    "replace_item_overrides",
    "replace_mapping_config",
    "sanitize_content_types",
    "sanitize_mapping_settings",
    "sanitize_overrides",
    "to_embed_url",
]
