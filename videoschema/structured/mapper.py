"""Field mapping: resolve logical keys from competing sources.

For each logical key the mapper consults, in order, the per-item override
set, the persisted mapping rule, the filter-provided rule and finally the
``video_<key>`` naming convention. The first source that yields something
other than ``MISS``, ``None`` or ``False`` wins.

Examples
--------
>>> mapper = FieldMapper(config, overrides, field_provider=fields)
>>> mapper.resolve(LogicalKey.TITLE, "42")
'Demo'
"""

from __future__ import annotations

import collections.abc as cabc
import typing as typ

from videoschema.logging import get_logger, log_debug

from .domain import (
    FEATURED_IMAGE_TOKEN,
    MISS,
    CallableRule,
    FeaturedImageRule,
    FieldResolution,
    ImageCoercion,
    LogicalKey,
    PathRule,
    ResolutionSource,
    as_attachment_id,
    is_empty,
)
from .extensions import guarded_call
from .paths import PathResolver
from .text import is_valid_url

if typ.TYPE_CHECKING:
    from .domain import ItemId, MappingConfig, MappingRule, Missing
    from .ports import FieldProvider, FilterMapping, OverrideStore

logger = get_logger(__name__)

#: Prefix of the conventional custom-field name for a logical key.
CONVENTION_PREFIX = "video_"

_FULL_SIZE = "full"


def _parse_coercion(raw: object) -> ImageCoercion | None:
    if isinstance(raw, ImageCoercion):
        return raw
    if isinstance(raw, str) and raw.strip().lower() in ImageCoercion._value2member_map_:
        return ImageCoercion(raw.strip().lower())
    return None


def parse_mapping_rule(raw: object, key: LogicalKey) -> MappingRule | None:
    """Turn a loosely shaped rule value into a ``MappingRule``.

    Accepted shapes are rule instances, callables, path strings (including
    the ``featured_image`` token) and ``{"field" | "path", "image_type" |
    "coercion"}`` mappings. Coercion is dropped for keys that do not carry
    images. Anything else, including empty paths, yields ``None``.
    """
    match raw:
        case PathRule(path=path, coercion=coercion):
            if not path.strip():
                return None
            return PathRule(path.strip(), coercion if key.is_image else None)
        case FeaturedImageRule() | CallableRule():
            return raw
        case str():
            path = raw.strip()
            if not path:
                return None
            if path == FEATURED_IMAGE_TOKEN:
                return FeaturedImageRule()
            return PathRule(path)
        case cabc.Mapping():
            mapping = typ.cast("cabc.Mapping[str, object]", raw)
            path = mapping.get("field") or mapping.get("path")
            if not isinstance(path, str) or not path.strip():
                return None
            if path.strip() == FEATURED_IMAGE_TOKEN:
                return FeaturedImageRule()
            coercion = _parse_coercion(
                mapping.get("image_type", mapping.get("coercion"))
            )
            return PathRule(path.strip(), coercion if key.is_image else None)
        case _ if callable(raw):
            return CallableRule(typ.cast("cabc.Callable[[ItemId], object]", raw))
    return None


def _find_id_field(fields: cabc.Mapping[str, object]) -> object:
    for name in ("ID", "id"):
        if not is_empty(fields.get(name)):
            return fields[name]
    for name, value in fields.items():
        if isinstance(name, str) and name.lower() == "id" and not is_empty(value):
            return value
    return MISS


def image_url_from_fields(fields: cabc.Mapping[str, object]) -> object:
    """Return the URL of an image object: explicit, ``full`` size, or first size."""
    url = fields.get("url")
    if not is_empty(url):
        return url
    sizes = fields.get("sizes")
    if isinstance(sizes, cabc.Mapping) and sizes:
        sizes_map = typ.cast("cabc.Mapping[str, object]", sizes)
        if not is_empty(sizes_map.get(_FULL_SIZE)):
            return sizes_map[_FULL_SIZE]
        first = next(iter(sizes_map.values()))
        if not is_empty(first):
            return first
    return MISS


def coerce_image(value: object, coercion: ImageCoercion) -> object:
    """Reshape an image-like value into ``coercion`` form.

    When no branch applies the raw value is returned unchanged, so a value
    an administrator entered is never silently dropped.
    """
    if isinstance(value, cabc.Mapping):
        fields = typ.cast("cabc.Mapping[str, object]", value)
        match coercion:
            case ImageCoercion.ARRAY:
                return value
            case ImageCoercion.URL:
                url = image_url_from_fields(fields)
                if url is not MISS:
                    return url
            case ImageCoercion.ID:
                found = _find_id_field(fields)
                attachment_id = as_attachment_id(found)
                if attachment_id is not None:
                    return attachment_id
                if found is not MISS:
                    return found
        return value
    if coercion is ImageCoercion.ID:
        attachment_id = as_attachment_id(value)
        if attachment_id is not None:
            return attachment_id
    if coercion is ImageCoercion.URL and is_valid_url(value):
        return value
    return value


def _is_hit(value: object) -> bool:
    return value is not MISS and value is not None and value is not False


class FieldMapper:
    """Resolve logical keys for items from overrides, settings and providers.

    Parameters
    ----------
    config : MappingConfig
        Persisted mapping rules.
    overrides : OverrideStore
        Per-item override values, consulted first.
    field_provider : FieldProvider | None, optional
        Custom-field provider. Without one, path rules and the naming
        convention cannot resolve anything.
    filter_mapping : FilterMapping | None, optional
        Extension point returning a rule per logical key.
    """

    def __init__(
        self,
        config: MappingConfig,
        overrides: OverrideStore,
        *,
        field_provider: FieldProvider | None = None,
        filter_mapping: FilterMapping | None = None,
    ) -> None:
        self._config = config
        self._overrides = overrides
        self._field_provider = field_provider
        self._filter_mapping = filter_mapping
        self._override_cache: dict[ItemId, cabc.Mapping[str, object]] = {}
        self._filter_rule_cache: dict[LogicalKey, MappingRule | None] = {}
        self._mapped_cache: dict[tuple[ItemId, LogicalKey], FieldResolution] = {}

    @property
    def has_field_provider(self) -> bool:
        """Return whether a custom-field provider is configured."""
        return self._field_provider is not None

    def overrides_for(self, item_id: ItemId) -> cabc.Mapping[str, object]:
        """Return the (cached) override set for ``item_id``."""
        if item_id not in self._override_cache:
            result = guarded_call(
                self._overrides.overrides_for, item_id, label="override lookup"
            )
            self._override_cache[item_id] = result.value_or({}) or {}
        return self._override_cache[item_id]

    def resolve(self, key: LogicalKey, item_id: ItemId) -> object:
        """Return the resolved value for ``key``, or ``None`` on a miss."""
        return self.resolve_traced(key, item_id).value

    def resolve_traced(
        self,
        key: LogicalKey,
        item_id: ItemId,
        *,
        include_overrides: bool = True,
    ) -> FieldResolution:
        """Resolve ``key`` and report which source produced the value.

        With ``include_overrides=False`` the per-item override set is
        skipped, which answers whether mappings alone resolve the key.
        Mapped resolutions are cached per item and key, so filters,
        callables and providers run at most once per mapper.
        """
        if include_overrides:
            override = self.overrides_for(item_id).get(key.value)
            if not is_empty(override):
                return FieldResolution(override, ResolutionSource.OVERRIDE)

        cache_key = (item_id, key)
        if cache_key not in self._mapped_cache:
            self._mapped_cache[cache_key] = self._resolve_mapped(key, item_id)
        return self._mapped_cache[cache_key]

    def resolve_all(self, item_id: ItemId) -> dict[LogicalKey, FieldResolution]:
        """Resolve every logical key for ``item_id``."""
        return {key: self.resolve_traced(key, item_id) for key in LogicalKey}

    def filter_rule_for(self, key: LogicalKey) -> MappingRule | None:
        """Return the (cached) filter-provided rule for ``key``."""
        if key not in self._filter_rule_cache:
            rule = None
            if self._filter_mapping is not None:
                raw = guarded_call(
                    self._filter_mapping, key, label=f"filter mapping for {key.value}"
                ).value_or(None)
                rule = parse_mapping_rule(raw, key)
            self._filter_rule_cache[key] = rule
        return self._filter_rule_cache[key]

    def _resolve_mapped(self, key: LogicalKey, item_id: ItemId) -> FieldResolution:
        rule = self._config.rule_for(key)
        if rule is not None:
            value = self._apply_rule(rule, key, item_id)
            if _is_hit(value):
                return FieldResolution(value, ResolutionSource.CONFIG)

        value = self._resolve_from_filter(key, item_id)
        if _is_hit(value):
            return FieldResolution(value, ResolutionSource.FILTER)

        value = self._resolve_by_convention(key, item_id)
        if value is not MISS and value is not False:
            return FieldResolution(value, ResolutionSource.CONVENTION)

        log_debug(logger, "No source resolved %s for item %s.", key.value, item_id)
        return FieldResolution(None, ResolutionSource.NONE)

    def _lookup_field(self, item_id: ItemId) -> cabc.Callable[[str], object]:
        provider = self._field_provider

        def lookup(name: str) -> object:
            if provider is None:
                return MISS
            return provider.get_field(name, item_id)

        return lookup

    def _apply_rule(
        self,
        rule: MappingRule,
        key: LogicalKey,
        item_id: ItemId,
    ) -> object | Missing:
        match rule:
            case FeaturedImageRule(token=token):
                return token
            case CallableRule(resolver=resolver):
                return guarded_call(
                    resolver, item_id, label=f"callable mapping for {key.value}"
                ).value_or(MISS)
            case PathRule(path=path, coercion=coercion):
                if self._field_provider is None:
                    return MISS
                value = PathResolver.resolve_with(self._lookup_field(item_id), path)
                if value is MISS or coercion is None or not key.is_image:
                    return value
                return coerce_image(value, coercion)
        return MISS

    def _resolve_from_filter(self, key: LogicalKey, item_id: ItemId) -> object:
        rule = self.filter_rule_for(key)
        if rule is None:
            return MISS
        return self._apply_rule(rule, key, item_id)

    def _resolve_by_convention(self, key: LogicalKey, item_id: ItemId) -> object:
        if self._field_provider is None:
            return MISS
        return guarded_call(
            self._field_provider.get_field,
            f"{CONVENTION_PREFIX}{key.value}",
            item_id,
            label=f"conventional field for {key.value}",
        ).value_or(MISS)


__all__ = [
    "CONVENTION_PREFIX",
    "FieldMapper",
    "coerce_image",
    "image_url_from_fields",
    "parse_mapping_rule",
]
