"""Falcon application factory for the administrative API."""

from __future__ import annotations

import typing as typ

from falcon import asgi

from videoschema.config import AssemblySettings
from videoschema.logging import get_logger, log_info

from .resources import (
    ContentTypesResource,
    ItemOverridesResource,
    ItemPreviewResource,
    MappingSettingsResource,
)

if typ.TYPE_CHECKING:
    from videoschema.structured.ports import FilterMapping, PayloadAugmenter

    from .types import UowFactory

logger = get_logger(__name__)


def create_app(
    uow_factory: UowFactory,
    *,
    settings: AssemblySettings | None = None,
    filter_mapping: FilterMapping | None = None,
    augmenter: PayloadAugmenter | None = None,
) -> asgi.App:
    """Build the Falcon ASGI application for settings and previews.

    Parameters
    ----------
    uow_factory : UowFactory
        Factory creating a settings unit-of-work per request.
    settings : AssemblySettings | None, optional
        Site-wide assembly settings; read from the environment when
        omitted.
    filter_mapping : FilterMapping | None, optional
        Filter-style mapping hook used by previews.
    augmenter : PayloadAugmenter | None, optional
        Final augmentation hook used by previews.

    Returns
    -------
    falcon.asgi.App
        The configured application.
    """
    resolved_settings = settings or AssemblySettings.from_environment()
    app = asgi.App()

    app.add_route(
        "/settings/mappings",
        MappingSettingsResource(uow_factory, settings=resolved_settings),
    )
    app.add_route(
        "/settings/content-types",
        ContentTypesResource(uow_factory, settings=resolved_settings),
    )
    app.add_route(
        "/items/{item_id}/overrides",
        ItemOverridesResource(uow_factory, settings=resolved_settings),
    )
    app.add_route(
        "/items/{item_id}/preview",
        ItemPreviewResource(
            uow_factory,
            settings=resolved_settings,
            filter_mapping=filter_mapping,
            augmenter=augmenter,
        ),
    )
    log_info(logger, "Administrative API routes registered.")
    return app
