"""Falcon resources for per-item overrides and previews."""

from __future__ import annotations

import typing as typ

import falcon

from videoschema.api.helpers import (
    invalid_settings_as_bad_request,
    parse_item_id,
    require_payload_dict,
)
from videoschema.api.resources.base import _ResourceBase
from videoschema.api.serializers import serialize_overrides, serialize_preview
from videoschema.structured.services import (
    get_item_overrides,
    preview_item,
    replace_item_overrides,
)

if typ.TYPE_CHECKING:
    from videoschema.api.types import UowFactory
    from videoschema.config import AssemblySettings
    from videoschema.structured.ports import FilterMapping, PayloadAugmenter


class ItemOverridesResource(_ResourceBase):
    """Read and replace the override set of one item."""

    async def on_get(
        self,
        req: falcon.Request,
        resp: falcon.Response,
        item_id: str,
    ) -> None:
        """Return the stored overrides; an unknown item has none."""
        del req
        parsed_item_id = parse_item_id(item_id)
        async with self._uow_factory() as uow:
            overrides = await get_item_overrides(uow, parsed_item_id)

        resp.media = serialize_overrides(parsed_item_id, overrides)
        resp.status = falcon.HTTP_200

    async def on_put(
        self,
        req: falcon.Request,
        resp: falcon.Response,
        item_id: str,
    ) -> None:
        """Sanitise and store the override fields of one item.

        Fields that clean to empty values are removed, so a blank form
        clears the stored overrides.
        """
        parsed_item_id = parse_item_id(item_id)
        payload = require_payload_dict(await req.get_media())
        with invalid_settings_as_bad_request():
            async with self._uow_factory() as uow:
                overrides = await replace_item_overrides(uow, parsed_item_id, payload)

        resp.media = serialize_overrides(parsed_item_id, overrides)
        resp.status = falcon.HTTP_200


class ItemPreviewResource(_ResourceBase):
    """Assemble a document for an item snapshot posted by the host.

    Parameters
    ----------
    uow_factory : UowFactory
        Factory used to create request-scoped units of work.
    settings : AssemblySettings | None, optional
        Site-wide assembly settings.
    filter_mapping : FilterMapping | None, optional
        Filter-style mapping hook applied to every preview.
    augmenter : PayloadAugmenter | None, optional
        Final augmentation hook applied to every preview.
    """

    def __init__(
        self,
        uow_factory: UowFactory,
        *,
        settings: AssemblySettings | None = None,
        filter_mapping: FilterMapping | None = None,
        augmenter: PayloadAugmenter | None = None,
    ) -> None:
        super().__init__(uow_factory, settings=settings)
        self._filter_mapping = filter_mapping
        self._augmenter = augmenter

    async def on_post(
        self,
        req: falcon.Request,
        resp: falcon.Response,
        item_id: str,
    ) -> None:
        """Return the document, eligibility and per-key sources.

        Parameters
        ----------
        req : falcon.Request
            Request whose body is ``{"item", "fields", "attachments"}``.
        resp : falcon.Response
            Response populated with the preview payload.
        """
        parsed_item_id = parse_item_id(item_id)
        payload = require_payload_dict(await req.get_media())
        with invalid_settings_as_bad_request():
            async with self._uow_factory() as uow:
                preview = await preview_item(
                    uow,
                    parsed_item_id,
                    payload,
                    settings=self._settings,
                    filter_mapping=self._filter_mapping,
                    augmenter=self._augmenter,
                )

        resp.media = serialize_preview(parsed_item_id, preview)
        resp.status = falcon.HTTP_200


__all__ = ["ItemOverridesResource", "ItemPreviewResource"]
