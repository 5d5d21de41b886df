"""Falcon resources for mapping and content-type settings."""

from __future__ import annotations

import falcon

from videoschema.api.helpers import (
    invalid_settings_as_bad_request,
    require_field,
    require_payload_dict,
)
from videoschema.api.resources.base import _ResourceBase
from videoschema.api.serializers import serialize_content_types, serialize_mappings
from videoschema.structured.services import (
    load_mapping_config,
    replace_content_types,
    replace_mapping_config,
)


class MappingSettingsResource(_ResourceBase):
    """Read and replace the persisted mapping rules.

    Raises
    ------
    falcon.HTTPBadRequest
        Raised when a replacement payload is not a JSON object.
    """

    async def on_get(self, req: falcon.Request, resp: falcon.Response) -> None:
        """Return the stored rules keyed by logical key."""
        del req
        async with self._uow_factory() as uow:
            config = await load_mapping_config(uow)

        resp.media = serialize_mappings(config.rules)
        resp.status = falcon.HTTP_200

    async def on_put(self, req: falcon.Request, resp: falcon.Response) -> None:
        """Sanitise and store a full set of mapping rules.

        Parameters
        ----------
        req : falcon.Request
            Request whose body maps logical keys to a field path or to a
            ``{"field", "image_type"}`` object.
        resp : falcon.Response
            Response populated with the stored rules.
        """
        payload = require_payload_dict(await req.get_media())
        with invalid_settings_as_bad_request():
            async with self._uow_factory() as uow:
                rules = await replace_mapping_config(uow, payload)

        resp.media = serialize_mappings(rules)
        resp.status = falcon.HTTP_200


class ContentTypesResource(_ResourceBase):
    """Read and replace the content-type allowlist."""

    async def on_get(self, req: falcon.Request, resp: falcon.Response) -> None:
        """Return the allowlist and whether it was ever configured."""
        del req
        async with self._uow_factory() as uow:
            config = await load_mapping_config(uow)

        resp.media = serialize_content_types(
            config.content_types or self._settings.default_content_types,
            configured=config.content_types is not None,
        )
        resp.status = falcon.HTTP_200

    async def on_put(self, req: falcon.Request, resp: falcon.Response) -> None:
        """Sanitise and store the allowlist from ``content_types``."""
        payload = require_payload_dict(await req.get_media())
        raw_content_types = require_field(payload, "content_types")
        with invalid_settings_as_bad_request():
            async with self._uow_factory() as uow:
                content_types = await replace_content_types(uow, raw_content_types)

        resp.media = serialize_content_types(content_types, configured=True)
        resp.status = falcon.HTTP_200


__all__ = ["ContentTypesResource", "MappingSettingsResource"]
