"""Falcon resources for the administrative endpoints.

Utilities provided
------------------
- Settings resources: ``MappingSettingsResource``, ``ContentTypesResource``
- Item resources: ``ItemOverridesResource``, ``ItemPreviewResource``

Examples
--------
>>> app.add_route("/settings/mappings", MappingSettingsResource(uow_factory))
"""

from .items import ItemOverridesResource, ItemPreviewResource
from .settings import ContentTypesResource, MappingSettingsResource

__all__ = [
    "ContentTypesResource",
    "ItemOverridesResource",
    "ItemPreviewResource",
    "MappingSettingsResource",
]
