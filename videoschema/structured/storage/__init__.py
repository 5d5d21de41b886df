"""SQLAlchemy persistence adapters for structured-data settings.

This package provides the models, repositories and unit-of-work used by
the settings services, keeping persistence isolated from the assembly
pipeline.

Examples
--------
Load the stored mapping rules:

>>> async with SqlAlchemySettingsUnitOfWork(session_factory) as uow:
...     rules = await uow.field_mappings.list_all()
"""

from .alembic_helpers import alembic_config, apply_migrations
from .migration_check import detect_schema_drift
from .models import (
    Base,
    EnabledContentTypeRecord,
    FieldMappingRecord,
    ItemOverrideRecord,
)
from .repositories import (
    SqlAlchemyContentTypeRepository,
    SqlAlchemyFieldMappingRepository,
    SqlAlchemyItemOverrideRepository,
)
from .uow import SqlAlchemySettingsUnitOfWork

__all__ = (
    "Base",
    "EnabledContentTypeRecord",
    "FieldMappingRecord",
    "ItemOverrideRecord",
    "SqlAlchemyContentTypeRepository",
    "SqlAlchemyFieldMappingRepository",
    "SqlAlchemyItemOverrideRepository",
    "SqlAlchemySettingsUnitOfWork",
    "alembic_config",
    "apply_migrations",
    "detect_schema_drift",
)
