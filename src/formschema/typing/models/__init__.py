"""Core domain model exports."""

from formschema.typing.models.fields import NormalizedField, RawFieldDescriptor
from formschema.typing.models.imports import (
    CategoryDefinition,
    FieldRecord,
    FormRecord,
    FormSortKey,
    ImportErrorRecord,
    ImportOptions,
    ImportRunStats,
    MetadataRecord,
    MetadataSummary,
)
from formschema.typing.models.schema import (
    DEFAULT_SECTION,
    FormMetadata,
    FormSchemaDocument,
    ValidationResult,
)

__all__ = [
    "DEFAULT_SECTION",
    "CategoryDefinition",
    "FieldRecord",
    "FormMetadata",
    "FormRecord",
    "FormSchemaDocument",
    "FormSortKey",
    "ImportErrorRecord",
    "ImportOptions",
    "ImportRunStats",
    "MetadataRecord",
    "MetadataSummary",
    "NormalizedField",
    "RawFieldDescriptor",
    "ValidationResult",
]
