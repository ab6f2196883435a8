"""Typing-centric domain modules."""

from formschema.typing.enums import FieldType, FormOutcome
from formschema.typing.models import (
    CategoryDefinition,
    FieldRecord,
    FormMetadata,
    FormRecord,
    FormSchemaDocument,
    FormSortKey,
    ImportErrorRecord,
    ImportOptions,
    ImportRunStats,
    MetadataRecord,
    MetadataSummary,
    NormalizedField,
    RawFieldDescriptor,
    ValidationResult,
)
from formschema.typing.protocol import CategoryLookup, FormRepository, MetadataSource, PdfLocator

__all__ = [
    "CategoryDefinition",
    "CategoryLookup",
    "FieldRecord",
    "FieldType",
    "FormMetadata",
    "FormOutcome",
    "FormRecord",
    "FormRepository",
    "FormSchemaDocument",
    "FormSortKey",
    "ImportErrorRecord",
    "ImportOptions",
    "ImportRunStats",
    "MetadataRecord",
    "MetadataSource",
    "MetadataSummary",
    "NormalizedField",
    "PdfLocator",
    "RawFieldDescriptor",
    "ValidationResult",
]
