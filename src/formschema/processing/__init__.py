"""Field-name parsing, classification, normalization and validation."""

from formschema.processing.classifier import FieldTypeClassifier
from formschema.processing.normalizer import FormSchemaNormalizer
from formschema.processing.sanitizer import FieldNameSanitizer, to_snake_case
from formschema.processing.shared_keys import SHARED_KEY_PATTERNS, SharedKeyDetector
from formschema.processing.validator import VALID_FIELD_TYPES, SchemaValidator

__all__ = [
    "SHARED_KEY_PATTERNS",
    "VALID_FIELD_TYPES",
    "FieldNameSanitizer",
    "FieldTypeClassifier",
    "FormSchemaNormalizer",
    "SchemaValidator",
    "SharedKeyDetector",
    "to_snake_case",
]
