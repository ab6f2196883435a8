"""Structural validation of form schema documents."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Final, TypeVar

from formschema.exceptions import SchemaValidationError
from formschema.typing.enums import FieldType
from formschema.typing.models import FormSchemaDocument, ValidationResult

if TYPE_CHECKING:
    from formschema.typing.protocol import CategoryLookup, PdfLocator

REQUIRED_FORM_KEYS: Final = ("title", "pdf_filename", "category")
REQUIRED_FIELD_KEYS: Final = ("sanitized_name", "field_type", "label")
VALID_FIELD_TYPES: Final = FieldType.values()

DocumentT = TypeVar("DocumentT", FormSchemaDocument, Mapping[str, Any])


class SchemaValidator:
    """Check schema documents; errors block persistence, warnings are advisory.

    The only I/O goes through the two injected collaborators. Either may be
    omitted, in which case the matching warning check is skipped.
    """

    def __init__(
        self,
        *,
        category_lookup: CategoryLookup | None = None,
        pdf_locator: PdfLocator | None = None,
    ) -> None:
        """Initialize validator.

        Args:
            category_lookup (CategoryLookup | None): Category existence check.
            pdf_locator (PdfLocator | None): PDF template existence check.
        """
        self._category_lookup = category_lookup
        self._pdf_locator = pdf_locator

    def validate(self, document: FormSchemaDocument | Mapping[str, Any]) -> ValidationResult:
        """Validate a document or its plain payload.

        Args:
            document (FormSchemaDocument | Mapping[str, Any]): Document to check.

        Returns:
            ValidationResult: Errors and warnings.
        """
        payload = document.to_payload() if isinstance(document, FormSchemaDocument) else document
        result = ValidationResult()
        if not isinstance(payload, Mapping):
            result.errors.append("Schema document must be a mapping")
            return result

        self._check_form_metadata(payload.get("form_metadata"), result)
        self._check_sections(payload.get("sections"), result)
        return result

    def validate_strict(self, document: DocumentT) -> DocumentT:
        """Validate and return the document unchanged when it has no errors.

        Args:
            document (FormSchemaDocument | Mapping[str, Any]): Document to check.

        Raises:
            SchemaValidationError: If any blocking error is found.

        Returns:
            FormSchemaDocument | Mapping[str, Any]: The same document.
        """
        result = self.validate(document)
        if not result.is_valid:
            raise SchemaValidationError(errors=result.errors)
        return document

    def _check_form_metadata(self, metadata: object, result: ValidationResult) -> None:
        if not isinstance(metadata, Mapping):
            result.errors.append("Missing 'form_metadata' section")
            return

        for key in REQUIRED_FORM_KEYS:
            if not metadata.get(key):
                result.errors.append(f"Missing required form key: {key}")

        pdf_filename = metadata.get("pdf_filename")
        if pdf_filename and self._pdf_locator and not self._pdf_locator.pdf_exists(str(pdf_filename)):
            result.warnings.append(f"PDF file not found: {pdf_filename}")

        category = metadata.get("category")
        if category and self._category_lookup and not self._category_lookup.category_exists(str(category)):
            result.warnings.append(f"Category '{category}' not found")

    @staticmethod
    def _check_sections(sections: object, result: ValidationResult) -> None:
        if not isinstance(sections, Mapping):
            result.errors.append("Missing or invalid 'sections'")
            return

        seen_names: set[str] = set()
        for section_name, fields in sections.items():
            if not isinstance(fields, list):
                result.errors.append(f"Section '{section_name}' must be a list of fields")
                continue
            for index, field in enumerate(fields, start=1):
                if not isinstance(field, Mapping):
                    result.errors.append(f"Field #{index} in section '{section_name}' must be a mapping")
                    continue
                _check_field(field, section_name, seen_names, result)


def _check_field(
    field: Mapping[str, Any],
    section_name: str,
    seen_names: set[str],
    result: ValidationResult,
) -> None:
    for key in REQUIRED_FIELD_KEYS:
        if not field.get(key):
            result.errors.append(f"Field missing required key '{key}' in section '{section_name}'")

    name = field.get("sanitized_name")
    field_type = field.get("field_type")
    if field_type and field_type not in VALID_FIELD_TYPES:
        result.errors.append(f"Invalid field type '{field_type}' for field '{name}'")

    if name:
        if name in seen_names:
            result.errors.append(f"Duplicate field name: {name}")
        seen_names.add(name)

    shared_key = field.get("shared_field_key")
    if shared_key and ":" not in str(shared_key):
        result.warnings.append(f"Unnamespaced shared_field_key '{shared_key}' on field '{name}'")
