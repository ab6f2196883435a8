"""Per-form normalization of raw AcroForm fields into ordered field records."""

from __future__ import annotations

from typing import TYPE_CHECKING

from formschema.logging import get_logger
from formschema.processing.classifier import FieldTypeClassifier
from formschema.processing.sanitizer import FieldNameSanitizer
from formschema.processing.shared_keys import SharedKeyDetector
from formschema.typing.models import DEFAULT_SECTION, FormSchemaDocument, NormalizedField

if TYPE_CHECKING:
    from collections.abc import Iterable

    from formschema.typing.models import FormMetadata, RawFieldDescriptor

logger = get_logger(__name__)


class FormSchemaNormalizer:
    """Compose sanitizer, classifier and shared-key detector over one form's fields."""

    def __init__(
        self,
        *,
        sanitizer: FieldNameSanitizer | None = None,
        classifier: FieldTypeClassifier | None = None,
        shared_keys: SharedKeyDetector | None = None,
    ) -> None:
        """Initialize normalizer.

        Args:
            sanitizer (FieldNameSanitizer | None): Name parser.
            classifier (FieldTypeClassifier | None): Type classifier and skip filter.
            shared_keys (SharedKeyDetector | None): Shared key detector.
        """
        self.sanitizer = sanitizer or FieldNameSanitizer()
        self.classifier = classifier or FieldTypeClassifier(self.sanitizer)
        self.shared_keys = shared_keys or SharedKeyDetector(sanitizer=self.sanitizer)

    def normalize(self, form_code: str, raw_fields: Iterable[RawFieldDescriptor]) -> list[NormalizedField]:
        """Normalize the fields of one form.

        Utility fields are dropped before positions are assigned, so positions
        are always `1..n`. A later field whose sanitized name is already taken
        gets `_<position>` appended. Fields whose name or label would be empty
        get `field_<position>` and `Field <position>`, so a malformed name never
        invalidates the form.

        Args:
            form_code (str): Code of the form, used for logging.
            raw_fields (Iterable[RawFieldDescriptor]): Fields in PDF order.

        Returns:
            list[NormalizedField]: Normalized fields in PDF order.
        """
        normalized: list[NormalizedField] = []
        taken: set[str] = set()
        skipped = 0

        for raw_field in raw_fields:
            if self.classifier.skip_field(raw_field.raw_name):
                skipped += 1
                continue

            position = len(normalized) + 1
            base_name = self.sanitizer.sanitize(raw_field.raw_name)
            name = _unique_name(base_name or f"field_{position}", position, taken)
            taken.add(name)
            label = self.sanitizer.humanize_label(raw_field.raw_name) or f"Field {position}"

            normalized.append(
                NormalizedField(
                    sanitized_name=name,
                    label=label,
                    field_type=self.classifier.classify(raw_field.raw_name, raw_field.pdf_reported_type),
                    section=self.sanitizer.extract_section(raw_field.raw_name),
                    shared_field_key=self.shared_keys.detect(base_name, raw_field.raw_name),
                    position=position,
                    pdf_field_name=raw_field.raw_name,
                    page_number=raw_field.page_number,
                ),
            )

        logger.debug(
            "Form fields normalized",
            extra={"form_code": form_code, "fields": len(normalized), "skipped": skipped},
        )
        return normalized

    @staticmethod
    def build_document(metadata: FormMetadata, fields: Iterable[NormalizedField]) -> FormSchemaDocument:
        """Group normalized fields by section into a schema document.

        Args:
            metadata (FormMetadata): Form metadata.
            fields (Iterable[NormalizedField]): Normalized fields in position order.

        Returns:
            FormSchemaDocument: Document with sections in order of first appearance.
        """
        sections: dict[str, list[NormalizedField]] = {}
        for field in fields:
            sections.setdefault(field.section or DEFAULT_SECTION, []).append(field)
        return FormSchemaDocument(form_metadata=metadata, sections=sections)


def _unique_name(base_name: str, position: int, taken: set[str]) -> str:
    if base_name not in taken:
        return base_name
    candidate = f"{base_name}_{position}"
    suffix = 1
    while candidate in taken:
        suffix += 1
        candidate = f"{base_name}_{position}_{suffix}"
    return candidate
