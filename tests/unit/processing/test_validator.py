from __future__ import annotations

import pytest

from formschema.exceptions import SchemaValidationError
from formschema.processing.validator import SchemaValidator
from formschema.typing.models import FormMetadata, FormSchemaDocument, NormalizedField


class _Categories:
    def __init__(self, *slugs: str) -> None:
        self._slugs = set(slugs)

    def category_exists(self, slug: str) -> bool:
        return slug in self._slugs

    def category_for_prefix(self, prefix: str | None) -> str | None:
        return prefix.lower() if prefix else None


class _Pdfs:
    def __init__(self, *names: str) -> None:
        self._names = set(names)

    def pdf_exists(self, pdf_filename: str) -> bool:
        return pdf_filename in self._names


def _payload(**field_overrides: object) -> dict[str, object]:
    field = {
        "sanitized_name": "plaintiff_name",
        "field_type": "text",
        "label": "Plaintiff Name",
        "shared_field_key": "plaintiff:name",
    }
    field.update(field_overrides)
    return {
        "form_metadata": {"code": "SC-100", "title": "SC-100", "pdf_filename": "sc100.pdf", "category": "sc"},
        "sections": {"Plaintiff": [field]},
    }


def test_missing_required_form_keys_yield_one_error_each() -> None:
    result = SchemaValidator().validate({"form_metadata": {"code": "SC-100"}, "sections": {}})

    assert result.errors == [
        "Missing required form key: title",
        "Missing required form key: pdf_filename",
        "Missing required form key: category",
    ]


def test_empty_sections_is_valid() -> None:
    payload = _payload()
    payload["sections"] = {}

    assert SchemaValidator().validate(payload).is_valid


def test_non_mapping_sections_is_an_error() -> None:
    payload = _payload()
    payload["sections"] = ["not", "a", "mapping"]

    assert "Missing or invalid 'sections'" in SchemaValidator().validate(payload).errors


def test_missing_form_metadata_and_non_mapping_document() -> None:
    assert SchemaValidator().validate({"sections": {}}).errors == ["Missing 'form_metadata' section"]
    assert SchemaValidator().validate([]).errors == ["Schema document must be a mapping"]  # type: ignore[arg-type]


def test_invalid_field_type() -> None:
    result = SchemaValidator().validate(_payload(field_type="invalid_type"))

    assert result.errors == ["Invalid field type 'invalid_type' for field 'plaintiff_name'"]


def test_missing_field_keys() -> None:
    result = SchemaValidator().validate(_payload(sanitized_name="", label=None))

    assert "Field missing required key 'sanitized_name' in section 'Plaintiff'" in result.errors
    assert "Field missing required key 'label' in section 'Plaintiff'" in result.errors


def test_duplicate_names_across_sections() -> None:
    payload = _payload()
    payload["sections"]["Defendant"] = [dict(payload["sections"]["Plaintiff"][0])]  # type: ignore[index]

    assert SchemaValidator().validate(payload).errors == ["Duplicate field name: plaintiff_name"]


def test_unnamespaced_shared_key_is_a_warning() -> None:
    flagged = SchemaValidator().validate(_payload(shared_field_key="plaintiff_name"))
    clean = SchemaValidator().validate(_payload(shared_field_key="plaintiff:name"))

    assert flagged.is_valid
    assert flagged.warnings == ["Unnamespaced shared_field_key 'plaintiff_name' on field 'plaintiff_name'"]
    assert clean.warnings == []


def test_collaborator_warnings() -> None:
    validator = SchemaValidator(category_lookup=_Categories("fl"), pdf_locator=_Pdfs())

    result = validator.validate(_payload())

    assert result.is_valid
    assert result.warnings == ["PDF file not found: sc100.pdf", "Category 'sc' not found"]


def test_validate_accepts_document_model() -> None:
    document = FormSchemaDocument(
        form_metadata=FormMetadata(code="SC-100", title="SC-100", pdf_filename="sc100.pdf", category="sc"),
        sections={
            "General": [
                NormalizedField(
                    sanitized_name="case_number",
                    label="Case Number",
                    position=1,
                    pdf_field_name="CaseNumber",
                ),
            ],
        },
    )

    validator = SchemaValidator(category_lookup=_Categories("sc"), pdf_locator=_Pdfs("sc100.pdf"))
    result = validator.validate(document)

    assert result.is_valid
    assert result.warnings == []
    assert validator.validate_strict(document) is document


def test_validate_strict_raises_with_errors() -> None:
    with pytest.raises(SchemaValidationError, match="Missing required form key: title") as exc_info:
        SchemaValidator().validate_strict({"form_metadata": {"code": "SC-100"}, "sections": {}})

    assert len(exc_info.value.errors) == 3


def test_describe_report() -> None:
    result = SchemaValidator().validate(_payload(shared_field_key="plaintiff_name"))

    report = result.describe("sc-100.schema.json")

    assert report.splitlines()[0] == "Schema: sc-100.schema.json"
    assert "Warnings:" in report
    assert "Errors:" not in report
