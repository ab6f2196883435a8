from __future__ import annotations

import pytest

from formschema.processing.sanitizer import FieldNameSanitizer, to_snake_case


@pytest.fixture
def sanitizer() -> FieldNameSanitizer:
    return FieldNameSanitizer()


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("PlaintiffName", "plaintiff_name"),
        ("plaintiffName", "plaintiff_name"),
        ("UserSSN", "user_ssn"),
        ("SSNNumber", "ssn_number"),
        ("Phone_Number", "phone_number"),
        ("Fee-Due", "fee_due"),
    ],
)
def test_to_snake_case(raw: str, expected: str) -> None:
    assert to_snake_case(raw) == expected


def test_sanitize_takes_leaf_and_strips_indices(sanitizer: FieldNameSanitizer) -> None:
    assert sanitizer.sanitize("FL-100[0].Page1[0].PetitionerName[0]") == "petitioner_name"
    assert sanitizer.sanitize("DV-140[0].Page1[0].Name[0]") == "name"


def test_sanitize_drops_trailing_number_unless_all_digits(sanitizer: FieldNameSanitizer) -> None:
    assert sanitizer.sanitize("fill_text_123") == "fill_text"
    assert sanitizer.sanitize("CheckBox12") == "check_box"
    assert sanitizer.sanitize("SC-100[0].Page2[0].42[0]") == "42"


def test_sanitize_empty_input(sanitizer: FieldNameSanitizer) -> None:
    assert sanitizer.sanitize("") == ""
    assert sanitizer.sanitize("[0]") == ""


def test_extract_section_skips_form_id_and_page_markers(sanitizer: FieldNameSanitizer) -> None:
    assert sanitizer.extract_section("FL-100[0].Page1[0].PetitionerName[0]") is None
    assert sanitizer.extract_section("FL-100[0].Page1[0].PartyInfo[0].Name[0]") == "Party Info"
    assert sanitizer.extract_section("PlaintiffName") is None


def test_extract_section_ignores_xfa_markers(sanitizer: FieldNameSanitizer) -> None:
    raw = "SC-100[0].#subform[0].CaseInfo[0].#area[0].CaseNumber[0]"
    assert sanitizer.extract_section(raw) == "Case Info"


def test_humanize_label(sanitizer: FieldNameSanitizer) -> None:
    assert sanitizer.humanize_label("DV-140[0].Page1[0].Name[0]") == "Name"
    assert sanitizer.humanize_label("PlaintiffName") == "Plaintiff Name"
    assert sanitizer.humanize_label("fill_text_123") == "Fill Text"


def test_flatten_keeps_meaningful_ancestors(sanitizer: FieldNameSanitizer) -> None:
    assert sanitizer.flatten("SC-100[0].Page1[0].Plaintiff[0].Name[0]") == "plaintiff_name"
    assert sanitizer.flatten("Name") == "name"
    assert sanitizer.flatten("") == ""
