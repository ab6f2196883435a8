from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from formschema.exceptions import MetadataSourceError
from formschema.metadata import MetadataParser, normalize_form_number, raw_fields_for
from formschema.processing.classifier import FieldTypeClassifier

if TYPE_CHECKING:
    from pathlib import Path


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("sc100.pdf", "SC-100"),
        ("SC-100", "SC-100"),
        ("fl110info.pdf", "FL-110-INFO"),
        ("sc100a.pdf", "SC-100A"),
        ("dv_100", "DV-100"),
        ("custom", "CUSTOM"),
    ],
)
def test_normalize_form_number(value: str, expected: str) -> None:
    assert normalize_form_number(value) == expected


def _write(tmp_path: Path, payload: object) -> Path:
    path = tmp_path / "analysis.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_parse_list_payload(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        [
            {
                "filename": "sc100.pdf",
                "is_fillable": True,
                "num_pages": 6,
                "field_names": ["PlaintiffName", "CheckBox1"],
                "field_types": {"text": 1, "checkbox": 1},
                "file_size": 1024,
            },
        ],
    )

    records = MetadataParser(path).parse()

    assert len(records) == 1
    record = records[0]
    assert record.form_number == "SC-100"
    assert record.category_prefix == "SC"
    assert record.total_fields == 2
    assert record.field_types == {"text": 1, "checkbox": 1}


def test_parse_object_payload_and_skip_malformed_entries(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        {
            "forms": [
                "not-an-object",
                {"form_number": "FL-100", "filename": "fl100.pdf", "field_names": "bogus"},
                {"filename": "dv100.pdf", "num_pages": "many"},
            ],
        },
    )

    records = MetadataParser(path).parse()

    assert [record.form_number for record in records] == ["FL-100"]
    assert records[0].field_names == []


def test_parse_is_memoized(tmp_path: Path) -> None:
    path = _write(tmp_path, [{"filename": "sc100.pdf"}])
    parser = MetadataParser(path)

    first = parser.parse()
    path.write_text("[]", encoding="utf-8")

    assert parser.parse() is first


@pytest.mark.parametrize("content", ["{not json", '"a string"', '{"other": []}'])
def test_parse_raises_on_bad_top_level(tmp_path: Path, content: str) -> None:
    path = tmp_path / "analysis.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(MetadataSourceError):
        MetadataParser(path).parse()


def test_parse_raises_on_missing_file(tmp_path: Path) -> None:
    with pytest.raises(MetadataSourceError, match="Cannot read metadata"):
        MetadataParser(tmp_path / "missing.json").parse()


def test_summary(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        [
            {"filename": "sc100.pdf", "is_fillable": True, "total_fields": 10},
            {"filename": "sc104.pdf", "is_fillable": False},
            {"filename": "fl100.pdf", "is_fillable": True, "total_fields": 5},
        ],
    )

    summary = MetadataParser(path).summary()

    assert summary.total_forms == 3
    assert summary.fillable_forms == 2
    assert summary.total_fields == 15
    assert summary.forms_by_category == {"SC": 2, "FL": 1}


def test_raw_fields_for_uses_type_hint(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        [{"filename": "sc100.pdf", "field_names": ["CheckBox1", "Name"], "field_types": {"checkbox": 1}}],
    )
    record = MetadataParser(path).parse()[0]

    descriptors = raw_fields_for(record, type_hint=FieldTypeClassifier().hint_from_field_types)

    assert [(d.raw_name, d.pdf_reported_type) for d in descriptors] == [("CheckBox1", "checkbox"), ("Name", None)]
