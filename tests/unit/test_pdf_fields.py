from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from formschema.exceptions import PdfScanError
from formschema.pdf_fields import extract_raw_fields, scan_directory, scan_pdf, write_metadata

if TYPE_CHECKING:
    from pathlib import Path


class _FakeWidget:
    def __init__(self, field_name: str, field_type_string: str) -> None:
        self.field_name = field_name
        self.field_type_string = field_type_string


class _FakePage:
    def __init__(self, number: int, widgets: list[_FakeWidget]) -> None:
        self.number = number
        self._widgets = widgets

    def widgets(self) -> list[_FakeWidget]:
        return self._widgets


class _FakeDoc:
    def __init__(self, pages: list[_FakePage]) -> None:
        self._pages = pages

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        return None

    def __iter__(self):
        return iter(self._pages)

    def __len__(self) -> int:
        return len(self._pages)


class _FakeFitzModule:
    @staticmethod
    def open(path: Path) -> _FakeDoc:
        if path.name == "broken.pdf":
            raise RuntimeError("cannot open")
        return _FakeDoc(
            [
                _FakePage(
                    0,
                    [
                        _FakeWidget("SC-100[0].Page1[0].PlaintiffName[0]", "Text"),
                        _FakeWidget("SC-100[0].Page1[0].CheckBox1[0]", "CheckBox"),
                        _FakeWidget("SC-100[0].Page1[0].Choice[0]", "RadioButton"),
                    ],
                ),
                _FakePage(
                    1,
                    [
                        _FakeWidget("SC-100[0].Page1[0].Choice[0]", "RadioButton"),
                        _FakeWidget("SC-100[0].Page2[0].PlaintiffSSN[0]", "Text"),
                        _FakeWidget("SC-100[0].Page2[0].Print[0]", "Button"),
                    ],
                ),
            ],
        )


@pytest.fixture
def fake_fitz(monkeypatch) -> None:
    monkeypatch.setattr("formschema.pdf_fields.fitz", _FakeFitzModule)


def test_extract_raw_fields_dedupes_and_maps_widget_types(fake_fitz, tmp_path: Path) -> None:
    pdf = tmp_path / "sc100.pdf"
    pdf.write_bytes(b"pdf")

    descriptors = extract_raw_fields(pdf)

    assert [(d.raw_name.split(".")[-1], d.pdf_reported_type, d.page_number) for d in descriptors] == [
        ("PlaintiffName[0]", "text", 1),
        ("CheckBox1[0]", "checkbox", 1),
        ("Choice[0]", "choice", 1),
        ("PlaintiffSSN[0]", "text", 2),
        ("Print[0]", "button", 2),
    ]


def test_extract_raw_fields_requires_pymupdf(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr("formschema.pdf_fields.fitz", None)

    with pytest.raises(PdfScanError, match="PyMuPDF is required"):
        extract_raw_fields(tmp_path / "sc100.pdf")


def test_scan_pdf_builds_metadata_record(fake_fitz, tmp_path: Path) -> None:
    pdf = tmp_path / "sc100.pdf"
    pdf.write_bytes(b"pdf-bytes")

    record = scan_pdf(pdf)

    assert record.form_number == "SC-100"
    assert record.category_prefix == "SC"
    assert record.is_fillable is True
    assert record.num_pages == 2
    assert record.total_fields == 5
    assert record.file_size == len(b"pdf-bytes")
    assert record.field_types == {"text": 2, "checkbox": 1, "choice": 1, "button": 1}
    assert record.pii_fields == ["SC-100[0].Page2[0].PlaintiffSSN[0]"]


def test_scan_directory_skips_unreadable_pdfs_and_writes_metadata(fake_fitz, tmp_path: Path) -> None:
    pdf_dir = tmp_path / "pdfs"
    pdf_dir.mkdir()
    (pdf_dir / "sc100.pdf").write_bytes(b"pdf")
    (pdf_dir / "broken.pdf").write_bytes(b"pdf")

    records = scan_directory(pdf_dir)
    output = write_metadata(records, tmp_path / "out" / "analysis.json")

    assert [record.filename for record in records] == ["sc100.pdf"]
    payload = json.loads(output.read_text(encoding="utf-8"))
    assert payload["forms"][0]["form_number"] == "SC-100"
