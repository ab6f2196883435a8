from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from formschema.exceptions import SchemaStoreError
from formschema.processing.validator import SchemaValidator
from formschema.schema_store import SchemaStore
from formschema.typing.enums import FieldType
from formschema.typing.models import FormMetadata, FormSchemaDocument, NormalizedField

if TYPE_CHECKING:
    from pathlib import Path


def _document(code: str = "SC-100") -> FormSchemaDocument:
    return FormSchemaDocument(
        form_metadata=FormMetadata(code=code, title=code, pdf_filename="sc100.pdf", category="sc"),
        sections={
            "Plaintiff": [
                NormalizedField(
                    sanitized_name="plaintiff_name",
                    label="Plaintiff Name",
                    shared_field_key="plaintiff:name",
                    position=1,
                    pdf_field_name="PlaintiffName",
                ),
            ],
        },
    )


def test_save_load_and_list(tmp_path: Path) -> None:
    store = SchemaStore(root=tmp_path / "schemas")

    path = store.save(_document())
    loaded = store.load(path)

    assert path.name == "sc-100.schema.json"
    assert loaded == _document()
    assert store.list_schemas() == [path]


def test_save_uses_versioned_envelope(tmp_path: Path) -> None:
    store = SchemaStore(root=tmp_path)

    payload = json.loads(store.save(_document()).read_text(encoding="utf-8"))

    assert payload["schema_file_version"] == 2
    assert payload["schema"]["form_metadata"]["code"] == "SC-100"


def test_load_migrates_legacy_layout(tmp_path: Path) -> None:
    legacy = {
        "form": {"title": "Plaintiff's Claim", "pdf_filename": "sc100.pdf", "category": "sc"},
        "sections": {
            "info": {
                "title": "Plaintiff Info",
                "fields": [{"name": "plaintiff_name", "type": "text", "label": "Name", "shared_key": "plaintiff:name"}],
            },
        },
    }
    path = tmp_path / "sc-100.schema.json"
    path.write_text(json.dumps(legacy), encoding="utf-8")

    loaded = SchemaStore(root=tmp_path).load(path)

    assert loaded.form_metadata.code == "SC-100"
    field = loaded.sections["Plaintiff Info"][0]
    assert field.sanitized_name == "plaintiff_name"
    assert field.field_type == FieldType.TEXT
    assert field.shared_field_key == "plaintiff:name"
    assert field.position == 1


def test_load_rejects_bad_paths(tmp_path: Path) -> None:
    other = tmp_path / "schema.json"
    other.write_text("{}", encoding="utf-8")

    with pytest.raises(SchemaStoreError, match="must end with"):
        SchemaStore.load(other)
    with pytest.raises(SchemaStoreError, match="not a file"):
        SchemaStore.load(tmp_path / "missing.schema.json")


def test_validate_all_buckets_schemas(tmp_path: Path) -> None:
    store = SchemaStore(root=tmp_path)
    store.save(_document("SC-100"))
    (tmp_path / "fl-100.schema.json").write_text(
        json.dumps({"form_metadata": {"code": "FL-100"}, "sections": {}}),
        encoding="utf-8",
    )
    (tmp_path / "dv-100.schema.json").write_text("[]", encoding="utf-8")
    warning_document = _document("SC-104")
    warning_document.sections["Plaintiff"][0].shared_field_key = "plaintiff_name"
    store.save(warning_document)

    report = store.validate_all(SchemaValidator())

    assert [path.name for path, _ in report["valid"]] == ["sc-100.schema.json"]
    assert [path.name for path, _ in report["warnings"]] == ["sc-104.schema.json"]
    assert sorted(path.name for path, _ in report["invalid"]) == ["dv-100.schema.json", "fl-100.schema.json"]
