"""Filesystem store of form schema documents."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import TYPE_CHECKING, cast

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from formschema import logger
from formschema.exceptions import SchemaStoreError
from formschema.typing.models import FormSchemaDocument, ValidationResult

if TYPE_CHECKING:
    from formschema.processing.validator import SchemaValidator

_SCHEMA_FILE_VERSION = 2
_LEGACY_FIELD_KEYS = {"name": "sanitized_name", "type": "field_type", "shared_key": "shared_field_key"}


class SchemaStore(BaseModel):
    """Directory of `<code>.schema.json` files."""

    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    root: Path = Field(description="Schema directory root.")

    def model_post_init(self, __context: object, /) -> None:
        """Ensure the schema directory exists after model initialization.

        Args:
            __context (object): Pydantic model context.
        """
        self.root.mkdir(parents=True, exist_ok=True)

    def schema_path(self, code: str) -> Path:
        """Build the schema file path of a form.

        Args:
            code (str): Form code.

        Returns:
            Path: Schema file path.
        """
        safe_name = re.sub(r"[^a-z0-9._-]+", "-", code.lower()).strip("-")
        if not safe_name:
            safe_name = "schema"
        return self.root / f"{safe_name}.schema.json"

    @staticmethod
    def load_payload(path: Path) -> dict[str, object]:
        """Load the plain document payload of a schema file.

        Args:
            path (Path): Schema file path.

        Raises:
            SchemaStoreError: If the file is unreadable or not a JSON object.

        Returns:
            dict[str, object]: Migrated document payload.
        """
        _validate_schema_file_path(path)
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise SchemaStoreError(message=f"Cannot read schema {path}: {exc}") from exc
        return _migrate_schema_payload(payload, default_code=path.name.removesuffix(".schema.json").upper())

    @classmethod
    def load(cls, path: Path) -> FormSchemaDocument:
        """Load a schema document.

        Args:
            path (Path): Schema file path.

        Raises:
            SchemaStoreError: If the payload does not match the document model.

        Returns:
            FormSchemaDocument: Loaded document.
        """
        payload = cls.load_payload(path)
        try:
            return FormSchemaDocument.model_validate(payload)
        except ValidationError as exc:
            raise SchemaStoreError(message=f"Invalid schema document {path}: {exc}") from exc

    def save(self, document: FormSchemaDocument) -> Path:
        """Persist a schema document.

        Args:
            document (FormSchemaDocument): Document to write.

        Returns:
            Path: Written file path.
        """
        path = self.schema_path(document.form_metadata.code)
        envelope = {
            "schema_file_version": _SCHEMA_FILE_VERSION,
            "schema": document.to_payload(),
        }
        path.write_text(json.dumps(envelope, indent=2), encoding="utf-8")
        logger.info("Schema saved", extra={"schema_path": str(path), "fields": document.field_count})
        return path

    def list_schemas(self) -> list[Path]:
        """List stored schema files.

        Returns:
            list[Path]: Schema files.
        """
        return sorted(self.root.glob("*.schema.json"))

    def validate_all(self, validator: SchemaValidator) -> dict[str, list[tuple[Path, ValidationResult]]]:
        """Validate every stored schema.

        Unreadable files are reported as invalid rather than raised.

        Args:
            validator (SchemaValidator): Validator to apply.

        Returns:
            dict[str, list[tuple[Path, ValidationResult]]]: `valid` (clean),
            `invalid` (with errors) and `warnings` (valid, with warnings).
        """
        report: dict[str, list[tuple[Path, ValidationResult]]] = {"valid": [], "invalid": [], "warnings": []}
        for path in self.list_schemas():
            try:
                result = validator.validate(self.load_payload(path))
            except SchemaStoreError as exc:
                result = ValidationResult(errors=[str(exc)])

            if not result.is_valid:
                report["invalid"].append((path, result))
            elif result.warnings:
                report["warnings"].append((path, result))
            else:
                report["valid"].append((path, result))

        logger.info(
            "Schemas validated",
            extra={key: len(entries) for key, entries in report.items()},
        )
        return report


def _migrate_schema_payload(payload: object, *, default_code: str) -> dict[str, object]:
    """Migrate schema payload from file format versions to current document format.

    Version 1 files hold `{"form": {...}, "sections": {key: {"fields": [...]}}}`
    with `name`/`type`/`shared_key` field keys.

    Args:
        payload (object): Raw JSON payload.
        default_code (str): Form code used when the payload has none.

    Raises:
        SchemaStoreError: If payload is not a JSON object.

    Returns:
        dict[str, object]: Migrated document payload.
    """
    if not isinstance(payload, dict):
        raise SchemaStoreError(message="Schema payload must be a JSON object")

    payload_obj = cast("dict[str, object]", payload)
    embedded_schema = payload_obj.get("schema")
    if isinstance(embedded_schema, dict):
        payload_obj = cast("dict[str, object]", embedded_schema)

    migrated = dict(payload_obj)
    legacy_form = migrated.pop("form", None)
    if "form_metadata" not in migrated and isinstance(legacy_form, dict):
        form_metadata = dict(legacy_form)
        form_metadata.setdefault("code", default_code)
        migrated["form_metadata"] = form_metadata

    sections = migrated.get("sections")
    if isinstance(sections, dict):
        migrated["sections"] = {
            _section_title(key, value): _migrate_fields(value) for key, value in sections.items()
        }
    return migrated


def _section_title(key: object, value: object) -> str:
    if isinstance(value, dict) and isinstance(value.get("title"), str):
        return value["title"]
    return str(key)


def _migrate_fields(section: object) -> object:
    if not isinstance(section, dict):
        return section
    fields = section.get("fields")
    if not isinstance(fields, list):
        return fields
    migrated: list[object] = []
    for position, field in enumerate(fields, start=1):
        if not isinstance(field, dict):
            migrated.append(field)
            continue
        renamed = {_LEGACY_FIELD_KEYS.get(key, key): value for key, value in field.items()}
        renamed.setdefault("position", position)
        renamed.setdefault("pdf_field_name", renamed.get("sanitized_name", ""))
        migrated.append(renamed)
    return migrated


def _validate_schema_file_path(path: Path) -> None:
    """Validate schema file path before loading.

    Args:
        path (Path): Schema file path.

    Raises:
        SchemaStoreError: If path is not a `pathlib.Path` or not a readable schema JSON file.
    """
    if not isinstance(path, Path):
        raise SchemaStoreError(message=f"Schema path must be a pathlib.Path instance, got: {type(path)!r}")
    if not path.is_file():
        raise SchemaStoreError(message=f"Schema path is not a file: {path}")
    if not path.name.endswith(".schema.json"):
        raise SchemaStoreError(message=f"Schema path must end with '.schema.json': {path}")
