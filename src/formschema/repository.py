"""Form repositories: in-memory and JSON catalog file."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from pydantic import ValidationError

from formschema.exceptions import DuplicateRecordError, PersistenceError
from formschema.logging import get_logger
from formschema.typing.models import CategoryDefinition, FieldRecord, FormRecord

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

logger = get_logger(__name__)

_CATALOG_FILE_VERSION = 1


class InMemoryFormRepository:
    """Dictionary-backed `FormRepository`; records are copied on the way in and out."""

    def __init__(self) -> None:
        """Initialize empty storage."""
        self._categories: dict[str, CategoryDefinition] = {}
        self._forms: dict[str, FormRecord] = {}
        self._fields: dict[tuple[str, str], FieldRecord] = {}

    def get_category(self, slug: str) -> CategoryDefinition | None:
        """Return a stored category by slug."""
        return self._categories.get(slug.lower())

    def create_category(self, category: CategoryDefinition) -> CategoryDefinition:
        """Create a category.

        Args:
            category (CategoryDefinition): Category to store.

        Raises:
            DuplicateRecordError: If the slug already exists.

        Returns:
            CategoryDefinition: Stored category.
        """
        if category.slug in self._categories:
            raise DuplicateRecordError(message="Category already exists", key=category.slug)
        self._categories[category.slug] = category
        return category

    def list_categories(self) -> list[CategoryDefinition]:
        """Return stored categories ordered by position."""
        return sorted(self._categories.values(), key=lambda category: category.position)

    def find_form(self, code: str) -> FormRecord | None:
        """Return a stored form by code."""
        record = self._forms.get(code)
        return record.model_copy(deep=True) if record else None

    def upsert_form(self, record: FormRecord) -> FormRecord:
        """Create or overwrite a form matched by code."""
        self._forms[record.code] = record.model_copy(deep=True)
        return record

    def list_forms(self) -> list[FormRecord]:
        """Return stored forms ordered by sort key then code."""
        forms = sorted(self._forms.values(), key=lambda form: (form.sort_key, form.code))
        return [form.model_copy(deep=True) for form in forms]

    def find_field(self, form_code: str, name: str) -> FieldRecord | None:
        """Return a stored field by form code and name."""
        record = self._fields.get((form_code, name))
        return record.model_copy(deep=True) if record else None

    def upsert_field(self, record: FieldRecord) -> FieldRecord:
        """Create or overwrite a field matched by form code and name.

        Raises:
            PersistenceError: If the field's form does not exist.
        """
        if record.form_code not in self._forms:
            raise PersistenceError(message=f"Unknown form for field '{record.name}': {record.form_code}")
        self._fields[(record.form_code, record.name)] = record.model_copy(deep=True)
        return record

    def list_fields(self, form_code: str) -> list[FieldRecord]:
        """Return the fields of a form ordered by position."""
        fields = [field for (code, _), field in self._fields.items() if code == form_code]
        return [field.model_copy(deep=True) for field in sorted(fields, key=lambda field: field.position)]

    def delete_fields(self, form_code: str, names: Iterable[str]) -> int:
        """Delete fields of a form by name.

        Returns:
            int: Number of removed fields.
        """
        removed = 0
        for name in names:
            if self._fields.pop((form_code, name), None) is not None:
                removed += 1
        return removed

    def delete_form(self, code: str) -> bool:
        """Delete a form and all of its fields.

        Returns:
            bool: True when the form existed.
        """
        for key in [key for key in self._fields if key[0] == code]:
            del self._fields[key]
        return self._forms.pop(code, None) is not None

    def commit(self) -> None:
        """No-op; writes are immediately visible."""


class JsonCatalogRepository(InMemoryFormRepository):
    """Repository persisted as one JSON catalog file on `commit()`."""

    def __init__(self, path: Path) -> None:
        """Initialize repository, loading the catalog file when present.

        Args:
            path (Path): Catalog JSON file.
        """
        super().__init__()
        self.path = path
        if path.exists():
            self._load()

    def commit(self) -> None:
        """Write the catalog file."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        envelope = {
            "catalog_file_version": _CATALOG_FILE_VERSION,
            "categories": [category.model_dump(mode="json") for category in self.list_categories()],
            "forms": [form.model_dump(mode="json") for form in self.list_forms()],
            "fields": [field.model_dump(mode="json") for field in self._fields.values()],
        }
        self.path.write_text(json.dumps(envelope, indent=2, sort_keys=True), encoding="utf-8")
        logger.info(
            "Catalog saved",
            extra={"catalog_path": str(self.path), "forms": len(self._forms), "fields": len(self._fields)},
        )

    def _load(self) -> None:
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
            for item in payload.get("categories", []):
                category = CategoryDefinition.model_validate(item)
                self._categories[category.slug] = category
            for item in payload.get("forms", []):
                form = FormRecord.model_validate(item)
                self._forms[form.code] = form
            for item in payload.get("fields", []):
                field = FieldRecord.model_validate(item)
                self._fields[(field.form_code, field.name)] = field
        except (OSError, AttributeError, json.JSONDecodeError, ValidationError) as exc:
            raise PersistenceError(message=f"Cannot load catalog {self.path}: {exc}") from exc
