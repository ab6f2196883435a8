"""Collaborator interfaces consumed by the pipeline."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Iterable

    from formschema.typing.models import CategoryDefinition, FieldRecord, FormRecord, MetadataRecord


class CategoryLookup(Protocol):
    """Category existence and prefix resolution."""

    def category_exists(self, slug: str) -> bool:
        """Return whether a category slug is known.

        Args:
            slug: Category slug.

        Returns:
            bool: True when the category exists.
        """

    def category_for_prefix(self, prefix: str | None) -> str | None:
        """Return the category slug for a form-number prefix.

        Args:
            prefix: Form-number prefix such as `SC`.

        Returns:
            str | None: Category slug, or None when unknown.
        """


class PdfLocator(Protocol):
    """File existence check for referenced PDF templates."""

    def pdf_exists(self, pdf_filename: str) -> bool:
        """Return whether the PDF template is available.

        Args:
            pdf_filename: PDF file name referenced by a schema.

        Returns:
            bool: True when the file exists.
        """


class FormRepository(Protocol):
    """Persistence layer for categories, forms and fields."""

    def get_category(self, slug: str) -> CategoryDefinition | None:
        """Return a stored category by slug."""

    def create_category(self, category: CategoryDefinition) -> CategoryDefinition:
        """Create a category; raise `DuplicateRecordError` when the slug exists."""

    def find_form(self, code: str) -> FormRecord | None:
        """Return a stored form by code."""

    def upsert_form(self, record: FormRecord) -> FormRecord:
        """Create or overwrite a form matched by code."""

    def find_field(self, form_code: str, name: str) -> FieldRecord | None:
        """Return a stored field by form code and sanitized name."""

    def upsert_field(self, record: FieldRecord) -> FieldRecord:
        """Create or overwrite a field matched by form code and name."""

    def list_fields(self, form_code: str) -> list[FieldRecord]:
        """Return fields of a form ordered by position."""

    def delete_fields(self, form_code: str, names: Iterable[str]) -> int:
        """Delete fields of a form by name and return the number removed."""

    def delete_form(self, code: str) -> bool:
        """Delete a form and its fields; return whether the form existed."""

    def commit(self) -> None:
        """Make pending writes durable."""


class MetadataSource(Protocol):
    """Source of per-form PDF analysis records."""

    def parse(self) -> list[MetadataRecord]:
        """Return form records; raise `MetadataSourceError` when unreadable."""
