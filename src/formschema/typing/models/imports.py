"""Metadata source, persistence and import-run models."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict, Field

from formschema.typing.enums import FieldType


class MetadataRecord(BaseModel):
    """One form entry of the PDF analysis metadata."""

    model_config = ConfigDict(extra="forbid")

    form_number: str
    filename: str
    source_path: str | None = None
    file_size: int = 0
    is_fillable: bool = False
    num_pages: int = 0
    total_fields: int = 0
    field_names: list[str] = Field(default_factory=list)
    field_types: dict[str, int] | None = None
    pii_fields: list[str] = Field(default_factory=list)
    category_prefix: str | None = None


class MetadataSummary(BaseModel):
    """Totals reported by a metadata source."""

    model_config = ConfigDict(extra="forbid")

    total_forms: int
    fillable_forms: int
    total_fields: int
    forms_by_category: dict[str, int] = Field(default_factory=dict)


class CategoryDefinition(BaseModel):
    """Form category keyed by Judicial Council prefix."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    prefix: str
    name: str
    description: str
    position: int
    active: bool = True

    @property
    def slug(self) -> str:
        """Return the category slug."""
        return self.prefix.lower()


class FormSortKey(NamedTuple):
    """Cross-category ordering key for forms."""

    category_position: int
    form_number: int


class FormRecord(BaseModel):
    """Persisted form definition."""

    model_config = ConfigDict(extra="forbid")

    code: str
    title: str
    pdf_filename: str
    description: str | None = None
    category_slug: str | None = None
    category_prefix: str | None = None
    fillable: bool = False
    page_count: int | None = None
    sort_key: FormSortKey = FormSortKey(999, 0)
    active: bool = True
    metadata: dict[str, Any] = Field(default_factory=dict)


class FieldRecord(BaseModel):
    """Persisted field definition, unique by form code and name."""

    model_config = ConfigDict(extra="forbid")

    form_code: str
    name: str
    pdf_field_name: str
    field_type: FieldType
    label: str
    section: str | None = None
    shared_field_key: str | None = None
    position: int
    page_number: int | None = None
    required: bool = False


class ImportOptions(BaseModel):
    """Options for one bulk import run."""

    model_config = ConfigDict(extra="forbid")

    dry_run: bool = False
    skip_pdfs: bool = False
    skip_fields: bool = False
    category_filter: str | None = None
    batch_size: int = Field(default=100, ge=1)
    verbose: bool = False
    prune_stale_fields: bool = False
    error_report_limit: int = Field(default=10, ge=1)


class ImportErrorRecord(BaseModel):
    """Failure recorded for one form (or field) during a run."""

    model_config = ConfigDict(extra="forbid")

    context: str
    message: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))


class ImportRunStats(BaseModel):
    """Counters and errors accumulated over one import run."""

    model_config = ConfigDict(extra="forbid")

    categories: int = 0
    forms_created: int = 0
    forms_updated: int = 0
    forms_skipped: int = 0
    forms_failed: int = 0
    fields_created: int = 0
    fields_updated: int = 0
    fields_pruned: int = 0
    pdfs_copied: int = 0
    pdfs_skipped: int = 0
    warnings: int = 0
    errors: list[ImportErrorRecord] = Field(default_factory=list)

    @property
    def forms_processed(self) -> int:
        """Return the number of forms that reached a final state."""
        return self.forms_created + self.forms_updated + self.forms_skipped + self.forms_failed

    @property
    def error_count(self) -> int:
        """Return the number of recorded errors."""
        return len(self.errors)

    def record_error(self, context: str, message: str) -> ImportErrorRecord:
        """Append an error record.

        Args:
            context (str): Form code or field reference.
            message (str): Error message.

        Returns:
            ImportErrorRecord: Recorded entry.
        """
        entry = ImportErrorRecord(context=context, message=message)
        self.errors.append(entry)
        return entry
