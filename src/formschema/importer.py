"""Bulk import of PDF analysis metadata into the form repository."""

from __future__ import annotations

import re
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from formschema.categories import GENERAL_CATEGORY, CategoryCatalog
from formschema.exceptions import DuplicateRecordError, PackageError, PersistenceError, SchemaValidationError
from formschema.logging import bound_form_context, get_logger
from formschema.metadata import raw_fields_for
from formschema.processing.normalizer import FormSchemaNormalizer
from formschema.processing.validator import SchemaValidator
from formschema.typing.enums import FormOutcome
from formschema.typing.models import (
    FieldRecord,
    FormMetadata,
    FormRecord,
    FormSchemaDocument,
    FormSortKey,
    ImportOptions,
    ImportRunStats,
    MetadataRecord,
    NormalizedField,
)

if TYPE_CHECKING:
    from formschema.pdf_templates import TemplateCopier
    from formschema.typing.protocol import FormRepository, MetadataSource

logger = get_logger(__name__)

_NUMBER = re.compile(r"\d+")


class FormDocumentBuilder:
    """Assemble form metadata, schema documents and persisted form rows from metadata records."""

    def __init__(
        self,
        *,
        catalog: CategoryCatalog | None = None,
        normalizer: FormSchemaNormalizer | None = None,
    ) -> None:
        """Initialize builder.

        Args:
            catalog (CategoryCatalog | None): Category table.
            normalizer (FormSchemaNormalizer | None): Field normalizer.
        """
        self.catalog = catalog or CategoryCatalog()
        self.normalizer = normalizer or FormSchemaNormalizer()

    def build_document(self, record: MetadataRecord, fields: list[NormalizedField]) -> FormSchemaDocument:
        """Assemble the schema document of one metadata record.

        Args:
            record (MetadataRecord): Form metadata.
            fields (list[NormalizedField]): Normalized fields.

        Returns:
            FormSchemaDocument: Document ready for validation.
        """
        metadata = FormMetadata(
            code=record.form_number,
            title=record.form_number,
            pdf_filename=record.filename,
            category=self._category_slug(record),
            description=self.describe(record),
            fillable=record.is_fillable,
            page_count=record.num_pages or None,
        )
        return self.normalizer.build_document(metadata, fields)

    def describe(self, record: MetadataRecord) -> str | None:
        """Generate a form description from its category and counts.

        Args:
            record (MetadataRecord): Form metadata.

        Returns:
            str | None: Description such as `California Small Claims form, 4 pages, 12 fields, (fillable)`.
        """
        parts: list[str] = []
        category_name = self.catalog.category_name(record.category_prefix)
        if category_name:
            parts.append(f"California {category_name} form")
        if record.num_pages > 0:
            parts.append(f"{record.num_pages} page{'s' if record.num_pages != 1 else ''}")
        if record.total_fields > 0:
            parts.append(f"{record.total_fields} field{'s' if record.total_fields != 1 else ''}")
        if record.is_fillable:
            parts.append("(fillable)")
        return ", ".join(parts) or None

    def sort_key(self, record: MetadataRecord) -> FormSortKey:
        """Return the cross-category ordering key of a form.

        Args:
            record (MetadataRecord): Form metadata.

        Returns:
            FormSortKey: Category position then the form's first number.
        """
        match = _NUMBER.search(record.form_number)
        return FormSortKey(
            category_position=self.catalog.position_for_prefix(record.category_prefix),
            form_number=int(match.group()) if match else 0,
        )

    def _category_slug(self, record: MetadataRecord) -> str:
        slug = self.catalog.category_for_prefix(record.category_prefix)
        if slug:
            return slug
        return record.category_prefix.lower() if record.category_prefix else GENERAL_CATEGORY

    def form_record(self, record: MetadataRecord, document: FormSchemaDocument) -> FormRecord:
        """Build the persisted form row of a validated document."""
        metadata = document.form_metadata
        return FormRecord(
            code=metadata.code,
            title=metadata.title,
            pdf_filename=metadata.pdf_filename,
            description=metadata.description,
            category_slug=self.catalog.category_for_prefix(record.category_prefix),
            category_prefix=record.category_prefix,
            fillable=record.is_fillable,
            page_count=metadata.page_count,
            sort_key=self.sort_key(record),
            active=True,
            metadata={
                "file_size": record.file_size,
                "total_fields": record.total_fields,
                "pii_fields": record.pii_fields,
                "source_path": record.source_path,
                "imported_at": datetime.now(UTC).isoformat(),
            },
        )

    @staticmethod
    def field_record(form_code: str, field: NormalizedField) -> FieldRecord:
        """Build the persisted field row of a normalized field."""
        return FieldRecord(
            form_code=form_code,
            name=field.sanitized_name,
            pdf_field_name=field.pdf_field_name,
            field_type=field.field_type,
            label=field.label,
            section=field.section,
            shared_field_key=field.shared_field_key,
            position=field.position,
            page_number=field.page_number,
        )


class BulkImportCoordinator:
    """Run the normalization pipeline over a metadata source and upsert the results.

    Forms are processed sequentially. A failure on one form is recorded in
    the run stats and the run continues; only an unreadable metadata source
    or a failing category setup aborts the run.
    """

    def __init__(
        self,
        metadata_source: MetadataSource,
        repository: FormRepository,
        *,
        options: ImportOptions | None = None,
        catalog: CategoryCatalog | None = None,
        normalizer: FormSchemaNormalizer | None = None,
        validator: SchemaValidator | None = None,
        template_copier: TemplateCopier | None = None,
    ) -> None:
        """Initialize coordinator.

        Args:
            metadata_source (MetadataSource): Per-form analysis records.
            repository (FormRepository): Persistence layer.
            options (ImportOptions | None): Run options.
            catalog (CategoryCatalog | None): Category table.
            normalizer (FormSchemaNormalizer | None): Field normalizer.
            validator (SchemaValidator | None): Document validator.
            template_copier (TemplateCopier | None): PDF template copier; PDFs are not copied without one.
        """
        self.metadata_source = metadata_source
        self.repository = repository
        self.options = options or ImportOptions()
        self.catalog = catalog or CategoryCatalog()
        self.normalizer = normalizer or FormSchemaNormalizer()
        self.documents = FormDocumentBuilder(catalog=self.catalog, normalizer=self.normalizer)
        self.validator = validator or SchemaValidator(category_lookup=self.catalog)
        self.template_copier = template_copier
        self.stats = ImportRunStats()

    def run(self) -> ImportRunStats:
        """Import every form of the metadata source.

        Raises:
            MetadataSourceError: If the metadata source cannot be read.
            PersistenceError: If categories cannot be set up or the commit fails.

        Returns:
            ImportRunStats: Counters and per-form errors of the run.
        """
        self.stats = ImportRunStats()
        mode = "dry_run" if self.options.dry_run else "live"
        logger.info("Import started", extra={"mode": mode, "options": self.options.model_dump()})

        records = self.metadata_source.parse()
        self._ensure_categories()
        records = self._apply_category_filter(records)

        total = len(records)
        for index, record in enumerate(records, start=1):
            self._import_form(record)
            if index % self.options.batch_size == 0:
                logger.info("Import progress", extra={"processed": index, "total": total})

        if self.options.skip_pdfs or self.options.dry_run:
            logger.info("Skipping PDF template copy", extra={"mode": mode})
        else:
            self._copy_pdf_templates(records)

        if self.options.dry_run:
            logger.info("Dry run, discarding all changes")
        else:
            self.repository.commit()

        self._log_summary()
        return self.stats

    def _ensure_categories(self) -> None:
        count = 0
        for category in self.catalog.definitions():
            if not self.options.dry_run and self.repository.get_category(category.slug) is None:
                try:
                    self.repository.create_category(category)
                except DuplicateRecordError:
                    if self.repository.get_category(category.slug) is None:
                        raise PersistenceError(
                            message=f"Category vanished after duplicate create: {category.slug}",
                        ) from None
                    logger.debug("Category created concurrently", extra={"category": category.slug})
            count += 1
        self.stats.categories = count
        logger.info("Categories verified", extra={"categories": count})

    def _apply_category_filter(self, records: list[MetadataRecord]) -> list[MetadataRecord]:
        if not self.options.category_filter:
            return records
        prefix = self.options.category_filter.upper()
        filtered = [record for record in records if record.category_prefix == prefix]
        logger.info("Forms filtered by category", extra={"prefix": prefix, "forms": len(filtered)})
        return filtered

    def _import_form(self, record: MetadataRecord) -> FormOutcome:
        if not record.form_number:
            self.stats.forms_skipped += 1
            logger.warning("Skipping metadata record without form number", extra={"filename": record.filename})
            return FormOutcome.SKIPPED

        with bound_form_context(record.form_number):
            try:
                outcome = self._upsert_form(record)
            except (PackageError, ValueError) as exc:
                self.stats.forms_failed += 1
                self.stats.record_error(record.form_number, _error_message(exc))
                logger.error("Form import failed", extra={"error": _error_message(exc)})
                return FormOutcome.FAILED

            if outcome is FormOutcome.CREATED:
                self.stats.forms_created += 1
            else:
                self.stats.forms_updated += 1
            if self.options.verbose:
                logger.info("Form imported", extra={"outcome": outcome.to_str()})
            return outcome

    def _upsert_form(self, record: MetadataRecord) -> FormOutcome:
        code = record.form_number
        fields = self._normalize_fields(record)
        document = self.documents.build_document(record, fields)

        result = self.validator.validate(document)
        for warning in result.warnings:
            self.stats.warnings += 1
            logger.warning("Schema warning", extra={"warning": warning})
        if not result.is_valid:
            raise SchemaValidationError(errors=result.errors)

        previous_form = self.repository.find_form(code)
        outcome = FormOutcome.UPDATED if previous_form else FormOutcome.CREATED
        field_records = [self.documents.field_record(code, field) for field in fields]
        created = sum(1 for field in field_records if self.repository.find_field(code, field.name) is None)
        stale = self._stale_field_names(code, field_records) if fields else []

        if not self.options.dry_run:
            previous_fields = self.repository.list_fields(code)
            try:
                self.repository.upsert_form(self.documents.form_record(record, document))
                for field_record in field_records:
                    self.repository.upsert_field(field_record)
                if stale:
                    self.repository.delete_fields(code, stale)
            except (PackageError, ValueError):
                self._restore_form(code, previous_form, previous_fields)
                raise

        self.stats.fields_created += created
        self.stats.fields_updated += len(field_records) - created
        self.stats.fields_pruned += len(stale)
        return outcome

    def _restore_form(self, code: str, form: FormRecord | None, fields: list[FieldRecord]) -> None:
        """Put a form and its fields back to their state before a failed write."""
        self.repository.delete_form(code)
        if form is None:
            return
        self.repository.upsert_form(form)
        for field in fields:
            self.repository.upsert_field(field)
        logger.info("Form restored after failed write", extra={"fields": len(fields)})

    def _normalize_fields(self, record: MetadataRecord) -> list[NormalizedField]:
        if not record.is_fillable or self.options.skip_fields:
            return []
        classifier = self.normalizer.classifier
        raw_fields = raw_fields_for(record, type_hint=classifier.hint_from_field_types)
        return self.normalizer.normalize(record.form_number, raw_fields)

    def _stale_field_names(self, code: str, field_records: list[FieldRecord]) -> list[str]:
        if not self.options.prune_stale_fields:
            return []
        current = {field.name for field in field_records}
        return [field.name for field in self.repository.list_fields(code) if field.name not in current]

    def _copy_pdf_templates(self, records: list[MetadataRecord]) -> None:
        if self.template_copier is None:
            logger.info("No PDF template directory configured, skipping copy")
            return
        copier = self.template_copier
        copier.copy_all([record.filename for record in records if record.filename])
        self.stats.pdfs_copied = copier.copied
        self.stats.pdfs_skipped = copier.skipped
        for error in copier.errors:
            self.stats.record_error(error.filename, f"PDF copy failed: {error.message}")

    def _log_summary(self) -> None:
        stats = self.stats
        logger.info(
            "Import preview" if self.options.dry_run else "Import complete",
            extra=stats.model_dump(exclude={"errors"}) | {"errors": stats.error_count},
        )
        limit = self.options.error_report_limit
        for error in stats.errors[:limit]:
            logger.error("Import error", extra={"context": error.context, "error": error.message})
        if stats.error_count > limit:
            logger.error("Additional import errors omitted", extra={"omitted": stats.error_count - limit})


def format_summary(stats: ImportRunStats, *, dry_run: bool = False, error_limit: int = 10) -> str:
    """Render the human readable summary of an import run.

    Args:
        stats (ImportRunStats): Run stats.
        dry_run (bool): Whether the run was a dry run.
        error_limit (int): Number of errors listed.

    Returns:
        str: Summary text.
    """
    lines = [
        f"Import {'Preview' if dry_run else 'Complete'}",
        f"Categories: {stats.categories}",
        f"Forms processed: {stats.forms_processed}",
        f"Forms created: {stats.forms_created}",
        f"Forms updated: {stats.forms_updated}",
        f"Forms skipped: {stats.forms_skipped}",
        f"Forms failed: {stats.forms_failed}",
        f"Fields created: {stats.fields_created}",
        f"Fields updated: {stats.fields_updated}",
        f"Fields pruned: {stats.fields_pruned}",
        f"PDFs copied: {stats.pdfs_copied}",
        f"PDFs skipped: {stats.pdfs_skipped}",
        f"Warnings: {stats.warnings}",
        f"Errors: {stats.error_count}",
    ]
    if stats.errors:
        shown = stats.errors[:error_limit]
        lines.append(f"First {len(shown)} errors:")
        lines.extend(f"  - {error.context}: {error.message}" for error in shown)
        if stats.error_count > error_limit:
            lines.append(f"  ... and {stats.error_count - error_limit} more")
    return "\n".join(lines)


def _error_message(exc: Exception) -> str:
    if isinstance(exc, PackageError):
        return str(exc)
    return f"{type(exc).__name__}: {exc}"
