"""CLI entry point for FormSchema."""

from __future__ import annotations

import argparse
from pathlib import Path

from formschema import __version__, logger
from formschema.categories import CategoryCatalog, extract_prefix
from formschema.dependencies import ensure_cli_dependencies_for_scan
from formschema.exceptions import PackageError
from formschema.importer import BulkImportCoordinator, FormDocumentBuilder, format_summary
from formschema.logging import configure_logging
from formschema.metadata import MetadataParser, normalize_form_number
from formschema.pdf_fields import extract_raw_fields, scan_directory, scan_pdf, write_metadata
from formschema.pdf_templates import TemplateCopier, TemplateDirectoryLocator
from formschema.processing.normalizer import FormSchemaNormalizer
from formschema.processing.validator import SchemaValidator
from formschema.repository import JsonCatalogRepository
from formschema.schema_store import SchemaStore
from formschema.settings import Settings, get_settings
from formschema.typing.models import ImportOptions


def _positive_int(value: str) -> int:
    """Parse a strictly positive integer CLI value.

    Args:
        value (str): CLI value.

    Raises:
        argparse.ArgumentTypeError: If value is not a positive integer.

    Returns:
        int: Parsed value.
    """
    try:
        parsed = int(value)
    except ValueError:
        parsed = 0
    if parsed < 1:
        raise argparse.ArgumentTypeError("value must be a positive integer")  # noqa: TRY003
    return parsed


def build_parser() -> argparse.ArgumentParser:
    """Create the command-line parser.

    Returns:
        argparse.ArgumentParser: The configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="formschema")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command")

    import_parser = subparsers.add_parser("import", help="Import PDF analysis metadata into the form catalog")
    import_parser.add_argument("--metadata", type=Path, default=None, dest="metadata_path")
    import_parser.add_argument("--catalog", type=Path, default=None, dest="catalog_path")
    import_parser.add_argument("--pdf-source-dir", type=Path, default=None, dest="pdf_source_dir")
    import_parser.add_argument("--template-dir", type=Path, default=None, dest="template_dir")
    import_parser.add_argument("--category-filter", default=None, dest="category_filter")
    import_parser.add_argument("--dry-run", action="store_true", dest="dry_run")
    import_parser.add_argument("--skip-pdfs", action="store_true", dest="skip_pdfs")
    import_parser.add_argument("--skip-fields", action="store_true", dest="skip_fields")
    import_parser.add_argument("--verbose", action="store_true")
    import_parser.add_argument("--batch-size", type=_positive_int, default=None, dest="batch_size")
    import_parser.add_argument("--prune-stale-fields", action="store_true", dest="prune_stale_fields")

    generate_parser = subparsers.add_parser("generate", help="Generate a schema document from a fillable PDF")
    generate_parser.add_argument("--pdf", required=True, type=Path, dest="pdf_path")
    generate_parser.add_argument("--code", default=None)
    generate_parser.add_argument("--schema-dir", type=Path, default=None, dest="schema_dir")

    validate_parser = subparsers.add_parser("validate", help="Validate every stored schema document")
    validate_parser.add_argument("--schema-dir", type=Path, default=None, dest="schema_dir")

    scan_parser = subparsers.add_parser("scan", help="Scan a PDF directory into importer metadata")
    scan_parser.add_argument("--pdf-dir", required=True, type=Path, dest="pdf_dir")
    scan_parser.add_argument("--output", type=Path, default=None, dest="output_path")

    return parser


def _build_import_options(args: argparse.Namespace, settings: Settings) -> ImportOptions:
    """Build import options from CLI arguments and settings.

    Args:
        args (argparse.Namespace): Parsed CLI args.
        settings (Settings): Runtime settings.

    Returns:
        ImportOptions: Options object.
    """
    return ImportOptions(
        dry_run=args.dry_run,
        skip_pdfs=args.skip_pdfs,
        skip_fields=args.skip_fields,
        category_filter=args.category_filter,
        batch_size=args.batch_size or settings.import_batch_size,
        verbose=args.verbose,
        prune_stale_fields=args.prune_stale_fields or settings.prune_stale_fields,
        error_report_limit=settings.error_report_limit,
    )


def _run_import(args: argparse.Namespace, settings: Settings) -> int:
    options = _build_import_options(args, settings)
    pdf_source_dir = args.pdf_source_dir or Path(settings.pdf_source_dir)
    template_dir = args.template_dir or Path(settings.pdf_template_dir)
    catalog = CategoryCatalog()

    coordinator = BulkImportCoordinator(
        MetadataParser(args.metadata_path or settings.metadata_path),
        JsonCatalogRepository(args.catalog_path or Path(settings.catalog_path)),
        options=options,
        catalog=catalog,
        validator=SchemaValidator(
            category_lookup=catalog,
            pdf_locator=TemplateDirectoryLocator(pdf_source_dir, template_dir),
        ),
        template_copier=TemplateCopier(source_dir=pdf_source_dir, target_dir=template_dir),
    )
    stats = coordinator.run()
    print(format_summary(stats, dry_run=options.dry_run, error_limit=options.error_report_limit))  # noqa: T201

    if stats.error_count and settings.ci:
        return 1
    return 0


def _run_generate(args: argparse.Namespace, settings: Settings) -> int:
    ensure_cli_dependencies_for_scan()
    catalog = CategoryCatalog()
    descriptors = extract_raw_fields(args.pdf_path)
    record = scan_pdf(args.pdf_path, descriptors=descriptors)
    if args.code:
        code = normalize_form_number(args.code)
        record = record.model_copy(update={"form_number": code, "category_prefix": extract_prefix(code)})

    normalizer = FormSchemaNormalizer()
    fields = normalizer.normalize(record.form_number, descriptors)
    document = FormDocumentBuilder(catalog=catalog, normalizer=normalizer).build_document(record, fields)

    validator = SchemaValidator(
        category_lookup=catalog,
        pdf_locator=TemplateDirectoryLocator(args.pdf_path.parent),
    )
    result = validator.validate(document)
    if not result.is_valid:
        print(result.describe(args.pdf_path))  # noqa: T201
        return 1

    store = SchemaStore(root=args.schema_dir or Path(settings.schema_dir))
    path = store.save(document)
    print(result.describe(path))  # noqa: T201
    return 0


def _run_validate(args: argparse.Namespace, settings: Settings) -> int:
    store = SchemaStore(root=args.schema_dir or Path(settings.schema_dir))
    report = store.validate_all(SchemaValidator(category_lookup=CategoryCatalog()))
    for path, result in report["invalid"] + report["warnings"]:
        print(result.describe(path))  # noqa: T201
    print(  # noqa: T201
        f"Valid: {len(report['valid'])}, with warnings: {len(report['warnings'])}, invalid: {len(report['invalid'])}",
    )
    return 1 if report["invalid"] else 0


def _run_scan(args: argparse.Namespace, settings: Settings) -> int:
    ensure_cli_dependencies_for_scan()
    records = scan_directory(args.pdf_dir)
    output_path = write_metadata(records, args.output_path or Path(settings.metadata_path))
    print(f"Scanned {len(records)} PDFs into {output_path}")  # noqa: T201
    return 0


_COMMANDS = {
    "import": _run_import,
    "generate": _run_generate,
    "validate": _run_validate,
    "scan": _run_scan,
}


def main() -> int:
    """Run the CLI.

    Returns:
        int: Exit code (0 for success, 1 for error).
    """
    settings = get_settings()
    configure_logging(settings=settings)

    parser = build_parser()
    args = parser.parse_args()

    handler = _COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        return 0

    try:
        return handler(args, settings)
    except PackageError:
        logger.exception("Command failed", extra={"command": args.command})
        return 1
    except KeyboardInterrupt:
        logger.info("Command aborted by user", extra={"command": args.command})
        return 130
    except Exception:
        logger.exception("Unexpected error", extra={"command": args.command})
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
