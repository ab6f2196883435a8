"""AcroForm widget scanning with PyMuPDF."""

from __future__ import annotations

import json
from collections import Counter
from pathlib import Path
from typing import Any

try:
    import fitz
except Exception:  # pragma: no cover - optional dependency at runtime
    fitz: Any
    fitz = None

from formschema.categories import extract_prefix
from formschema.exceptions import PdfScanError
from formschema.logging import get_logger
from formschema.metadata import normalize_form_number
from formschema.processing.classifier import FieldTypeClassifier
from formschema.typing.models import MetadataRecord, RawFieldDescriptor

logger = get_logger(__name__)

_WIDGET_TYPES = {
    "checkbox": "checkbox",
    "radiobutton": "choice",
    "combobox": "choice",
    "listbox": "choice",
    "text": "text",
    "signature": "signature",
    "button": "button",
}


def _widget_type(widget: Any) -> str | None:
    raw = str(getattr(widget, "field_type_string", "") or "").replace(" ", "").lower()
    return _WIDGET_TYPES.get(raw)


def extract_raw_fields(pdf_path: Path) -> list[RawFieldDescriptor]:
    """List the AcroForm fields of a PDF in page order.

    Widgets sharing a field name (radio kids, repeated fields) yield one
    descriptor, on the first page where the name appears.

    Args:
        pdf_path: PDF file to scan.

    Raises:
        PdfScanError: If PyMuPDF is unavailable or the PDF cannot be read.

    Returns:
        list[RawFieldDescriptor]: Field descriptors.
    """
    if fitz is None:
        raise PdfScanError(message="PyMuPDF is required for PDF scanning")

    try:
        descriptors: list[RawFieldDescriptor] = []
        seen: set[str] = set()
        with fitz.open(pdf_path) as doc:
            for page in doc:
                for widget in page.widgets() or []:
                    name = getattr(widget, "field_name", None)
                    if not name or name in seen:
                        continue
                    seen.add(name)
                    descriptors.append(
                        RawFieldDescriptor(
                            raw_name=name,
                            pdf_reported_type=_widget_type(widget),
                            page_number=page.number + 1,
                        ),
                    )
    except Exception as exc:  # pragma: no cover - depends on file and fitz internals
        raise PdfScanError(message=f"Failed to scan PDF fields: {pdf_path}") from exc

    logger.info("PDF fields scanned", extra={"fields": len(descriptors), "input_path": str(pdf_path)})
    return descriptors


def _page_count(pdf_path: Path) -> int:
    try:
        with fitz.open(pdf_path) as doc:
            return len(doc)
    except Exception as exc:  # pragma: no cover - depends on file and fitz internals
        raise PdfScanError(message=f"Failed to open PDF: {pdf_path}") from exc


def scan_pdf(
    pdf_path: Path,
    *,
    classifier: FieldTypeClassifier | None = None,
    descriptors: list[RawFieldDescriptor] | None = None,
) -> MetadataRecord:
    """Build the metadata record of one PDF.

    Args:
        pdf_path: PDF file to scan.
        classifier: Classifier used to flag PII fields.
        descriptors: Already extracted fields of the PDF.

    Returns:
        MetadataRecord: Metadata in the bulk importer's input shape.
    """
    classifier = classifier or FieldTypeClassifier()
    if descriptors is None:
        descriptors = extract_raw_fields(pdf_path)
    form_number = normalize_form_number(pdf_path.name)
    field_names = [descriptor.raw_name for descriptor in descriptors]
    field_types = Counter(descriptor.pdf_reported_type or "unknown" for descriptor in descriptors)

    return MetadataRecord(
        form_number=form_number,
        filename=pdf_path.name,
        source_path=str(pdf_path),
        file_size=pdf_path.stat().st_size,
        is_fillable=bool(field_names),
        num_pages=_page_count(pdf_path),
        total_fields=len(field_names),
        field_names=field_names,
        field_types=dict(field_types) if field_types else None,
        pii_fields=[name for name in field_names if classifier.is_pii_field(name)],
        category_prefix=extract_prefix(form_number),
    )


def scan_directory(pdf_dir: Path) -> list[MetadataRecord]:
    """Scan every PDF of a directory, skipping unreadable files.

    Args:
        pdf_dir: Directory holding PDF files.

    Returns:
        list[MetadataRecord]: Records sorted by file name.
    """
    classifier = FieldTypeClassifier()
    records: list[MetadataRecord] = []
    for pdf_path in sorted(pdf_dir.glob("*.pdf")):
        try:
            records.append(scan_pdf(pdf_path, classifier=classifier))
        except PdfScanError as exc:
            logger.warning("Skipping unreadable PDF", extra={"input_path": str(pdf_path), "error": str(exc)})
    return records


def write_metadata(records: list[MetadataRecord], output_path: Path) -> Path:
    """Persist metadata records as the importer's JSON source.

    Args:
        records: Records to write.
        output_path: Target JSON file.

    Returns:
        Path: Written file path.
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = {"forms": [record.model_dump(mode="json") for record in records]}
    output_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    logger.info("Metadata written", extra={"output_path": str(output_path), "forms": len(records)})
    return output_path
