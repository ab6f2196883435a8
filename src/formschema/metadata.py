"""PDF analysis metadata source consumed by the bulk importer."""

from __future__ import annotations

import json
import re
from collections import Counter
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from formschema.categories import extract_prefix
from formschema.exceptions import MetadataSourceError
from formschema.logging import get_logger
from formschema.typing.models import MetadataRecord, MetadataSummary, RawFieldDescriptor

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    TypeHint = Callable[[str, Mapping[str, int] | None], str | None]

logger = get_logger(__name__)

_FORM_NUMBER = re.compile(r"^([A-Z]+)-?(\d+)-?([A-Z][A-Z0-9]*)?$")
_LIST_KEYS = ("forms", "results")


def normalize_form_number(value: str) -> str:
    """Normalize a form number or PDF file name to `PREFIX-NUMBER[-SUFFIX]`.

    Args:
        value (str): Form number (`sc100`, `SC-100`) or file name (`fl110info.pdf`).

    Returns:
        str: Normalized form number such as `SC-100`, `SC-100A` or `FL-110-INFO`.
    """
    candidate = Path(value.strip()).stem if value.lower().endswith(".pdf") else value.strip()
    candidate = candidate.upper().replace("_", "-").replace(" ", "")
    match = _FORM_NUMBER.match(candidate)
    if not match:
        return candidate
    prefix, number, suffix = match.groups()
    if not suffix:
        return f"{prefix}-{number}"
    if len(suffix) == 1:
        return f"{prefix}-{number}{suffix}"
    return f"{prefix}-{number}-{suffix}"


def raw_fields_for(record: MetadataRecord, *, type_hint: TypeHint | None = None) -> list[RawFieldDescriptor]:
    """Build raw field descriptors for a metadata record.

    Args:
        record (MetadataRecord): Form metadata.
        type_hint (TypeHint | None): Derives a widget hint from `(raw_name, field_types)`.

    Returns:
        list[RawFieldDescriptor]: Descriptors in metadata order.
    """
    descriptors: list[RawFieldDescriptor] = []
    for raw_name in record.field_names:
        hint = type_hint(raw_name, record.field_types) if type_hint else None
        descriptors.append(RawFieldDescriptor(raw_name=raw_name, pdf_reported_type=hint))
    return descriptors


class MetadataParser:
    """Read and normalize the JSON produced by the PDF analysis step."""

    def __init__(self, path: Path | str) -> None:
        """Initialize parser.

        Args:
            path (Path | str): Metadata JSON file.
        """
        self.path = Path(path)
        self._records: list[MetadataRecord] | None = None

    def parse(self) -> list[MetadataRecord]:
        """Return normalized form records, reading the file once.

        Raises:
            MetadataSourceError: If the file is unreadable or not a list of forms.

        Returns:
            list[MetadataRecord]: Records in source order.
        """
        if self._records is None:
            entries = self._load_entries()
            records = [self._normalize_entry(index, entry) for index, entry in enumerate(entries)]
            self._records = [record for record in records if record is not None]
            logger.info("Metadata parsed", extra={"path": str(self.path), "forms": len(self._records)})
        return self._records

    def summary(self) -> MetadataSummary:
        """Return totals over the parsed records.

        Returns:
            MetadataSummary: Form and field counts.
        """
        records = self.parse()
        by_category = Counter(record.category_prefix or "UNKNOWN" for record in records)
        return MetadataSummary(
            total_forms=len(records),
            fillable_forms=sum(1 for record in records if record.is_fillable),
            total_fields=sum(record.total_fields for record in records),
            forms_by_category=dict(by_category),
        )

    def _load_entries(self) -> list[Any]:
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise MetadataSourceError(message=f"Cannot read metadata: {exc}", path=str(self.path)) from exc
        except json.JSONDecodeError as exc:
            raise MetadataSourceError(message=f"Malformed metadata JSON: {exc}", path=str(self.path)) from exc

        if isinstance(payload, dict):
            for key in _LIST_KEYS:
                if isinstance(payload.get(key), list):
                    return payload[key]
        if isinstance(payload, list):
            return payload
        raise MetadataSourceError(message="Metadata must be a list of forms", path=str(self.path))

    def _normalize_entry(self, index: int, entry: Any) -> MetadataRecord | None:
        if not isinstance(entry, dict):
            logger.warning("Ignoring non-object metadata entry", extra={"index": index})
            return None

        filename = str(entry.get("filename") or "")
        source_path = entry.get("source_path") or entry.get("path")
        if not filename and source_path:
            filename = Path(str(source_path)).name
        raw_number = entry.get("form_number") or filename
        form_number = normalize_form_number(str(raw_number)) if raw_number else ""

        field_names = entry.get("field_names")
        if not isinstance(field_names, list):
            field_names = []
        field_types = entry.get("field_types")
        try:
            return MetadataRecord(
                form_number=form_number,
                filename=filename,
                source_path=str(source_path) if source_path else None,
                file_size=int(entry.get("file_size") or 0),
                is_fillable=bool(entry.get("is_fillable", entry.get("fillable", False))),
                num_pages=int(entry.get("num_pages") or 0),
                total_fields=int(entry.get("total_fields") or len(field_names)),
                field_names=[str(name) for name in field_names],
                field_types=field_types if isinstance(field_types, dict) else None,
                pii_fields=[str(name) for name in entry.get("pii_fields") or []],
                category_prefix=extract_prefix(form_number),
            )
        except (TypeError, ValueError, ValidationError) as exc:
            logger.warning("Ignoring malformed metadata entry", extra={"index": index, "error": str(exc)})
            return None
