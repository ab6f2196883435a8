"""Form schema document models."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from formschema.typing.models.fields import NormalizedField

DEFAULT_SECTION = "General"


class FormMetadata(BaseModel):
    """Form-level metadata of a schema document."""

    model_config = ConfigDict(extra="forbid")

    code: str
    title: str
    pdf_filename: str
    category: str
    description: str | None = None
    fillable: bool = True
    page_count: int | None = None


class FormSchemaDocument(BaseModel):
    """Form metadata plus its fields grouped by section."""

    model_config = ConfigDict(extra="forbid")

    form_metadata: FormMetadata
    sections: dict[str, list[NormalizedField]] = Field(default_factory=dict)

    def iter_fields(self) -> Iterator[NormalizedField]:
        """Yield every field across sections, in section order.

        Yields:
            NormalizedField: Document fields.
        """
        for fields in self.sections.values():
            yield from fields

    @property
    def field_count(self) -> int:
        """Return the number of fields in the document."""
        return sum(len(fields) for fields in self.sections.values())

    def to_payload(self) -> dict[str, Any]:
        """Return a JSON-compatible payload.

        Returns:
            dict[str, Any]: Plain document dictionary.
        """
        return self.model_dump(mode="json")


class ValidationResult(BaseModel):
    """Blocking errors and advisory warnings for one document."""

    model_config = ConfigDict(extra="forbid")

    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        """Return whether the document may be persisted."""
        return not self.errors

    def describe(self, file_path: Path | str | None = None) -> str:
        """Render a human readable validation report.

        Args:
            file_path (Path | str | None): Optional source file of the document.

        Returns:
            str: Report text.
        """
        lines: list[str] = []
        if file_path is not None:
            lines.append(f"Schema: {file_path}")
        if self.errors:
            lines.append("Errors:")
            lines.extend(f"  - {error}" for error in self.errors)
        if self.warnings:
            lines.append("Warnings:")
            lines.extend(f"  - {warning}" for warning in self.warnings)
        if not self.errors and not self.warnings:
            lines.append("Valid")
        return "\n".join(lines)
