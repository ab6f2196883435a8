"""Raw and normalized field models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from formschema.typing.enums import FieldType


class RawFieldDescriptor(BaseModel):
    """One AcroForm field as reported by the PDF metadata source."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    raw_name: str
    pdf_reported_type: str | None = None
    page_number: int | None = None


class NormalizedField(BaseModel):
    """Field record produced by the normalizer."""

    model_config = ConfigDict(extra="forbid")

    sanitized_name: str
    label: str
    field_type: FieldType = FieldType.TEXT
    section: str | None = None
    shared_field_key: str | None = None
    position: int = Field(ge=1)
    pdf_field_name: str
    page_number: int | None = None
