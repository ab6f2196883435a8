"""Project enums."""

from __future__ import annotations

from enum import StrEnum


class _EnumMixin(StrEnum):
    """Shared conversion helpers for user-facing enums."""

    @classmethod
    def from_str(cls, value: str) -> _EnumMixin:
        """Parse enum from string.

        Args:
            value: Raw string value.

        Raises:
            ValueError: If the value is not supported.

        Returns:
            _EnumMixin: Parsed enum value.
        """
        try:
            return cls(value)
        except ValueError as exc:
            supported = ", ".join(member.value for member in cls)
            message = f"Unsupported {cls.__name__} value '{value}'. Expected one of: {supported}"
            raise ValueError(message) from exc

    @classmethod
    def values(cls) -> frozenset[str]:
        """Return the closed set of string values.

        Returns:
            frozenset[str]: Supported values.
        """
        return frozenset(member.value for member in cls)

    def to_str(self) -> str:
        """Return string representation.

        Returns:
            str: Enum string value.
        """
        return self.value


class FieldType(_EnumMixin):
    """Semantic input type of a normalized form field."""

    TEXT = "text"
    TEXTAREA = "textarea"
    EMAIL = "email"
    TEL = "tel"
    NUMBER = "number"
    DATE = "date"
    CURRENCY = "currency"
    ADDRESS = "address"
    SIGNATURE = "signature"
    CHECKBOX = "checkbox"
    SELECT = "select"
    HIDDEN = "hidden"
    READONLY = "readonly"


class FormOutcome(_EnumMixin):
    """Per-form state within one import run."""

    PENDING = "pending"
    CREATED = "created"
    UPDATED = "updated"
    SKIPPED = "skipped"
    FAILED = "failed"
