"""Semantic type classification, utility-field filtering and PII detection."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import TYPE_CHECKING, Final

from formschema.processing.sanitizer import FieldNameSanitizer, to_snake_case
from formschema.typing.enums import FieldType

if TYPE_CHECKING:
    from collections.abc import Iterable

_CHECKBOX_HINTS: Final = frozenset({"checkbox"})
_SELECT_HINTS: Final = frozenset({"select", "choice", "dropdown"})

# First match wins; patterns run against the snake_case leaf name.
_NAME_RULES: Final[tuple[tuple[re.Pattern[str], FieldType], ...]] = (
    (re.compile(r"signature|(?:^|_)sig(?:_|$)"), FieldType.SIGNATURE),
    (re.compile(r"(?<!up)(?<!candi)(?<!vali)date|(?:^|_)dob(?:_|$)|birth_?date"), FieldType.DATE),
    (re.compile(r"e_?mail"), FieldType.EMAIL),
    (re.compile(r"phone|(?:^|_)tel(?:_|$)|(?:^|_)fax(?:_|$)|mobile"), FieldType.TEL),
    (re.compile(r"amount|(?:^|_)fees?(?:_|$)|cost|payment|(?:^|_)due(?:_|$)"), FieldType.CURRENCY),
    (
        re.compile(r"address|street|(?:^|_)city(?:_|$)|(?:^|_)state(?:_|$)|(?:^|_)zip(?:_?code)?(?:_|$)"),
        FieldType.ADDRESS,
    ),
    (re.compile(r"check_?box"), FieldType.CHECKBOX),
)

# Whole-word match over the snake_case leaf tokens.
_UTILITY_LEAF = re.compile(r"(?:^|_)(?:save|print|reset|clear|submit)(?:_|$)")
_DECORATIVE = re.compile(r"white_?out|notice_?(?:header|footer)")
_PAGE_SET = re.compile(r"^#page_?set$", re.IGNORECASE)

_PII_PATTERN = re.compile(
    r"ssn|social_?security|(?:^|_)dob(?:_|$)|date_of_birth|birth_?date|driver_?s?_?licen[cs]e|passport",
)

_HINT_RULES: Final[tuple[tuple[re.Pattern[str], str], ...]] = (
    (re.compile(r"^check_?box"), "checkbox"),
    (re.compile(r"^(?:drop_?down|combo_?box|list_?box)"), "choice"),
    (re.compile(r"^(?:fill_?)?text"), "text"),
)


class FieldTypeClassifier:
    """Decision-table classifier for raw AcroForm field names."""

    def __init__(self, sanitizer: FieldNameSanitizer | None = None) -> None:
        """Initialize classifier.

        Args:
            sanitizer (FieldNameSanitizer | None): Name parser; a default instance when omitted.
        """
        self._sanitizer = sanitizer or FieldNameSanitizer()

    def classify(self, raw_name: str, pdf_reported_type: str | None = None) -> FieldType:
        """Return the semantic input type of a field.

        A checkbox or choice type reported by the PDF wins over the name;
        otherwise the first matching name rule decides, defaulting to text.

        Args:
            raw_name (str): Raw PDF field name.
            pdf_reported_type (str | None): Widget type reported by the PDF.

        Returns:
            FieldType: Classified type.
        """
        hint = (pdf_reported_type or "").strip().lower()
        if hint in _CHECKBOX_HINTS:
            return FieldType.CHECKBOX
        if hint in _SELECT_HINTS:
            return FieldType.SELECT

        leaf = self._sanitizer.sanitize(raw_name)
        for pattern, field_type in _NAME_RULES:
            if pattern.search(leaf):
                return field_type
        return FieldType.TEXT

    def skip_field(self, raw_name: str) -> bool:
        """Return whether a field is a utility or decorative widget.

        Args:
            raw_name (str): Raw PDF field name.

        Returns:
            bool: True when the field must never reach the normalized schema.
        """
        stripped = (raw_name or "").strip()
        if stripped.startswith("#"):
            return True

        segments = self._sanitizer.segments(stripped)
        if any(_PAGE_SET.match(segment) for segment in segments):
            return True

        if _UTILITY_LEAF.search(self._sanitizer.sanitize(stripped)):
            return True
        return bool(_DECORATIVE.search(self._sanitizer.flatten(stripped)))

    def is_pii_field(self, raw_name: str, known_pii_names: Iterable[str] = ()) -> bool:
        """Return whether a field likely holds personally identifying data.

        Args:
            raw_name (str): Raw PDF field name.
            known_pii_names (Iterable[str]): Raw names already flagged by the metadata source.

        Returns:
            bool: True for known names or SSN, date of birth, license and passport fields.
        """
        if raw_name in set(known_pii_names):
            return True
        return bool(_PII_PATTERN.search(self._sanitizer.flatten(raw_name)))

    def hint_from_field_types(self, raw_name: str, field_types: Mapping[str, int] | None) -> str | None:
        """Derive a widget type hint from generic field-name prefixes.

        The metadata source only reports per-form type counts, so a hint is
        available only for names such as `CheckBox12` or `FillText3`.

        Args:
            raw_name (str): Raw PDF field name.
            field_types (Mapping[str, int] | None): Type counts of the form.

        Returns:
            str | None: `checkbox`, `choice`, `text`, or None.
        """
        if not isinstance(field_types, Mapping):
            return None
        segments = self._sanitizer.segments(raw_name)
        if not segments:
            return None
        leaf = to_snake_case(segments[-1])
        for pattern, hint in _HINT_RULES:
            if pattern.match(leaf):
                return hint
        return None
