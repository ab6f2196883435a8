"""Canonical names, labels and sections for hierarchical AcroForm field names."""

from __future__ import annotations

import re

_INDEX_SUFFIX = re.compile(r"\[\d+\]")
_PAGE_MARKER = re.compile(r"^page\d+$", re.IGNORECASE)
_TRAILING_DIGITS = re.compile(r"\d+$")
_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_CAMEL_BOUNDARY = re.compile(r"([a-z\d])([A-Z])")
_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def to_snake_case(value: str) -> str:
    """Convert a camelCase/PascalCase token to snake_case.

    Args:
        value (str): Raw token.

    Returns:
        str: Lowercase token with `_` separators and no leading/trailing `_`.
    """
    converted = _ACRONYM_BOUNDARY.sub(r"\1_\2", value)
    converted = _CAMEL_BOUNDARY.sub(r"\1_\2", converted)
    return _NON_ALNUM.sub("_", converted.lower()).strip("_")


def _titleize(snake_name: str, *, drop_numbers: bool) -> str:
    words = [word for word in snake_name.split("_") if word]
    if drop_numbers:
        words = [word for word in words if not word.isdigit()]
    return " ".join(word.capitalize() for word in words)


def _drop_numeric_suffix(segment: str) -> str:
    stripped = _TRAILING_DIGITS.sub("", segment)
    if not to_snake_case(stripped):
        return segment
    return stripped


def _is_page_marker(segment: str) -> bool:
    return bool(_PAGE_MARKER.match(segment))


class FieldNameSanitizer:
    """Stateless parser for raw PDF field names such as `FL-100[0].Page1[0].PartyInfo[0].Name[0]`."""

    @staticmethod
    def segments(raw_name: str) -> list[str]:
        """Split a raw name into hierarchy segments without array indices.

        Args:
            raw_name (str): Raw PDF field name.

        Returns:
            list[str]: Non-empty segments, outermost first.
        """
        cleaned = _INDEX_SUFFIX.sub("", raw_name or "")
        return [segment.strip() for segment in cleaned.split(".") if segment.strip()]

    def sanitize(self, raw_name: str) -> str:
        """Return the snake_case identifier of the field's own (last) segment.

        Args:
            raw_name (str): Raw PDF field name.

        Returns:
            str: Sanitized name, empty for empty input.
        """
        parts = self.segments(raw_name)
        if not parts:
            return ""
        return to_snake_case(_drop_numeric_suffix(parts[-1]))

    def extract_section(self, raw_name: str) -> str | None:
        """Return the humanized nearest meaningful ancestor segment.

        The first segment (form id), page markers and `#` XFA markers never
        form a section.

        Args:
            raw_name (str): Raw PDF field name.

        Returns:
            str | None: Section label, or None when no ancestor qualifies.
        """
        parts = self.segments(raw_name)
        candidates = [
            segment for segment in parts[1:-1] if not _is_page_marker(segment) and not segment.startswith("#")
        ]
        for segment in reversed(candidates):
            label = _titleize(to_snake_case(segment), drop_numbers=False)
            if label:
                return label
        return None

    def humanize_label(self, raw_name: str) -> str:
        """Return a title-cased display label without numeric suffixes.

        Args:
            raw_name (str): Raw PDF field name.

        Returns:
            str: Label such as `Plaintiff Name`.
        """
        return _titleize(self.sanitize(raw_name), drop_numbers=True)

    def flatten(self, raw_name: str) -> str:
        """Return the whole hierarchy (minus form id and page markers) as one snake_case string.

        Args:
            raw_name (str): Raw PDF field name.

        Returns:
            str: Flattened name, e.g. `plaintiff_info_name`.
        """
        parts = self.segments(raw_name)
        if not parts:
            return ""
        ancestors = [
            to_snake_case(segment)
            for segment in parts[1:-1]
            if not _is_page_marker(segment) and not segment.startswith("#")
        ]
        tokens = [*ancestors, self.sanitize(raw_name)]
        return "_".join(token for token in tokens if token)
