"""Cross-form shared key detection for autofill linking."""

from __future__ import annotations

import re
from typing import Final

from formschema.processing.sanitizer import FieldNameSanitizer

_PARTY_ROLES: Final = ("plaintiff", "defendant", "petitioner", "respondent")

_PARTY_CONCEPTS: Final[tuple[tuple[str, str], ...]] = (
    (r"name$", "name"),
    (r"(?:street|address)", "address"),
    (r"city", "city"),
    (r"zip", "zip"),
    (r"(?:phone|tel)", "phone"),
    (r"e_?mail", "email"),
)


def _party_patterns() -> list[tuple[re.Pattern[str], str]]:
    return [
        (re.compile(rf"{role}.*{pattern}"), f"{role}:{concept}")
        for role in _PARTY_ROLES
        for pattern, concept in _PARTY_CONCEPTS
    ]


# Role-specific patterns precede concept-only ones.
SHARED_KEY_PATTERNS: Final[tuple[tuple[re.Pattern[str], str], ...]] = (
    *_party_patterns(),
    (re.compile(r"attorney.*(?:bar|sbn)"), "attorney:bar_number"),
    (re.compile(r"attorney.*name$"), "attorney:name"),
    (re.compile(r"hearing.*date"), "hearing:date"),
    (re.compile(r"hearing.*(?:dept|department)"), "hearing:department"),
    (re.compile(r"claim.*amount|amount.*claim"), "claim:amount"),
    (re.compile(r"case.*(?:number|num|no$)"), "case:number"),
    (re.compile(r"case.*name"), "case:name"),
    (re.compile(r"court.*county|county.*court|^county(?:_of)?$"), "court:county"),
    (re.compile(r"court.*(?:street|address)"), "court:address"),
    (re.compile(r"court.*name"), "court:name"),
)


class SharedKeyDetector:
    """Match field names against the ordered shared-key table."""

    def __init__(
        self,
        patterns: tuple[tuple[re.Pattern[str], str], ...] = SHARED_KEY_PATTERNS,
        sanitizer: FieldNameSanitizer | None = None,
    ) -> None:
        """Initialize detector.

        Args:
            patterns (tuple[tuple[re.Pattern[str], str], ...]): Ordered `(pattern, "role:concept")` pairs.
            sanitizer (FieldNameSanitizer | None): Name parser used to flatten raw names.

        Raises:
            ValueError: If a key is not namespaced.
        """
        for _, key in patterns:
            if ":" not in key:
                raise ValueError(f"Shared key must be namespaced as 'role:concept': {key}")  # noqa: TRY003
        self._patterns = patterns
        self._sanitizer = sanitizer or FieldNameSanitizer()

    def detect(self, sanitized_name: str, raw_name: str = "") -> str | None:
        """Return the first shared key whose pattern matches the field.

        Each pattern is tried against the sanitized name, then against the
        flattened raw hierarchy, so `Plaintiff[0].Name[0]` still resolves.

        Args:
            sanitized_name (str): Sanitized field name.
            raw_name (str): Raw PDF field name.

        Returns:
            str | None: Namespaced key, or None when nothing matches.
        """
        candidates = [sanitized_name]
        flattened = self._sanitizer.flatten(raw_name) if raw_name else ""
        if flattened and flattened != sanitized_name:
            candidates.append(flattened)

        for pattern, key in self._patterns:
            if any(candidate and pattern.search(candidate) for candidate in candidates):
                return key
        return None
