"""Judicial Council form categories keyed by form-number prefix."""

from __future__ import annotations

import re
from typing import Final

from formschema.typing.models import CategoryDefinition

UNKNOWN_CATEGORY_POSITION: Final = 999
GENERAL_CATEGORY: Final = "general"

_PREFIX = re.compile(r"^([A-Z]+)")

# (prefix, name, description, position); Small Claims sorts first.
_CATEGORY_ROWS: Final[tuple[tuple[str, str, str, int], ...]] = (
    ("SC", "Small Claims", "Small claims court forms for disputes up to $12,500", 1),
    ("FW", "Fee Waiver", "Court fee waiver request forms", 5),
    ("FL", "Family Law", "Divorce, custody, support, and other family matters", 10),
    ("DV", "Domestic Violence", "Domestic violence restraining orders", 11),
    ("CH", "Civil Harassment", "Civil harassment restraining orders", 20),
    ("EA", "Elder Abuse", "Elder or dependent adult abuse restraining orders", 21),
    ("SV", "School Violence", "School violence prevention restraining orders", 22),
    ("WV", "Workplace Violence", "Workplace violence restraining orders", 23),
    ("GV", "Gun Violence", "Gun violence restraining orders", 24),
    ("JV", "Juvenile", "Juvenile dependency and delinquency proceedings", 30),
    ("ICWA", "Indian Child Welfare Act", "Forms for ICWA compliance in child welfare cases", 31),
    ("GC", "Guardianship/Conservatorship", "Guardianship and conservatorship of persons and estates", 40),
    ("DE", "Decedent Estate", "Probate and administration of decedent estates", 41),
    ("CR", "Criminal", "Criminal court forms and procedures", 50),
    ("CIV", "Civil", "General civil litigation forms", 60),
    ("MC", "Miscellaneous Civil", "Miscellaneous civil court forms", 61),
    ("CM", "Case Management", "Civil case management conference forms", 62),
    ("PLD", "Pleading", "General pleading forms", 63),
    ("PLDC", "Pleading - Contract", "Contract dispute pleading forms", 64),
    ("PLDPI", "Pleading - Personal Injury", "Personal injury pleading forms", 65),
    ("DISC", "Discovery", "Civil discovery request and response forms", 70),
    ("INT", "Interrogatories", "Form interrogatories for civil cases", 71),
    ("SUBP", "Subpoena", "Subpoena forms for witnesses and documents", 72),
    ("EJ", "Enforcement of Judgment", "Judgment enforcement and collection forms", 80),
    ("EJT", "Enforcement of Judgment - Transition", "Transitional judgment enforcement forms", 81),
    ("WG", "Wage Garnishment", "Wage garnishment and earnings withholding", 82),
    ("UD", "Unlawful Detainer", "Eviction and unlawful detainer forms", 90),
    ("TR", "Traffic", "Traffic court forms", 100),
    ("NC", "Name Change", "Name and gender change petition forms", 110),
    ("CARE", "CARE Act", "Community Assistance, Recovery, and Empowerment Act proceedings", 120),
    ("SUM", "Summons", "Summons and citation forms", 130),
    ("POS", "Proof of Service", "Proof of service forms", 131),
    ("SER", "Service", "Service of process forms", 132),
    ("RA", "Records on Appeal", "Appellate court record designation forms", 140),
    ("RC", "Record Correction", "Court record correction forms", 141),
    ("REC", "Reconsideration", "Motion for reconsideration forms", 142),
    ("MIL", "Mental Illness", "Mental health proceedings forms", 150),
    ("HC", "Habeas Corpus", "Habeas corpus petition forms", 160),
    ("EFS", "Electronic Filing", "Electronic filing system forms", 170),
    ("JURY", "Jury", "Jury-related forms", 180),
    ("LA", "Landlord Actions", "Landlord action forms", 190),
    ("EM", "Emancipation", "Minor emancipation petition forms", 200),
    ("CD", "Civil Dispute", "Civil dispute resolution forms", 210),
    ("TH", "Tribal", "Tribal court coordination forms", 220),
    ("SH", "Safe Haven", "Safe haven and safe surrender forms", 230),
    ("JUD", "Judgment", "Judgment forms", 240),
    ("EPO", "Emergency Protective Order", "Emergency protective order forms", 250),
    ("VL", "Vexatious Litigant", "Vexatious litigant designation forms", 260),
    ("CLETS", "CLETS", "California Law Enforcement Telecommunications System forms", 270),
    ("RT", "Reporter Transcript", "Court reporter transcript forms", 280),
    ("GDC", "Guardian Ad Litem", "Guardian ad litem court forms", 290),
    ("DAL", "Disability Accommodation", "Disability accommodation request forms", 300),
    ("MD", "Miscellaneous Documents", "Miscellaneous court documents", 310),
    ("CP", "Court Procedures", "General court procedure forms", 320),
    ("TRINST", "Trial Instructions", "Jury trial instruction forms", 330),
)

CATEGORIES: Final[dict[str, CategoryDefinition]] = {
    prefix: CategoryDefinition(prefix=prefix, name=name, description=description, position=position)
    for prefix, name, description, position in _CATEGORY_ROWS
}


def extract_prefix(form_number: str | None) -> str | None:
    """Return the leading letters of a form number.

    Args:
        form_number (str | None): Form number such as `SC-100`.

    Returns:
        str | None: Uppercase prefix, or None when the number has none.
    """
    if not form_number:
        return None
    match = _PREFIX.match(form_number.strip().upper())
    return match.group(1) if match else None


class CategoryCatalog:
    """Immutable lookup over the category table."""

    def __init__(self, categories: dict[str, CategoryDefinition] | None = None) -> None:
        """Initialize catalog.

        Args:
            categories (dict[str, CategoryDefinition] | None): Categories by prefix.
        """
        self._by_prefix = dict(categories if categories is not None else CATEGORIES)
        self._slugs = {category.slug for category in self._by_prefix.values()}

    def definitions(self) -> list[CategoryDefinition]:
        """Return all categories ordered by position."""
        return sorted(self._by_prefix.values(), key=lambda category: category.position)

    def known_prefix(self, prefix: str | None) -> bool:
        """Return whether the prefix has a category."""
        return bool(prefix) and str(prefix).upper() in self._by_prefix

    def get(self, prefix: str | None) -> CategoryDefinition | None:
        """Return the category of a prefix."""
        if not prefix:
            return None
        return self._by_prefix.get(prefix.upper())

    def category_exists(self, slug: str) -> bool:
        """Return whether a category slug is known."""
        return slug.lower() in self._slugs

    def category_for_prefix(self, prefix: str | None) -> str | None:
        """Return the category slug of a prefix, or None when unknown."""
        category = self.get(prefix)
        return category.slug if category else None

    def category_for_form(self, form_number: str | None) -> str | None:
        """Return the category slug of a form number."""
        return self.category_for_prefix(extract_prefix(form_number))

    def category_name(self, prefix: str | None) -> str | None:
        """Return the display name of a prefix's category."""
        category = self.get(prefix)
        return category.name if category else None

    def position_for_prefix(self, prefix: str | None) -> int:
        """Return the ordering position of a prefix's category."""
        category = self.get(prefix)
        return category.position if category else UNKNOWN_CATEGORY_POSITION
