# ==============================================
# Category
# ==============================================
#
# PURPOSE:
#   The two-way domain classification of feature blocks. Every
#   block maps to exactly one Category through a fixed lookup on
#   its section name; nothing is inferred from content.
#
#   .PUNKT → points
#   .TEKST → points   (text-labelled features sit with the points)
#   .KURVE → lines
#   other  → unknown  (.HODE, .SLUTT, .FLATE, ...)
#
# ==============================================

from enum import Enum
from typing import Dict, Optional, Union


class Category(Enum):
    """
    Domain category of a feature block.

    - POINTS: manholes, drains, valves and other point features
    - LINES: pipes and cables
    - UNKNOWN: header/footer sections and anything unrecognized
    """
    POINTS = "points"
    LINES = "lines"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, name: Union[str, "Category"]) -> "Category":
        """
        Resolve a category from its value or a Norwegian alias.

        Selections exported by the web app use "punkter" / "ledninger",
        so both spellings are accepted.

        Args:
            name: Category member, value or alias (case-insensitive)

        Returns:
            The matching Category, or UNKNOWN if the name is not recognized
        """
        if isinstance(name, Category):
            return name
        key = str(name or "").strip().lower()
        return _ALIASES.get(key, cls.UNKNOWN)

    @classmethod
    def known(cls):
        """The two real categories, in display order."""
        return (cls.POINTS, cls.LINES)


_ALIASES: Dict[str, Category] = {
    "points": Category.POINTS,
    "punkter": Category.POINTS,
    "lines": Category.LINES,
    "ledninger": Category.LINES,
    "unknown": Category.UNKNOWN,
}


SECTION_CATEGORIES: Dict[str, Category] = {
    ".PUNKT": Category.POINTS,
    ".TEKST": Category.POINTS,
    ".KURVE": Category.LINES,
}


def category_of(section: Optional[str]) -> Category:
    """Map a section name (e.g. ".KURVE") to its Category."""
    if not section:
        return Category.UNKNOWN
    return SECTION_CATEGORIES.get(section, Category.UNKNOWN)
