# ==============================================
# CategoryStats / AnalysisResult
# ==============================================
#
# PURPOSE:
#   Typed tables holding the aggregate counts for one document.
#   One CategoryStats per Category; AnalysisResult bundles the
#   three of them with the document-wide counters.
#
# CLASS: CategoryStats (dataclass)
# --------------------------------
#   - category: Category
#   - features: int                   → feature blocks in this category
#   - obj_types: dict[str, int]       → OBJTYPE value → blocks
#   - fields: dict[str, int]          → attribute key → line occurrences
#   - themes: dict[str, int]          → P_TEMA / L_TEMA value → blocks
#   - misplaced_theme_keys: int       → theme keys seen under the wrong category
#
#   Properties:
#   -----------
#   - theme_key -> str | None   "P_TEMA" for points, "L_TEMA" for lines
#
# CLASS: AnalysisResult (dataclass)
# ---------------------------------
#   - line_count: int
#   - features_by_section: dict[str, int]
#   - points / lines / unknown: CategoryStats
#
#   Methods:
#   --------
#   - for_category(category) -> CategoryStats
#   - to_dict() -> dict     (JSON-serializable)
#
# ==============================================

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from sosi_rens.parsing import Category, THEME_KEYS


def sorted_counts(counts: Dict[str, int]) -> List[Tuple[str, int]]:
    """Entries ordered by count descending, then key ascending."""
    return sorted(counts.items(), key=lambda item: (-item[1], item[0]))


@dataclass
class CategoryStats:
    """Aggregate counts for all feature blocks of one category."""

    category: Category
    features: int = 0
    obj_types: Dict[str, int] = field(default_factory=dict)
    fields: Dict[str, int] = field(default_factory=dict)
    themes: Dict[str, int] = field(default_factory=dict)
    misplaced_theme_keys: int = 0

    @property
    def theme_key(self) -> Optional[str]:
        return THEME_KEYS.get(self.category)

    def count_obj_type(self, obj_type: str) -> None:
        self.obj_types[obj_type] = self.obj_types.get(obj_type, 0) + 1

    def count_field(self, key: str) -> None:
        self.fields[key] = self.fields.get(key, 0) + 1

    def count_theme(self, code: str) -> None:
        self.themes[code] = self.themes.get(code, 0) + 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "features": self.features,
            "obj_types": dict(self.obj_types),
            "fields": dict(self.fields),
            "theme_key": self.theme_key,
            "themes": dict(self.themes),
            "misplaced_theme_keys": self.misplaced_theme_keys,
        }


@dataclass
class AnalysisResult:
    """Everything the analyzer learned from a single pass over a document."""

    line_count: int = 0
    features_by_section: Dict[str, int] = field(default_factory=dict)
    points: CategoryStats = field(default_factory=lambda: CategoryStats(Category.POINTS))
    lines: CategoryStats = field(default_factory=lambda: CategoryStats(Category.LINES))
    unknown: CategoryStats = field(default_factory=lambda: CategoryStats(Category.UNKNOWN))

    def for_category(self, category) -> CategoryStats:
        category = Category.parse(category)
        if category is Category.POINTS:
            return self.points
        if category is Category.LINES:
            return self.lines
        return self.unknown

    @property
    def total_features(self) -> int:
        return self.points.features + self.lines.features + self.unknown.features

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lines": self.line_count,
            "features_by_section": dict(self.features_by_section),
            "by_category": {
                Category.POINTS.value: self.points.to_dict(),
                Category.LINES.value: self.lines.to_dict(),
            },
            "unknown": self.unknown.to_dict(),
        }
