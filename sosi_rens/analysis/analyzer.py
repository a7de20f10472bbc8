# ==============================================
# AggregateAnalyzer
# ==============================================
#
# PURPOSE:
#   Walk a decoded SOSI document once and accumulate per-category
#   counts: feature blocks, object types, attribute keys and the
#   category-bound theme codes.
#
# HOW IT WORKS:
#   The analyzer keeps a cursor on the current feature block
#   (its category, and whether the block's object type / theme
#   code has been seen yet). Each feature-start line moves the
#   cursor; every attribute line increments exactly one bucket,
#   the one of the current category.
#
#   Object type and theme code count once per block, first
#   non-empty occurrence wins. A theme key found under the other
#   category (e.g. L_TEMA inside a .PUNKT block) does not count
#   as a theme code. It still shows up in the field counts and
#   is tallied in misplaced_theme_keys so the UI can flag it.
#
# CLASS: AggregateAnalyzer
# ------------------------
#   - observe_line(line: str) -> None
#   - get_result() -> AnalysisResult
#
# FUNCTION:
# ---------
#   - analyze(text: str) -> AnalysisResult
#
# ==============================================

import logging
from typing import Dict

from sosi_rens.parsing import (
    Category,
    THEME_KEYS,
    attribute_depth,
    attribute_key,
    attribute_value,
    category_of,
    is_feature_start,
    is_object_type_line,
    iter_lines,
    section_of,
)
from sosi_rens.parsing.line_classifier import THEME_DEPTH
from .category_stats import AnalysisResult, CategoryStats

logger = logging.getLogger(__name__)

# Theme key → the only category it is valid in
_THEME_CATEGORY: Dict[str, Category] = {key: category for category, key in THEME_KEYS.items()}


class AggregateAnalyzer:
    """
    Single-pass, line-by-line accumulator of document statistics.

    Feed lines in document order with observe_line(), then read the
    totals with get_result().
    """

    def __init__(self):
        self._result = AnalysisResult()
        self._category = Category.UNKNOWN
        self._obj_type_seen = False
        self._theme_seen = False

    def observe_line(self, line: str) -> None:
        """
        Update counters with one line of the document.

        Args:
            line: A single line without its newline
        """
        self._result.line_count += 1
        if not line:
            return

        if is_feature_start(line):
            self._start_block(section_of(line))
            return

        key = attribute_key(line)
        if key is None:
            # Geometry, comments and other raw lines carry no statistics
            return

        stats = self._current_stats()
        stats.count_field(key)

        if is_object_type_line(line):
            if not self._obj_type_seen:
                value = attribute_value(line)
                if value:
                    stats.count_obj_type(value)
                    self._obj_type_seen = True
            return

        bound_category = _THEME_CATEGORY.get(key)
        if bound_category is None or attribute_depth(line) != THEME_DEPTH:
            return

        if bound_category is not self._category:
            stats.misplaced_theme_keys += 1
            return

        # A blank theme line does not claim the block; the first non-empty value counts
        if not self._theme_seen:
            value = attribute_value(line)
            if value:
                stats.count_theme(value)
                self._theme_seen = True

    def get_result(self) -> AnalysisResult:
        return self._result

    def _start_block(self, section) -> None:
        self._category = category_of(section)
        self._obj_type_seen = False
        self._theme_seen = False

        sections = self._result.features_by_section
        sections[section] = sections.get(section, 0) + 1
        self._current_stats().features += 1

    def _current_stats(self) -> CategoryStats:
        return self._result.for_category(self._category)


def analyze(text: str) -> AnalysisResult:
    """
    Produce aggregate statistics for a decoded SOSI document.

    Args:
        text: Full document text (LF or CRLF)

    Returns:
        AnalysisResult with per-category counts
    """
    analyzer = AggregateAnalyzer()
    for line in iter_lines(text):
        analyzer.observe_line(line)

    result = analyzer.get_result()
    logger.debug(
        "Analyzed %d lines: %d point features, %d line features, %d other",
        result.line_count,
        result.points.features,
        result.lines.features,
        result.unknown.features,
    )
    return result
