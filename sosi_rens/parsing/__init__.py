# ==============================================
# COMPONENT 2: LINE CLASSIFIER
# ==============================================
#
# Pure, stateless functions over one SOSI line at a time.
# The analyzer, the pivot engine and the rewriter all walk the
# document through these same functions, so they agree on where
# each feature block starts and which category it belongs to.
#
# Modules:
# --------
# - category.py         → Category enum + fixed section lookup table
# - line_classifier.py  → Line role detection and key/value extraction
#
# ==============================================

from .category import Category, category_of, SECTION_CATEGORIES
from .line_classifier import (
    OBJTYPE_KEY,
    THEME_KEYS,
    MANDATORY_FIELDS,
    is_feature_start,
    section_of,
    attribute_depth,
    attribute_key,
    attribute_value,
    strip_attribute_value,
    is_object_type_line,
    is_comment,
    iter_lines,
    newline_of,
)

__all__ = [
    "Category",
    "category_of",
    "SECTION_CATEGORIES",
    "OBJTYPE_KEY",
    "THEME_KEYS",
    "MANDATORY_FIELDS",
    "is_feature_start",
    "section_of",
    "attribute_depth",
    "attribute_key",
    "attribute_value",
    "strip_attribute_value",
    "is_object_type_line",
    "is_comment",
    "iter_lines",
    "newline_of",
]
