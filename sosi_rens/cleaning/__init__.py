# ==============================================
# COMPONENT 5: SELECTIVE FILTER / REWRITER
# ==============================================
#
# Rebuilds a document keeping only the selected object types
# and fields, passing unrecognized content through untouched.
#
# Modules:
# --------
# - selection.py  → Selection, FieldMode, JSON persistence format
# - cleaner.py    → clean(text, selection, field_mode), extract_excluded
#
# ==============================================

from .selection import Selection, FieldMode
from .cleaner import clean, extract_excluded, iter_segments

__all__ = ["Selection", "FieldMode", "clean", "extract_excluded", "iter_segments"]
