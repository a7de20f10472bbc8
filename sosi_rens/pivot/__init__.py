# ==============================================
# COMPONENT 4: FREQUENCY / PIVOT ENGINE
# ==============================================
#
# On-demand value statistics for chosen attribute keys.
#
# Modules:
# --------
# - blocks.py     → Streaming walker yielding per-block key values
# - numeric.py    → Numeric detection, reservoir sample, binners
# - frequency.py  → field_frequency(text, category, key)
# - pivot2d.py    → pivot_2d(text, category, primary, secondary, options)
# - result.py     → PivotOptions, PivotResult, labels
#
# ==============================================

from .blocks import iter_block_values
from .numeric import BinningMode, NumericAccumulator, EqualWidthBinner, QuantileBinner, parse_number
from .result import PivotOptions, PivotMeta, PivotResult, TOM_LABEL, OTHER_LABEL
from .frequency import field_frequency
from .pivot2d import pivot_2d

__all__ = [
    "iter_block_values",
    "BinningMode",
    "NumericAccumulator",
    "EqualWidthBinner",
    "QuantileBinner",
    "parse_number",
    "PivotOptions",
    "PivotMeta",
    "PivotResult",
    "TOM_LABEL",
    "OTHER_LABEL",
    "field_frequency",
    "pivot_2d",
]
