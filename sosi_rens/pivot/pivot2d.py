# ==============================================
# 2-D pivot (crosstab)
# ==============================================
#
# PURPOSE:
#   Crosstab a primary attribute (rows) against a secondary
#   attribute (columns) for the feature blocks of one category,
#   computed on demand for the chosen pair of fields.
#
# ALGORITHM (two streaming passes, nothing precomputed):
#
#   Pass 1  For each block, collect primary and secondary values.
#           Missing or empty values become "(tom)". Tally both axes
#           and feed every non-empty secondary value into a
#           NumericAccumulator (min/max + reservoir sample).
#           If either field never occurs in the category, stop
#           here with an empty result (grand total 0).
#
#   Between If all secondary values were numeric, build a binner
#           and re-tally the secondary axis by bin label. Pick the
#           Top-N labels on each axis; if anything falls outside,
#           that axis gets an "Andre" bucket.
#
#   Pass 2  Walk the blocks again. For every (primary × secondary)
#           pair of a block, the Cartesian product when either
#           field is multi-valued, increment the cell and its
#           totals. Labels outside the cap count towards "Andre".
#
#   Explosion means one block can land in several cells, so totals
#   can exceed the block count. meta.exploded records when that
#   happened.
#
# ==============================================

import logging
import random
from typing import Dict, List, Optional, Union

from sosi_rens.parsing import Category
from .blocks import BlockValues, iter_block_values
from .numeric import NumericAccumulator, build_binner, parse_number
from .result import (
    OTHER_LABEL,
    TOM_LABEL,
    PivotMeta,
    PivotOptions,
    PivotResult,
    pick_top_keys,
)

logger = logging.getLogger(__name__)


class AxisTally:
    """Label frequencies along one pivot axis."""

    def __init__(self):
        self.counts: Dict[str, int] = {}

    def add(self, label: str, by: int = 1) -> None:
        self.counts[label] = self.counts.get(label, 0) + by

    def select(self, limit: int):
        """
        Pick the labels shown on this axis.

        Returns:
            (labels, kept) where `labels` ends with "Andre" when some
            observed label did not make the cut, and `kept` is the set
            of labels that are shown as themselves
        """
        top = pick_top_keys(self.counts, limit)
        kept = set(top)
        if any(label not in kept for label in self.counts):
            top.append(OTHER_LABEL)
        return top, kept


def _labels(values: Optional[List[str]]) -> List[str]:
    if not values:
        return [TOM_LABEL]
    return [value or TOM_LABEL for value in values]


class _SecondaryNormalizer:
    """Maps a raw secondary label to its bin label (identity when categorical)."""

    def __init__(self, binner=None):
        self.binner = binner

    def __call__(self, label: str) -> str:
        if self.binner is None or label == TOM_LABEL:
            return label
        number = parse_number(label)
        if number is None:
            return TOM_LABEL
        return self.binner.label_for(number)


def pivot_2d(
    text: str,
    category: Union[str, Category],
    primary_key: str,
    secondary_key: str,
    options: Optional[PivotOptions] = None,
) -> PivotResult:
    """
    Compute a crosstab of two attribute keys for one category.

    Args:
        text: Decoded document
        category: "points" / "lines" (or a Category)
        primary_key: Row field (e.g. "OBJTYPE")
        secondary_key: Column field (e.g. "P_TEMA" or a numeric field)
        options: Caps and binning; defaults to PivotOptions()

    Returns:
        PivotResult; empty (grand_total 0) when a key is blank or the
        document has no blocks of the category
    """
    options = options or PivotOptions()
    category = Category.parse(category)
    primary = str(primary_key or "").strip().upper()
    secondary = str(secondary_key or "").strip().upper()

    result = PivotResult(category=category.value, primary_key=primary, secondary_key=secondary)
    if not text or not primary or not secondary:
        return result

    keys = {primary, secondary}

    # --- Pass 1: distributions ---
    primary_tally = AxisTally()
    secondary_tally = AxisTally()
    numeric = NumericAccumulator(
        sample_size=options.quantile_sample_size,
        rng=random.Random(options.seed),
    )
    exploded = False
    primary_seen = secondary_seen = False

    for block in iter_block_values(text, category, keys):
        primary_seen = primary_seen or primary in block
        secondary_seen = secondary_seen or secondary in block
        p_labels, s_labels = _block_labels(block, primary, secondary)
        if len(p_labels) > 1 or len(s_labels) > 1:
            exploded = True
        for label in p_labels:
            primary_tally.add(label)
        for label in s_labels:
            secondary_tally.add(label)
            if label != TOM_LABEL:
                numeric.observe(label)

    if not (primary_seen and secondary_seen):
        logger.debug("Pivot %s × %s (%s): a field never occurs, empty result", primary, secondary, category.value)
        return result

    binner = build_binner(numeric, options.binning_mode, options.numeric_bins)
    normalize = _SecondaryNormalizer(binner)

    binned_tally = AxisTally()
    for label, count in secondary_tally.counts.items():
        binned_tally.add(normalize(label), count)

    result.cols, col_set = binned_tally.select(options.top_columns)
    result.rows, row_set = primary_tally.select(options.row_cap)

    # --- Pass 2: crosstab ---
    for block in iter_block_values(text, category, keys):
        p_labels, s_labels = _block_labels(block, primary, secondary)
        for raw_p in p_labels:
            row = raw_p if raw_p in row_set else OTHER_LABEL
            for raw_s in s_labels:
                col = normalize(raw_s)
                result.add(row, col if col in col_set else OTHER_LABEL)

    for row in result.rows:
        result.row_totals.setdefault(row, 0)
    for col in result.cols:
        result.col_totals.setdefault(col, 0)

    result.meta = PivotMeta(
        exploded=exploded,
        secondary_is_numeric=numeric.is_numeric,
        binning_mode=options.binning_mode.value if binner is not None else None,
    )

    logger.debug(
        "Pivot %s × %s (%s): %d rows, %d cols, total %d%s",
        primary,
        secondary,
        category.value,
        len(result.rows),
        len(result.cols),
        result.grand_total,
        " (exploded)" if exploded else "",
    )
    return result


def _block_labels(block: BlockValues, primary: str, secondary: str):
    return _labels(block.get(primary)), _labels(block.get(secondary))
