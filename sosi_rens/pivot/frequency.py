"""
One-dimensional value frequency of a single attribute key.
"""

import logging
from typing import Dict, Union

from sosi_rens.parsing import Category
from .blocks import iter_block_values
from .result import TOM_LABEL, FrequencyList

logger = logging.getLogger(__name__)


def field_frequency(text: str, category: Union[str, Category], key: str) -> FrequencyList:
    """
    Count every value of `key` across the feature blocks of `category`.

    Each occurrence counts, so a key repeated inside one block contributes
    once per line. Empty values are reported as "(tom)". Blocks without
    the key contribute nothing.

    Args:
        text: Decoded document
        category: "points" / "lines" (or a Category)
        key: Attribute key, case-insensitive

    Returns:
        (value, count) pairs sorted by count descending, then value ascending
    """
    key_upper = str(key or "").strip().upper()
    if not text or not key_upper:
        return []

    counts: Dict[str, int] = {}
    for block in iter_block_values(text, category, [key_upper]):
        for value in block.get(key_upper, ()):
            label = value or TOM_LABEL
            counts[label] = counts.get(label, 0) + 1

    logger.debug("Frequency of %s in %s: %d distinct values", key_upper, category, len(counts))
    return sorted(counts.items(), key=lambda item: (-item[1], item[0]))
