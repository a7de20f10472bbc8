# ==============================================
# Numeric detection and binning
# ==============================================
#
# PURPOSE:
#   Decide whether a pivot's secondary field is numeric and, if so,
#   turn its raw values into bin labels.
#
# CLASSES:
# --------
# - BinningMode(Enum): EQUAL_WIDTH, QUANTILE
#
# - NumericAccumulator (dataclass)
#     Threaded through pass 1 of the pivot. Tracks global min/max,
#     a reservoir sample bounded by sample_size, and whether any
#     non-numeric value was seen. A single non-numeric value makes
#     the whole field categorical.
#
# - EqualWidthBinner
#     Splits [min, max] into N equal intervals. All intervals are
#     half-open [a–b) except the last, which is closed [a–b].
#
# - QuantileBinner
#     N+1 cut points taken from the sorted reservoir sample; values
#     are assigned by linear scan (N is small).
#
#   Both binners expose label_for(value) -> str. A degenerate range
#   (all values equal) yields exactly one bin.
#
# ==============================================

import bisect
import math
import random
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Union

# Decimal point or decimal comma, optional sign and exponent
_NUMBER_PATTERN = re.compile(r"^[+-]?(?:\d+(?:[.,]\d*)?|[.,]\d+)(?:[eE][+-]?\d+)?$")


class BinningMode(Enum):
    EQUAL_WIDTH = "equal-width"
    QUANTILE = "quantile"

    @classmethod
    def parse(cls, value: Union[str, "BinningMode", None]) -> "BinningMode":
        """Resolve a mode name; anything unrecognized means equal-width."""
        if isinstance(value, BinningMode):
            return value
        for mode in cls:
            if mode.value == str(value or "").strip().lower():
                return mode
        return cls.EQUAL_WIDTH


def parse_number(value: str) -> Optional[float]:
    """
    Parse a SOSI numeric value.

    Examples:
        parse_number("12,5") → 12.5
        parse_number(" 3 ") → 3.0
        parse_number("DN200") → None
    """
    trimmed = str(value or "").strip()
    if not trimmed or not _NUMBER_PATTERN.match(trimmed):
        return None
    number = float(trimmed.replace(",", "."))
    return number if math.isfinite(number) else None


def format_number(value: float) -> str:
    """Compact label text: integral values without a trailing ".0"."""
    value = float(value)
    if value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)


def bin_label(lower: float, upper: float, is_last: bool) -> str:
    closing = "]" if is_last else ")"
    return f"[{format_number(lower)}–{format_number(upper)}{closing}"


@dataclass
class NumericAccumulator:
    """
    Pass-1 state for numeric detection of one field.

    Attributes:
        sample_size: Upper bound on the reservoir sample
        rng: Random source for reservoir replacement (seed it for tests)
    """

    sample_size: int = 50000
    rng: random.Random = field(default_factory=random.Random)

    seen_count: int = 0
    minimum: float = math.inf
    maximum: float = -math.inf
    sample: List[float] = field(default_factory=list)
    non_numeric_seen: bool = False

    def observe(self, raw: str) -> None:
        """Record one non-empty observed value."""
        number = parse_number(raw)
        if number is None:
            self.non_numeric_seen = True
            return

        self.seen_count += 1
        if number < self.minimum:
            self.minimum = number
        if number > self.maximum:
            self.maximum = number

        # Reservoir sampling (Algorithm R)
        capacity = max(1, self.sample_size)
        if len(self.sample) < capacity:
            self.sample.append(number)
        else:
            j = self.rng.randrange(self.seen_count)
            if j < capacity:
                self.sample[j] = number

    @property
    def is_numeric(self) -> bool:
        return self.seen_count > 0 and not self.non_numeric_seen


class EqualWidthBinner:
    """Equal-width bins over the global [min, max] of the field."""

    def __init__(self, minimum: float, maximum: float, bin_count: int):
        if minimum == maximum:
            self.edges = [minimum, maximum]
        else:
            bins = max(1, int(bin_count))
            width = (maximum - minimum) / bins
            self.edges = [minimum] + [minimum + width * i for i in range(1, bins)] + [maximum]

    @property
    def bin_count(self) -> int:
        return max(1, len(self.edges) - 1)

    def assign(self, value: float) -> int:
        bins = self.bin_count
        if bins == 1:
            return 0
        # Same edges as the labels, so a value on an edge opens the bin above
        index = bisect.bisect_right(self.edges, value) - 1
        return max(0, min(bins - 1, index))

    def label_for(self, value: float) -> str:
        index = self.assign(value)
        return bin_label(self.edges[index], self.edges[index + 1], index == self.bin_count - 1)


class QuantileBinner:
    """Bins whose edges are quantiles of a (sampled) value distribution."""

    def __init__(self, sample: Sequence[float], bin_count: int):
        ordered = sorted(sample)
        if not ordered:
            raise ValueError("Quantile binning needs at least one sampled value")

        if ordered[0] == ordered[-1]:
            self.cut_points = [ordered[0], ordered[-1]]
            return

        bins = max(1, int(bin_count))
        cut_points = [ordered[0]]
        for i in range(1, bins):
            index = int((i / bins) * (len(ordered) - 1))
            cut_points.append(ordered[index])
        cut_points.append(ordered[-1])

        # Keep cut points non-decreasing
        for i in range(1, len(cut_points)):
            if cut_points[i] < cut_points[i - 1]:
                cut_points[i] = cut_points[i - 1]
        self.cut_points = cut_points

    @property
    def bin_count(self) -> int:
        return max(1, len(self.cut_points) - 1)

    def assign(self, value: float) -> int:
        bins = self.bin_count
        if bins == 1 or value < self.cut_points[0]:
            return 0
        for i in range(bins):
            lower, upper = self.cut_points[i], self.cut_points[i + 1]
            if i == bins - 1:
                if lower <= value <= upper:
                    return i
            elif lower <= value < upper:
                return i
        # Above the sampled maximum
        return bins - 1

    def label_for(self, value: float) -> str:
        index = self.assign(value)
        return bin_label(self.cut_points[index], self.cut_points[index + 1], index == self.bin_count - 1)


def build_binner(accumulator: NumericAccumulator, mode: BinningMode, bin_count: int):
    """
    Create the binner for a numeric field, or None if the field is not numeric.
    """
    if not accumulator.is_numeric:
        return None
    if mode is BinningMode.QUANTILE:
        return QuantileBinner(accumulator.sample, bin_count)
    return EqualWidthBinner(accumulator.minimum, accumulator.maximum, bin_count)
