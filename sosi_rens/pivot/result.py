# ==============================================
# Pivot data classes
# ==============================================
#
# PURPOSE:
#   Inputs and outputs of the pivot engine.
#
# CLASSES:
# --------
# - PivotOptions (dataclass)
#     top_columns: int          → column cap before "Andre" (default 25)
#     row_cap: int              → row cap before "Andre" (default 200)
#     numeric_bins: int         → bins for a numeric secondary (default 10)
#     binning_mode: BinningMode → equal-width | quantile
#     quantile_sample_size: int → reservoir bound (default 50000)
#     seed: int | None          → reservoir RNG seed
#
# - PivotMeta (dataclass)
#     exploded: bool            → a multi-valued field was exploded; totals
#                                 can then exceed the number of blocks
#     secondary_is_numeric: bool
#     binning_mode: str | None  → mode actually applied, None if categorical
#
# - PivotResult (dataclass)
#     rows, cols: list[str]     → capped labels, "Andre" last when used
#     cells: dict[row][col]     → sparse counts
#     row_totals, col_totals: dict[str, int]
#     grand_total: int
#     meta: PivotMeta
#
# ==============================================

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from sosi_rens.config import get_config
from .numeric import BinningMode

# Label for a block where the field is missing or empty
TOM_LABEL = "(tom)"

# Label of the bucket absorbing labels outside the Top-N cap
OTHER_LABEL = "Andre"


def pick_top_keys(counts: Dict[str, int], limit: int) -> List[str]:
    """Keys of the `limit` largest counts, ties broken by key ascending."""
    ordered = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return [key for key, _ in ordered[:max(0, limit)]]


@dataclass
class PivotOptions:
    """Tuning knobs for pivot_2d."""
    top_columns: int = 25
    row_cap: int = 200
    numeric_bins: int = 10
    binning_mode: BinningMode = BinningMode.EQUAL_WIDTH
    quantile_sample_size: int = 50000
    seed: Optional[int] = None

    def __post_init__(self):
        self.binning_mode = BinningMode.parse(self.binning_mode)

    @classmethod
    def from_config(cls, config=None) -> "PivotOptions":
        """
        Build options from the environment configuration.

        Args:
            config: A PivotConfig; defaults to get_config().pivot
        """
        if config is None:
            config = get_config().pivot
        return cls(
            top_columns=config.top_columns,
            row_cap=config.row_cap,
            numeric_bins=config.numeric_bins,
            binning_mode=BinningMode.parse(config.binning_mode),
            quantile_sample_size=config.quantile_sample_size,
            seed=config.seed,
        )


@dataclass
class PivotMeta:
    exploded: bool = False
    secondary_is_numeric: bool = False
    binning_mode: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "exploded": self.exploded,
            "secondary_is_numeric": self.secondary_is_numeric,
            "binning_mode": self.binning_mode,
        }


@dataclass
class PivotResult:
    """Crosstab of one primary field against one secondary field."""

    category: str = ""
    primary_key: str = ""
    secondary_key: str = ""
    rows: List[str] = field(default_factory=list)
    cols: List[str] = field(default_factory=list)
    cells: Dict[str, Dict[str, int]] = field(default_factory=dict)
    row_totals: Dict[str, int] = field(default_factory=dict)
    col_totals: Dict[str, int] = field(default_factory=dict)
    grand_total: int = 0
    meta: PivotMeta = field(default_factory=PivotMeta)

    def cell(self, row: str, col: str) -> int:
        return self.cells.get(row, {}).get(col, 0)

    def add(self, row: str, col: str) -> None:
        row_cells = self.cells.setdefault(row, {})
        row_cells[col] = row_cells.get(col, 0) + 1
        self.row_totals[row] = self.row_totals.get(row, 0) + 1
        self.col_totals[col] = self.col_totals.get(col, 0) + 1
        self.grand_total += 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "primary_key": self.primary_key,
            "secondary_key": self.secondary_key,
            "rows": list(self.rows),
            "cols": list(self.cols),
            "cells": {row: dict(cols) for row, cols in self.cells.items()},
            "row_totals": dict(self.row_totals),
            "col_totals": dict(self.col_totals),
            "grand_total": self.grand_total,
            "meta": self.meta.to_dict(),
        }


FrequencyList = List[Tuple[str, int]]
