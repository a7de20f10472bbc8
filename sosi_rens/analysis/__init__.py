# ==============================================
# COMPONENT 3: AGGREGATE ANALYSIS
# ==============================================
#
# This package turns a decoded SOSI document into aggregate
# statistics in a single streaming pass.
#
# Modules:
# --------
# - category_stats.py  → Typed count tables (CategoryStats, AnalysisResult)
# - analyzer.py        → AggregateAnalyzer + analyze(text)
#
# ==============================================

from .category_stats import CategoryStats, AnalysisResult, sorted_counts
from .analyzer import AggregateAnalyzer, analyze

__all__ = ["CategoryStats", "AnalysisResult", "AggregateAnalyzer", "analyze", "sorted_counts"]
