# ==============================================
# SosiDocument: Orchestrator
# ==============================================
#
# PURPOSE:
#   The one object callers (CLI, web layer) work with. It ties
#   the five components together around a single uploaded file:
#
#   ┌────────────────────────────────────────────────────┐
#   │                    SosiDocument                    │
#   │                                                    │
#   │  bytes ──► Codec.detect / decode ──► text          │
#   │                                       │            │
#   │            ┌──────────────┬───────────┼─────────┐  │
#   │            ▼              ▼           ▼         │  │
#   │        analyze()   field_frequency()  clean()   │  │
#   │                     pivot_2d()         │        │  │
#   │                                        ▼        │  │
#   │                 Codec.encode(text, decision.used)  │
#   │                                        │           │
#   │                                        ▼           │
#   │                                      bytes         │
#   └────────────────────────────────────────────────────┘
#
#   The encoding decision is made once per upload and reused for the
#   output, so a Latin-1 file comes back as Latin-1, UTF-8 as UTF-8.
#
# CLASS: SosiDocument
# -------------------
#   - from_bytes(data, filename=None) -> SosiDocument   (classmethod)
#   - from_path(path) -> SosiDocument                   (classmethod)
#   - analyze() -> AnalysisResult                       (cached)
#   - field_frequency(category, key) -> list[(str, int)]
#   - pivot_2d(category, primary, secondary, options=None) -> PivotResult
#   - default_selection() -> Selection
#   - clean(selection, field_mode) -> str
#   - clean_bytes(selection, field_mode) -> bytes
#   - extract_excluded_bytes(selection) -> bytes
#   - cleaned_filename(suffix="-renset") -> str
#
# ==============================================

import logging
import re
from pathlib import Path
from typing import List, Optional, Tuple, Union

from sosi_rens.analysis import AnalysisResult, analyze
from sosi_rens.cleaning import FieldMode, Selection, clean, extract_excluded
from sosi_rens.encoding import EncodingDecision, decode_bytes, encode
from sosi_rens.parsing import Category
from sosi_rens.pivot import PivotOptions, PivotResult, field_frequency, pivot_2d

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "fil.sos"


class SosiDocument:
    """
    A decoded SOSI upload plus the encoding decision it was read with.
    """

    def __init__(self, text: str, encoding: EncodingDecision, filename: Optional[str] = None, size_bytes: int = 0):
        self.text = text
        self.encoding = encoding
        self.filename = filename
        self.size_bytes = size_bytes
        self._analysis: Optional[AnalysisResult] = None

    @classmethod
    def from_bytes(cls, data: bytes, filename: Optional[str] = None) -> "SosiDocument":
        """
        Detect the charset of `data` and decode it.

        Args:
            data: Raw file content
            filename: Original name, used only for naming output

        Returns:
            A SosiDocument ready for analysis and cleaning
        """
        text, decision = decode_bytes(data)
        if decision.fallback_used:
            logger.warning(
                "%s: no charset declared and content is not valid UTF-8; decoded as %s",
                filename or "input",
                decision.used.value,
            )
        else:
            logger.info(
                "%s: decoded as %s%s",
                filename or "input",
                decision.used.value,
                " (declared in header)" if decision.declared_in_header else "",
            )
        return cls(text, decision, filename=filename, size_bytes=len(data))

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "SosiDocument":
        path = Path(path)
        return cls.from_bytes(path.read_bytes(), filename=path.name)

    # ======================================
    # Analysis / pivot
    # ======================================
    def analyze(self) -> AnalysisResult:
        """Aggregate statistics, computed once and cached (the text never changes)."""
        if self._analysis is None:
            self._analysis = analyze(self.text)
        return self._analysis

    def field_frequency(self, category: Union[str, Category], key: str) -> List[Tuple[str, int]]:
        return field_frequency(self.text, category, key)

    def pivot_2d(
        self,
        category: Union[str, Category],
        primary_key: str,
        secondary_key: str,
        options: Optional[PivotOptions] = None,
    ) -> PivotResult:
        return pivot_2d(self.text, category, primary_key, secondary_key, options)

    # ======================================
    # Cleaning
    # ======================================
    def default_selection(self) -> Selection:
        """Keep everything the analyzer found; the starting point before the user narrows it."""
        return Selection.from_analysis(self.analyze())

    def clean(self, selection: Selection, field_mode: Union[str, FieldMode] = FieldMode.REMOVE_FIELDS) -> str:
        return clean(self.text, selection, field_mode)

    def clean_bytes(self, selection: Selection, field_mode: Union[str, FieldMode] = FieldMode.REMOVE_FIELDS) -> bytes:
        """Clean and re-encode with the charset the input was decoded with."""
        return encode(self.clean(selection, field_mode), self.encoding.used)

    def extract_excluded_bytes(self, selection: Selection) -> bytes:
        return encode(extract_excluded(self.text, selection), self.encoding.used)

    def cleaned_filename(self, suffix: str = "-renset") -> str:
        """
        Output name for the cleaned file.

        Examples:
            "ledninger.sos" → "ledninger-renset.sos"
            "eksport" → "eksport-renset"
        """
        name = self.filename or DEFAULT_FILENAME
        return re.sub(r"(\.[^.]+)?$", lambda m: f"{suffix}{m.group(1) or ''}", name, count=1)

    def summary(self) -> dict:
        """File, encoding and analysis in one JSON-serializable mapping."""
        return {
            "file": {"name": self.filename, "size_bytes": self.size_bytes},
            "encoding": self.encoding.to_dict(),
            "analysis": self.analyze().to_dict(),
        }
