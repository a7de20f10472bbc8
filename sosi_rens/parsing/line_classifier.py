# ==============================================
# Line Classifier
# ==============================================
#
# PURPOSE:
#   Recognize the role of a single SOSI line. The grammar is a
#   nested-dot text format:
#
#     .HODE                    ← feature start (1 dot + letters)
#     ..TEGNSETT UTF-8         ← attribute, depth 2
#     .PUNKT 1:                ← feature start
#     ..OBJTYPE Kum            ← attribute, depth 2 (object type)
#     ..EGS_PUNKT              ← group header, depth 2, no value
#     ...P_TEMA KUM            ← attribute, depth 3 (nested)
#     ..NØH                    ← group header
#     6650000 600000 100       ← geometry / raw (no leading dot)
#     !comment                 ← comment (no leading dot)
#
# FUNCTIONS:
# ----------
#   - is_feature_start(line) -> bool
#   - section_of(line) -> str | None         ".PUNKT", ".KURVE", ...
#   - attribute_depth(line) -> int           0 when not an attribute
#   - attribute_key(line) -> str | None      uppercased
#   - attribute_value(line) -> str           trimmed, may be ""
#   - strip_attribute_value(line) -> str     marker run + key only
#   - is_object_type_line(line) -> bool      depth-2 OBJTYPE only
#   - is_comment(line) -> bool
#   - iter_lines(text) -> Iterator[str]      streaming, LF/CRLF aware
#   - newline_of(text) -> str
#
# ==============================================

import re
from typing import Dict, FrozenSet, Iterator, Optional

from .category import Category

OBJTYPE_KEY = "OBJTYPE"
OBJTYPE_DEPTH = 2

# Theme-code keys are bound to one category each and live one level down
THEME_KEYS: Dict[Category, str] = {
    Category.POINTS: "P_TEMA",
    Category.LINES: "L_TEMA",
}
THEME_DEPTH = 3

MANDATORY_FIELDS: FrozenSet[str] = frozenset({"OBJTYPE", "EGS_PUNKT", "EGS_LEDNING"})

COMMENT_MARKER = "!"

_LETTERS = "A-Za-zÆØÅæøå"
_FEATURE_START_PATTERN = re.compile(rf"^\.(?!\.)[{_LETTERS}]+\b")
_SECTION_PATTERN = re.compile(rf"^\.(?!\.)\s*([{_LETTERS}]+)")
_ATTRIBUTE_PATTERN = re.compile(r"^(\.{2,})([^\s.]\S*)")


def is_feature_start(line: str) -> bool:
    """True for a single-dot section line such as ".PUNKT 12:" (never "..X")."""
    return bool(_FEATURE_START_PATTERN.match(line))


def section_of(line: str) -> Optional[str]:
    """
    Extract the uppercased section name of a feature-start line.

    Examples:
        section_of(".kurve 7:") → ".KURVE"
        section_of("..OBJTYPE Kum") → None
    """
    match = _SECTION_PATTERN.match(line)
    if not match:
        return None
    return f".{match.group(1).upper()}"


def attribute_depth(line: str) -> int:
    """Length of the leading dot run of an attribute line, or 0."""
    match = _ATTRIBUTE_PATTERN.match(line)
    return len(match.group(1)) if match else 0


def attribute_key(line: str) -> Optional[str]:
    """Uppercased key of an attribute line (two or more leading dots)."""
    match = _ATTRIBUTE_PATTERN.match(line)
    return match.group(2).upper() if match else None


def attribute_value(line: str) -> str:
    """Everything after the key, trimmed. Empty for group headers and non-attributes."""
    match = _ATTRIBUTE_PATTERN.match(line)
    if not match:
        return ""
    return line[match.end():].strip()


def strip_attribute_value(line: str) -> str:
    """
    Keep only the marker run and key of an attribute line.

    Examples:
        strip_attribute_value("...DYBDE 1.5 ") → "...DYBDE"
        strip_attribute_value("6650000 600000") → "6650000 600000"
    """
    match = _ATTRIBUTE_PATTERN.match(line)
    return line[:match.end()] if match else line


def is_object_type_line(line: str) -> bool:
    """True only for "..OBJTYPE" at depth 2; a nested "...OBJTYPE" is a plain attribute."""
    match = _ATTRIBUTE_PATTERN.match(line)
    return bool(
        match
        and len(match.group(1)) == OBJTYPE_DEPTH
        and match.group(2).upper() == OBJTYPE_KEY
    )


def is_comment(line: str) -> bool:
    return line.startswith(COMMENT_MARKER)


def iter_lines(text: str) -> Iterator[str]:
    """
    Yield the lines of `text` one at a time without building a list.

    Splits on LF and drops a trailing CR, so LF and CRLF documents yield
    the same lines. A trailing newline yields a final empty line, which
    lets the rewriter reproduce it when joining.
    """
    start = 0
    while True:
        idx = text.find("\n", start)
        if idx == -1:
            last = text[start:]
            yield last[:-1] if last.endswith("\r") else last
            return
        line = text[start:idx]
        yield line[:-1] if line.endswith("\r") else line
        start = idx + 1


def newline_of(text: str) -> str:
    """The newline convention of a document: CRLF if any CRLF is present, else LF."""
    return "\r\n" if "\r\n" in text else "\n"
