# ==============================================
# Codec
# ==============================================
#
# PURPOSE:
#   Turn raw SOSI bytes into text and back again.
#
#   SOSI files usually declare their charset in the header:
#
#     .HODE
#     ..TEGNSETT ISO8859-1
#
#   Many exports omit or misstate it, so detection runs in steps:
#     1. Decode the first 64 KiB as Latin-1. Every byte maps to a
#        code point, so the ASCII header is always readable. Scan up
#        to 200 lines, or until the first feature section, for
#        ..TEGNSETT and map the declared name to a Charset.
#     2. No usable declaration → probe the sample as UTF-8. No
#        replacement characters → UTF-8.
#     3. Otherwise fall back to Windows-1252 and flag it.
#
# CLASSES:
# --------
# - Charset(Enum): LATIN1, WIN1252, UTF8
# - EncodingDecision (dataclass): detected, used, declared_in_header,
#   fallback_used
#
# FUNCTIONS:
# ----------
# - detect(data) -> EncodingDecision     never raises
# - decode(data, decision) -> str        undecodable bytes → U+FFFD
# - encode(text, charset) -> bytes       unrepresentable chars → "?"
# - decode_bytes(data) -> (str, EncodingDecision)
#
# ==============================================

import codecs
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

from sosi_rens.exceptions import UnsupportedCharsetError
from sosi_rens.parsing.line_classifier import iter_lines

logger = logging.getLogger(__name__)

SAMPLE_BYTES = 65536
HEADER_SCAN_LINES = 200
REPLACEMENT_CHAR = "\ufffd"

_TEGNSETT_PATTERN = re.compile(r"^\.\.TEGNSETT\s+(\S+)", re.IGNORECASE)

# Sections that carry feature data; the declaration must come before them
_DATA_SECTIONS = (".PUNKT", ".KURVE", ".FLATE", ".TEKST")


class Charset(Enum):
    """
    The three charsets SOSI files are written in.

    The value is the identifier exchanged with callers; `codec_name`
    is what Python's codec registry knows it as.
    """
    LATIN1 = "latin1"
    WIN1252 = "win1252"
    UTF8 = "utf8"

    @property
    def codec_name(self) -> str:
        return _CODEC_NAMES[self]

    @property
    def is_single_byte(self) -> bool:
        return self is not Charset.UTF8

    @classmethod
    def parse(cls, value: Union[str, "Charset"]) -> "Charset":
        """
        Resolve a charset identifier.

        Raises:
            UnsupportedCharsetError: If the identifier is not one of the three charsets
        """
        if isinstance(value, Charset):
            return value
        charset = _CHARSET_ALIASES.get(str(value or "").strip().lower())
        if charset is None:
            raise UnsupportedCharsetError(value)
        return charset


_CODEC_NAMES: Dict[Charset, str] = {
    Charset.LATIN1: "latin-1",
    Charset.WIN1252: "cp1252",
    Charset.UTF8: "utf-8",
}

_CHARSET_ALIASES: Dict[str, Charset] = {
    "latin1": Charset.LATIN1,
    "latin-1": Charset.LATIN1,
    "iso-8859-1": Charset.LATIN1,
    "iso8859-1": Charset.LATIN1,
    "win1252": Charset.WIN1252,
    "windows-1252": Charset.WIN1252,
    "cp1252": Charset.WIN1252,
    "utf8": Charset.UTF8,
    "utf-8": Charset.UTF8,
}


@dataclass(frozen=True)
class EncodingDecision:
    """
    Outcome of charset detection for one document.

    `detected` is what the header declared (or UTF-8 when probing);
    `used` is what the document is actually decoded and re-encoded with.
    """
    detected: Charset
    used: Charset
    declared_in_header: bool = False
    fallback_used: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "detected": self.detected.value,
            "used": self.used.value,
            "declared_in_header": self.declared_in_header,
            "fallback_used": self.fallback_used,
        }

    @classmethod
    def for_charset(cls, charset: Union[str, Charset]) -> "EncodingDecision":
        """A decision that simply uses `charset`, e.g. for re-decoding known output."""
        charset = Charset.parse(charset)
        return cls(detected=charset, used=charset)


def map_declared_charset(name: str) -> Optional[Charset]:
    """
    Map a ..TEGNSETT value to a Charset.

    Matching is by substring, as real files write "ISO8859-1", "ISO-8859-1",
    "WINDOWS-1252", "UTF-8" and so on. Unmapped names (e.g. ISO8859-10,
    ANSI, DOSN8) return None and are treated as undeclared.
    """
    upper = str(name or "").upper()
    if not upper:
        return None
    if "ISO8859-1" in upper or "ISO-8859-1" in upper:
        # ISO8859-10 contains "ISO8859-1" as a prefix; it is a different charset
        if "8859-10" in upper:
            return None
        return Charset.LATIN1
    if "WINDOWS" in upper or "CP1252" in upper or "1252" in upper:
        return Charset.WIN1252
    if "UTF-8" in upper or "UTF8" in upper:
        return Charset.UTF8
    return None


def _find_declared_charset(header_text: str) -> Optional[Charset]:
    for index, raw_line in enumerate(iter_lines(header_text)):
        if index >= HEADER_SCAN_LINES:
            break
        line = raw_line.strip()
        match = _TEGNSETT_PATTERN.match(line)
        if match:
            return map_declared_charset(match.group(1))
        if line.upper().startswith(_DATA_SECTIONS):
            break
    return None


def _utf8_looks_broken(sample: bytes) -> bool:
    # Incremental decode with final=False so a multibyte sequence cut at the
    # sample boundary is not reported as invalid
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    return REPLACEMENT_CHAR in decoder.decode(sample, final=False)


def detect(data: bytes) -> EncodingDecision:
    """
    Decide which charset `data` is written in.

    Args:
        data: Raw file content

    Returns:
        An EncodingDecision; detection always succeeds
    """
    sample = bytes(data[:SAMPLE_BYTES])

    declared = _find_declared_charset(sample.decode("latin-1"))
    if declared is not None:
        logger.debug("Charset declared in header: %s", declared.value)
        return EncodingDecision(
            detected=declared,
            used=declared,
            declared_in_header=True,
            fallback_used=False,
        )

    if not _utf8_looks_broken(sample):
        return EncodingDecision(detected=Charset.UTF8, used=Charset.UTF8)

    logger.debug("Sample is not valid UTF-8; falling back to %s", Charset.WIN1252.value)
    return EncodingDecision(
        detected=Charset.UTF8,
        used=Charset.WIN1252,
        declared_in_header=False,
        fallback_used=True,
    )


def decode(data: bytes, decision: EncodingDecision) -> str:
    """Decode `data` with the charset chosen in `decision`."""
    return bytes(data).decode(decision.used.codec_name, errors="replace")


def encode(text: str, charset: Union[str, Charset]) -> bytes:
    """
    Encode `text` to bytes in `charset`.

    Characters a single-byte charset cannot represent become "?".

    Raises:
        UnsupportedCharsetError: If `charset` is not one of the supported identifiers
    """
    charset = Charset.parse(charset)
    return text.encode(charset.codec_name, errors="replace")


def decode_bytes(data: bytes) -> Tuple[str, EncodingDecision]:
    """Detect and decode in one step."""
    decision = detect(data)
    return decode(data, decision), decision
