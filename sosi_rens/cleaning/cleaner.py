# ==============================================
# Selective rewriter
# ==============================================
#
# PURPOSE:
#   Rebuild a SOSI document keeping only the selected object types
#   and fields. Everything the rewriter does not positively
#   recognize is passed through byte-for-byte.
#
# BLOCK DECISIONS (in order):
# ---------------------------
#   1. Lines before the first feature start → kept verbatim
#   2. Block of an unknown section (.HODE, .SLUTT, .FLATE, ...) → kept
#   3. Block without an object type → kept unmodified
#   4. Block carrying an excluded SID/PSID/LSID → dropped
#   5. Block whose EIER / STATUS is outside a non-empty allow-set → dropped
#   6. Block whose object type is not selected → dropped
#   7. Otherwise → attribute lines filtered (see below)
#
# LINE DECISIONS inside a kept block:
# -----------------------------------
#   - feature start, geometry/raw lines, comments  → kept
#   - mandatory keys (OBJTYPE, EGS_PUNKT, EGS_LEDNING) → kept
#   - depth-2 group headers without a value          → kept
#   - selected keys                                 → kept
#   - anything else → dropped (remove-fields) or reduced to
#                     markers + key (clear-values)
#
# ==============================================

import logging
from typing import Iterator, List, Optional, Tuple, Union

from sosi_rens.parsing import (
    Category,
    MANDATORY_FIELDS,
    attribute_depth,
    attribute_key,
    attribute_value,
    category_of,
    is_comment,
    is_feature_start,
    is_object_type_line,
    iter_lines,
    newline_of,
    section_of,
    strip_attribute_value,
)
from .selection import ID_TYPES, FieldMode, IdRef, Selection

logger = logging.getLogger(__name__)

OWNER_KEY = "EIER"
STATUS_KEY = "STATUS"
GROUP_HEADER_DEPTH = 2
# Identifiers, owner and status live inside the EGS groups
GROUP_MEMBER_DEPTH = 3

Segment = Tuple[Optional[str], List[str]]


def iter_segments(text: str) -> Iterator[Segment]:
    """
    Split a document into pass-through lines and feature blocks.

    Yields:
        (None, [line]) for each line before the first feature start, and
        (section, block_lines) for each feature block
    """
    section: Optional[str] = None
    block: List[str] = []

    for line in iter_lines(text):
        if is_feature_start(line):
            if block:
                yield section, block
            section = section_of(line)
            block = [line]
        elif block:
            block.append(line)
        else:
            yield None, [line]

    if block:
        yield section, block


def block_obj_type(lines: List[str]) -> Optional[str]:
    """First non-empty depth-2 OBJTYPE value of a block."""
    for line in lines:
        if is_object_type_line(line):
            value = attribute_value(line)
            if value:
                return value
    return None


def block_ids(lines: List[str]) -> List[IdRef]:
    """(id_type, id) pairs of the SID/PSID/LSID lines in a block."""
    ids = []
    for line in lines:
        if attribute_depth(line) != GROUP_MEMBER_DEPTH:
            continue
        key = attribute_key(line)
        if key in ID_TYPES:
            tokens = attribute_value(line).split()
            if tokens:
                ids.append((key, tokens[0]))
    return ids


def block_group_value(lines: List[str], key: str) -> Optional[str]:
    """First token of the first non-empty depth-3 `key` line, e.g. EIER or STATUS."""
    for line in lines:
        if attribute_depth(line) == GROUP_MEMBER_DEPTH and attribute_key(line) == key:
            tokens = attribute_value(line).split()
            if tokens:
                return tokens[0]
    return None


def _is_excluded(lines: List[str], category: Category, selection: Selection) -> bool:
    excluded = selection.excluded_ids(category)
    if excluded and any(ref in excluded for ref in block_ids(lines)):
        return True

    owners = selection.owners(category)
    if owners:
        owner = block_group_value(lines, OWNER_KEY)
        if owner and owner.upper() not in owners:
            return True

    statuses = selection.statuses(category)
    if statuses:
        status = block_group_value(lines, STATUS_KEY)
        if status and status.upper() not in statuses:
            return True

    return False


def filter_block_lines(
    lines: List[str],
    category: Category,
    selection: Selection,
    field_mode: FieldMode,
) -> List[str]:
    """
    Apply field selection to the lines of one kept block.

    Args:
        lines: The block, starting with its feature-start line
        category: Category of the block
        selection: User selection
        field_mode: What to do with unselected attribute lines

    Returns:
        The rewritten block lines
    """
    keep_fields = selection.fields(category)
    out = []

    for line in lines:
        if is_feature_start(line) or is_comment(line) or not line.startswith("."):
            out.append(line)
            continue

        key = attribute_key(line)
        if key is None or key in MANDATORY_FIELDS:
            out.append(line)
            continue

        # Group headers establish nesting; field selection targets leaf attributes
        if attribute_depth(line) == GROUP_HEADER_DEPTH and not attribute_value(line):
            out.append(line)
            continue

        if key in keep_fields:
            out.append(line)
        elif field_mode is FieldMode.CLEAR_VALUES:
            out.append(strip_attribute_value(line))

    return out


def clean(
    text: str,
    selection: Selection,
    field_mode: Union[str, FieldMode] = FieldMode.REMOVE_FIELDS,
) -> str:
    """
    Keep only the selected object types and fields of a document.

    Args:
        text: Decoded document
        selection: Object types / fields to keep per category
        field_mode: "remove-fields" or "clear-values"

    Returns:
        The cleaned document, using the input's newline convention
    """
    field_mode = FieldMode.parse(field_mode)
    newline = newline_of(text)
    out: List[str] = []
    kept = dropped = passed = 0

    for section, lines in iter_segments(text):
        category = category_of(section)
        if category is Category.UNKNOWN:
            out.extend(lines)
            if section is not None:
                passed += 1
            continue

        obj_type = block_obj_type(lines)
        if obj_type is None:
            # No object type: pass through unmodified
            out.extend(lines)
            passed += 1
            continue

        if _is_excluded(lines, category, selection) or not selection.keeps_obj_type(category, obj_type):
            dropped += 1
            continue

        out.extend(filter_block_lines(lines, category, selection, field_mode))
        kept += 1

    logger.debug(
        "Cleaned document (%s): %d blocks kept, %d dropped, %d passed through",
        field_mode.value,
        kept,
        dropped,
        passed,
    )
    return newline.join(out)


def extract_excluded(text: str, selection: Selection) -> str:
    """
    Build a document holding only the blocks matched by the excluded-ID lists.

    Header, footer and other unclassified sections are kept, so the result
    is itself a loadable SOSI file for reviewing what a clean will remove.
    """
    newline = newline_of(text)
    out: List[str] = []

    for section, lines in iter_segments(text):
        category = category_of(section)
        if category is Category.UNKNOWN:
            out.extend(lines)
            continue

        excluded = selection.excluded_ids(category)
        if excluded and any(ref in excluded for ref in block_ids(lines)):
            out.extend(lines)

    return newline.join(out)
