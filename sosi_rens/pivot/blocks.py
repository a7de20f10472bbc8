# ==============================================
# Block walker
# ==============================================
#
# PURPOSE:
#   Stream a document and yield, for every feature block of one
#   category, the values of the requested attribute keys. Only the
#   current block's values are held in memory, so the frequency
#   and pivot passes stay bounded by block size, not file size.
#
#   Yielded mapping (key → values in document order):
#
#     {"P_TEMA": ["KUM"], "DIMENSJON": ["200", "250"]}
#
#   A key that occurs twice in one block gives a two-item list
#   (a multi-valued field). A key absent from the block is absent
#   from the mapping.
#
#   OBJTYPE is special: only the depth-2 "..OBJTYPE" line counts,
#   and only its first non-empty value, so a block never has more
#   than one object type.
#
# ==============================================

from typing import Dict, Iterable, Iterator, List, Optional, Union

from sosi_rens.parsing import (
    Category,
    OBJTYPE_KEY,
    attribute_key,
    attribute_value,
    category_of,
    is_feature_start,
    is_object_type_line,
    iter_lines,
    section_of,
)

BlockValues = Dict[str, List[str]]


def iter_block_values(
    text: str,
    category: Union[str, Category],
    keys: Iterable[str],
) -> Iterator[BlockValues]:
    """
    Yield the requested attribute values of each block in `category`.

    Args:
        text: Decoded document
        category: Category whose blocks are visited
        keys: Attribute keys to collect (case-insensitive)

    Yields:
        One mapping per feature block of the category, including blocks
        where none of the keys occur (as an empty mapping)
    """
    category = Category.parse(category)
    wanted = {str(k).upper() for k in keys if k}

    values: Optional[BlockValues] = None

    for line in iter_lines(text):
        if not line:
            continue

        if is_feature_start(line):
            if values is not None:
                yield values
            in_target = category_of(section_of(line)) is category
            values = {} if in_target else None
            continue

        if values is None:
            continue

        key = attribute_key(line)
        if key is None or key not in wanted:
            continue

        if key == OBJTYPE_KEY:
            if not is_object_type_line(line) or OBJTYPE_KEY in values:
                continue
            value = attribute_value(line)
            if value:
                values[OBJTYPE_KEY] = [value]
            continue

        values.setdefault(key, []).append(attribute_value(line))

    if values is not None:
        yield values
