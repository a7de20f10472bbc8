# ==============================================
# Selection (Data Classes)
# ==============================================
#
# PURPOSE:
#   The user's declarative keep-list, consumed by the rewriter.
#
# PERSISTED FORMAT (JSON):
# ------------------------
#   {
#     "objTypesByCategory": {"points": ["Kum"], "lines": []},
#     "fieldsByCategory":   {"points": ["P_TEMA"], "lines": ["L_TEMA"]},
#     "excludedByCategory": {"points": [{"idType": "SID", "id": "123"}]},
#     "eierByCategory":     {"lines": ["K"]},
#     "statusByCategory":   {"lines": ["I"]}
#   }
#
#   Only the first two keys are required by the web app; the
#   other three are optional block filters. Category names may be
#   "points"/"lines" or the app's "punkter"/"ledninger".
#
# SEMANTICS:
# ----------
#   - objTypes: empty list → keep every object type
#   - fields:   the keys to keep; an empty list keeps only the
#               mandatory fields and group headers
#   - excluded: blocks carrying one of these SID/PSID/LSID are dropped
#   - eier / status: non-empty list → blocks with a different
#               EIER / STATUS are dropped; blocks without one stay
#
# ENUMS:
# ------
# - FieldMode(Enum): REMOVE_FIELDS, CLEAR_VALUES
#
# ==============================================

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Set, Tuple, Union

from sosi_rens.exceptions import InvalidSelectionError
from sosi_rens.parsing import Category

logger = logging.getLogger(__name__)

ID_TYPES = ("SID", "PSID", "LSID")

IdRef = Tuple[str, str]


class FieldMode(Enum):
    """
    How the rewriter treats an unselected attribute line.

    - REMOVE_FIELDS: drop the line
    - CLEAR_VALUES: keep the markers and key, drop the value
    """
    REMOVE_FIELDS = "remove-fields"
    CLEAR_VALUES = "clear-values"

    @classmethod
    def parse(cls, value: Union[str, "FieldMode", None]) -> "FieldMode":
        """Anything other than "clear-values" means remove-fields."""
        if isinstance(value, FieldMode):
            return value
        if str(value or "").strip().lower() == cls.CLEAR_VALUES.value:
            return cls.CLEAR_VALUES
        return cls.REMOVE_FIELDS


def _empty_by_category() -> Dict[Category, set]:
    return {category: set() for category in Category.known()}


@dataclass
class Selection:
    """
    Object types and field keys to keep, per category.

    Object types are case-sensitive; field keys, EIER and STATUS values
    are compared uppercased.
    """

    obj_types_by_category: Dict[Category, Set[str]] = field(default_factory=_empty_by_category)
    fields_by_category: Dict[Category, Set[str]] = field(default_factory=_empty_by_category)
    excluded_ids_by_category: Dict[Category, Set[IdRef]] = field(default_factory=_empty_by_category)
    owners_by_category: Dict[Category, Set[str]] = field(default_factory=_empty_by_category)
    statuses_by_category: Dict[Category, Set[str]] = field(default_factory=_empty_by_category)

    # ======================================
    # Lookups used by the rewriter
    # ======================================
    def obj_types(self, category: Category) -> Set[str]:
        return self.obj_types_by_category.get(category, set())

    def fields(self, category: Category) -> Set[str]:
        return self.fields_by_category.get(category, set())

    def excluded_ids(self, category: Category) -> Set[IdRef]:
        return self.excluded_ids_by_category.get(category, set())

    def owners(self, category: Category) -> Set[str]:
        return self.owners_by_category.get(category, set())

    def statuses(self, category: Category) -> Set[str]:
        return self.statuses_by_category.get(category, set())

    def keeps_obj_type(self, category: Category, obj_type: str) -> bool:
        """An empty keep-set keeps everything."""
        keep = self.obj_types(category)
        return not keep or obj_type in keep

    # ======================================
    # Construction
    # ======================================
    @classmethod
    def build(
        cls,
        obj_types: Mapping[Any, Iterable[str]] = None,
        fields: Mapping[Any, Iterable[str]] = None,
    ) -> "Selection":
        """
        Convenience constructor from plain mappings.

        Example:
            Selection.build(obj_types={"points": ["Kum"]}, fields={"points": ["P_TEMA"]})
        """
        selection = cls()
        for name, values in (obj_types or {}).items():
            category = Category.parse(name)
            if category is not Category.UNKNOWN:
                selection.obj_types_by_category[category] = {str(v) for v in values}
        for name, values in (fields or {}).items():
            category = Category.parse(name)
            if category is not Category.UNKNOWN:
                selection.fields_by_category[category] = {str(v).upper() for v in values}
        return selection

    @classmethod
    def from_analysis(cls, analysis) -> "Selection":
        """
        A selection that keeps every object type and field the analyzer saw.

        Args:
            analysis: AnalysisResult of the document
        """
        selection = cls()
        for category in Category.known():
            stats = analysis.for_category(category)
            selection.obj_types_by_category[category] = set(stats.obj_types)
            selection.fields_by_category[category] = set(stats.fields)
        return selection

    # ======================================
    # Serialization
    # ======================================
    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to the persisted JSON shape (lists sorted for stable output).
        """
        def lists(by_category: Dict[Category, Set[str]]) -> Dict[str, list]:
            return {c.value: sorted(by_category.get(c, set())) for c in Category.known()}

        return {
            "objTypesByCategory": lists(self.obj_types_by_category),
            "fieldsByCategory": lists(self.fields_by_category),
            "excludedByCategory": {
                c.value: [
                    {"idType": id_type, "id": value}
                    for id_type, value in sorted(self.excluded_ids(c))
                ]
                for c in Category.known()
            },
            "eierByCategory": lists(self.owners_by_category),
            "statusByCategory": lists(self.statuses_by_category),
        }

    @classmethod
    def from_dict(cls, data: Any) -> "Selection":
        """
        Reconstruct a Selection from persisted JSON data.

        Args:
            data: Parsed JSON object

        Returns:
            A Selection instance

        Raises:
            InvalidSelectionError: If the data does not have the expected shape
        """
        if not isinstance(data, Mapping):
            raise InvalidSelectionError("Selection must be a JSON object")

        selection = cls()
        selection.obj_types_by_category = _read_string_sets(data, "objTypesByCategory", upper=False)
        selection.fields_by_category = _read_string_sets(data, "fieldsByCategory", upper=True)
        selection.owners_by_category = _read_string_sets(data, "eierByCategory", upper=True)
        selection.statuses_by_category = _read_string_sets(data, "statusByCategory", upper=True)
        selection.excluded_ids_by_category = _read_excluded_ids(data)
        return selection

    @classmethod
    def from_json(cls, text: str) -> "Selection":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise InvalidSelectionError(f"Selection is not valid JSON: {e}") from e
        return cls.from_dict(data)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)


def _category_lists(data: Mapping, key: str) -> Dict[Category, list]:
    section = data.get(key)
    if section is None:
        return {}
    if not isinstance(section, Mapping):
        raise InvalidSelectionError(f"{key} must map category names to lists")

    out: Dict[Category, list] = {}
    for name, values in section.items():
        category = Category.parse(name)
        if category is Category.UNKNOWN:
            logger.debug("Ignoring unknown category %r in %s", name, key)
            continue
        if values is None:
            values = []
        if not isinstance(values, list):
            raise InvalidSelectionError(f"{key}.{name} must be a list")
        out[category] = values
    return out


def _read_string_sets(data: Mapping, key: str, upper: bool) -> Dict[Category, Set[str]]:
    result = _empty_by_category()
    for category, values in _category_lists(data, key).items():
        cleaned = {str(v).strip() for v in values if v is not None and str(v).strip()}
        result[category] = {v.upper() for v in cleaned} if upper else cleaned
    return result


def _read_excluded_ids(data: Mapping) -> Dict[Category, Set[IdRef]]:
    result = _empty_by_category()
    for category, entries in _category_lists(data, "excludedByCategory").items():
        for entry in entries:
            if not isinstance(entry, Mapping):
                raise InvalidSelectionError("excludedByCategory entries must be objects")
            id_type = str(entry.get("idType") or "").strip().upper()
            value = str(entry.get("id") or "").strip()
            if value and id_type in ID_TYPES:
                result[category].add((id_type, value))
    return result
