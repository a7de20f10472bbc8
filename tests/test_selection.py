# ==============================================
# Tests for Selection persistence
# ==============================================

import json

import pytest

from sosi_rens.analysis import analyze
from sosi_rens.cleaning import FieldMode, Selection
from sosi_rens.exceptions import InvalidSelectionError
from sosi_rens.parsing import Category


class TestSelectionJson:
    """Reading and writing the persisted JSON shape."""

    def test_from_dict_web_app_names(self):
        """punkter / ledninger are accepted as category names."""
        selection = Selection.from_dict({
            "objTypesByCategory": {"punkter": ["Kum"], "ledninger": []},
            "fieldsByCategory": {"punkter": ["p_tema"], "ledninger": ["L_TEMA"]},
        })
        assert selection.obj_types(Category.POINTS) == {"Kum"}
        assert selection.obj_types(Category.LINES) == set()
        assert selection.fields(Category.POINTS) == {"P_TEMA"}

    def test_optional_filters(self):
        selection = Selection.from_dict({
            "excludedByCategory": {"points": [{"idType": "sid", "id": " 123 "}, {"idType": "XID", "id": "9"}]},
            "eierByCategory": {"lines": ["k"]},
            "statusByCategory": {"lines": ["I", ""]},
        })
        assert selection.excluded_ids(Category.POINTS) == {("SID", "123")}
        assert selection.owners(Category.LINES) == {"K"}
        assert selection.statuses(Category.LINES) == {"I"}

    def test_unknown_category_ignored(self):
        selection = Selection.from_dict({"objTypesByCategory": {"flater": ["Omrade"]}})
        assert selection.obj_types(Category.POINTS) == set()

    def test_round_trip(self):
        selection = Selection.build(obj_types={"points": ["Sluk", "Kum"]}, fields={"lines": ["L_TEMA"]})
        selection.excluded_ids_by_category[Category.LINES] = {("LSID", "201")}
        again = Selection.from_json(selection.to_json())
        assert again == selection

    def test_to_dict_sorted(self):
        data = Selection.build(obj_types={"points": ["Sluk", "Kum"]}).to_dict()
        assert data["objTypesByCategory"] == {"points": ["Kum", "Sluk"], "lines": []}
        assert data["excludedByCategory"] == {"points": [], "lines": []}

    @pytest.mark.parametrize("data", [
        [],
        "tekst",
        {"objTypesByCategory": ["Kum"]},
        {"fieldsByCategory": {"points": "P_TEMA"}},
        {"excludedByCategory": {"points": ["SID 1"]}},
    ])
    def test_invalid_shapes(self, data):
        """Structurally invalid data raises InvalidSelectionError."""
        with pytest.raises(InvalidSelectionError):
            Selection.from_dict(data)

    def test_invalid_json(self):
        with pytest.raises(InvalidSelectionError):
            Selection.from_json("{ikke json")

    def test_error_is_value_error(self):
        """Callers can catch it as a ValueError."""
        with pytest.raises(ValueError):
            Selection.from_json(json.dumps([1, 2]))


class TestSelectionHelpers:
    """Construction helpers and lookups."""

    def test_from_analysis_keeps_everything(self, sample_text):
        selection = Selection.from_analysis(analyze(sample_text))
        assert selection.obj_types(Category.POINTS) == {"Kum", "Sluk"}
        assert "DIMENSJON" in selection.fields(Category.LINES)

    def test_keeps_obj_type(self):
        selection = Selection.build(obj_types={"points": ["Kum"]})
        assert selection.keeps_obj_type(Category.POINTS, "Kum")
        assert not selection.keeps_obj_type(Category.POINTS, "Sluk")
        assert selection.keeps_obj_type(Category.LINES, "VannLedning")

    def test_field_mode_parse(self):
        assert FieldMode.parse("clear-values") is FieldMode.CLEAR_VALUES
        assert FieldMode.parse("CLEAR-VALUES") is FieldMode.CLEAR_VALUES
        assert FieldMode.parse(None) is FieldMode.REMOVE_FIELDS
        assert FieldMode.parse(FieldMode.CLEAR_VALUES) is FieldMode.CLEAR_VALUES
