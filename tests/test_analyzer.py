# ==============================================
# Tests for the Aggregate Analyzer
# ==============================================

import json

from sosi_rens.analysis import AggregateAnalyzer, analyze, sorted_counts
from sosi_rens.parsing import Category


# ==============================================
# Two-feature scenario
# ==============================================

class TestKumSluk:
    """One Kum and one Sluk point feature."""

    def test_feature_count(self, kum_sluk_text):
        """Both .PUNKT blocks count as points."""
        assert analyze(kum_sluk_text).points.features == 2

    def test_obj_types(self, kum_sluk_text):
        assert analyze(kum_sluk_text).points.obj_types == {"Kum": 1, "Sluk": 1}

    def test_theme_codes(self, kum_sluk_text):
        """P_TEMA values are the point theme codes."""
        stats = analyze(kum_sluk_text).points
        assert stats.theme_key == "P_TEMA"
        assert stats.themes == {"KUM": 1, "SLU": 1}

    def test_no_lines(self, kum_sluk_text):
        assert analyze(kum_sluk_text).lines.features == 0


# ==============================================
# Full sample
# ==============================================

class TestAnalyze:
    """Counts over the sample document."""

    def test_line_count(self, sample_text):
        """33 lines plus the empty line after the trailing newline."""
        assert analyze(sample_text).line_count == 34

    def test_features_by_section(self, sample_text):
        """Every section is counted, including .HODE and .SLUTT."""
        assert analyze(sample_text).features_by_section == {
            ".HODE": 1,
            ".PUNKT": 2,
            ".KURVE": 1,
            ".SLUTT": 1,
        }

    def test_category_features(self, sample_text):
        result = analyze(sample_text)
        assert result.points.features == 2
        assert result.lines.features == 1
        assert result.unknown.features == 2
        assert result.total_features == 5

    def test_point_fields(self, sample_text):
        """Every attribute key counts, OBJTYPE and group headers included."""
        assert analyze(sample_text).points.fields == {
            "OBJTYPE": 2,
            "EGS_PUNKT": 2,
            "P_TEMA": 2,
            "SID": 2,
            "EIER": 2,
            "STATUS": 2,
            "NØH": 2,
        }

    def test_line_stats(self, sample_text):
        stats = analyze(sample_text).lines
        assert stats.obj_types == {"VannLedning": 1}
        assert stats.themes == {"VL": 1}
        assert stats.fields["DIMENSJON"] == 1
        assert stats.fields["EGS_LEDNING"] == 1

    def test_header_fields_go_to_unknown(self, sample_text):
        """Header attributes never leak into the point or line tables."""
        result = analyze(sample_text)
        assert result.unknown.fields == {"TEGNSETT": 1, "TRANSPAR": 1, "KOORDSYS": 1}
        assert "TEGNSETT" not in result.points.fields

    def test_crlf_gives_same_counts(self, sample_text, sample_crlf_text):
        """Newline convention does not change the result."""
        assert analyze(sample_text).to_dict() == analyze(sample_crlf_text).to_dict()

    def test_empty_document(self):
        result = analyze("")
        assert result.total_features == 0
        assert result.points.obj_types == {}


# ==============================================
# Edge cases
# ==============================================

class TestEdgeCases:
    """Block-level rules for object types and theme codes."""

    def test_first_nonempty_obj_type_wins(self, build_sosi):
        """A repeated or empty OBJTYPE counts once per block."""
        text = build_sosi([".PUNKT 1:", "..OBJTYPE", "..OBJTYPE Kum", "..OBJTYPE Sluk"])
        stats = analyze(text).points
        assert stats.obj_types == {"Kum": 1}
        assert stats.fields["OBJTYPE"] == 3

    def test_nested_objtype_is_not_an_object_type(self, build_sosi):
        """...OBJTYPE at depth 3 is an ordinary field."""
        text = build_sosi([".PUNKT 1:", "..EGS_PUNKT", "...OBJTYPE Kum"])
        stats = analyze(text).points
        assert stats.obj_types == {}
        assert stats.fields["OBJTYPE"] == 1

    def test_theme_key_under_wrong_category(self, build_sosi):
        """L_TEMA in a .PUNKT block is flagged, not counted as a theme."""
        text = build_sosi([".PUNKT 1:", "..OBJTYPE Kum", "..EGS_PUNKT", "...L_TEMA VL"])
        stats = analyze(text).points
        assert stats.themes == {}
        assert stats.fields["L_TEMA"] == 1
        assert stats.misplaced_theme_keys == 1

    def test_theme_key_at_wrong_depth_is_ignored(self, build_sosi):
        """Theme codes are read at depth 3 only."""
        text = build_sosi([".PUNKT 1:", "..P_TEMA KUM"])
        stats = analyze(text).points
        assert stats.themes == {}
        assert stats.misplaced_theme_keys == 0

    def test_first_theme_per_block(self, build_sosi):
        text = build_sosi([".KURVE 1:", "..EGS_LEDNING", "...L_TEMA", "...L_TEMA VL", "...L_TEMA AF"])
        assert analyze(text).lines.themes == {"VL": 1}

    def test_blank_point_theme_does_not_claim_block(self, build_sosi):
        text = build_sosi([".PUNKT 1:", "..EGS_PUNKT", "...P_TEMA", "...P_TEMA KUM", ".PUNKT 2:", "..EGS_PUNKT", "...P_TEMA"])
        result = analyze(text)
        assert result.points.themes == {"KUM": 1}
        assert result.points.features == 2

    def test_tekst_counts_as_points(self, build_sosi):
        text = build_sosi([".TEKST 1:", "..OBJTYPE Tekst"])
        assert analyze(text).points.obj_types == {"Tekst": 1}

    def test_flate_is_unknown(self, build_sosi):
        text = build_sosi([".FLATE 1:", "..OBJTYPE Omrade"])
        result = analyze(text)
        assert result.unknown.features == 1
        assert result.unknown.obj_types == {"Omrade": 1}
        assert result.points.features == 0

    def test_attributes_before_first_feature(self, build_sosi):
        """Lines before any section are tallied as unknown."""
        result = analyze(build_sosi(["..TEGNSETT UTF-8"]))
        assert result.unknown.fields == {"TEGNSETT": 1}
        assert result.unknown.features == 0


class TestAnalyzerApi:
    """Tests for the incremental API and serialization."""

    def test_observe_line_by_line(self, sample_lines, sample_text):
        """Feeding lines one by one matches analyze()."""
        analyzer = AggregateAnalyzer()
        for line in sample_lines:
            analyzer.observe_line(line)
        assert analyzer.get_result().points.to_dict() == analyze(sample_text).points.to_dict()

    def test_to_dict_is_json_serializable(self, sample_text):
        data = analyze(sample_text).to_dict()
        assert json.loads(json.dumps(data, ensure_ascii=False)) == data
        assert set(data["by_category"]) == {"points", "lines"}
        assert data["by_category"]["points"]["theme_key"] == "P_TEMA"

    def test_for_category_accepts_alias(self, sample_text):
        result = analyze(sample_text)
        assert result.for_category("ledninger") is result.lines
        assert result.for_category(Category.POINTS) is result.points

    def test_sorted_counts(self):
        """Count descending, then key ascending."""
        assert sorted_counts({"b": 1, "a": 1, "c": 2}) == [("c", 2), ("a", 1), ("b", 1)]
