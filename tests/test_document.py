# ==============================================
# Tests for SosiDocument
# ==============================================

import logging

from sosi_rens.cleaning import Selection
from sosi_rens.document import SosiDocument
from sosi_rens.encoding import Charset
from sosi_rens.parsing import Category


class TestSosiDocument:
    """The orchestrator around one uploaded file."""

    def test_from_path(self, sample_file):
        document = SosiDocument.from_path(sample_file)
        assert document.filename == "ledninger.sos"
        assert document.encoding.used is Charset.LATIN1
        assert document.encoding.declared_in_header is True
        assert "..NØH" in document.text
        assert document.size_bytes == sample_file.stat().st_size

    def test_analysis_is_cached(self, sample_file):
        document = SosiDocument.from_path(sample_file)
        assert document.analyze() is document.analyze()
        assert document.analyze().points.features == 2

    def test_clean_bytes_keep_input_charset(self, sample_file):
        """Latin-1 in, Latin-1 out."""
        document = SosiDocument.from_path(sample_file)
        data = document.clean_bytes(Selection.build(obj_types={"points": ["Kum"]}))
        assert b"..N\xd8H" in data
        assert b"Sluk" not in data
        assert data.startswith(b".HODE\n..TEGNSETT ISO8859-1\n")

    def test_default_selection_is_lossless(self, sample_file, sample_text):
        """Keeping everything reproduces the input."""
        document = SosiDocument.from_path(sample_file)
        assert document.clean(document.default_selection()) == sample_text

    def test_extract_excluded_bytes(self, sample_file):
        document = SosiDocument.from_path(sample_file)
        selection = Selection()
        selection.excluded_ids_by_category[Category.POINTS] = {("SID", "101")}
        data = document.extract_excluded_bytes(selection)
        assert b"Kum" in data
        assert b"Sluk" not in data

    def test_pivot_and_frequency(self, sample_file):
        document = SosiDocument.from_path(sample_file)
        assert document.field_frequency("points", "P_TEMA") == [("KUM", 1), ("SLU", 1)]
        assert document.pivot_2d("points", "OBJTYPE", "P_TEMA").grand_total == 2

    def test_cleaned_filename(self):
        document = SosiDocument.from_bytes(b"", filename="ledninger.sos")
        assert document.cleaned_filename() == "ledninger-renset.sos"
        assert document.cleaned_filename("-vask") == "ledninger-vask.sos"
        assert SosiDocument.from_bytes(b"", filename="eksport").cleaned_filename() == "eksport-renset"
        assert SosiDocument.from_bytes(b"").cleaned_filename() == "fil-renset.sos"

    def test_summary(self, sample_file):
        summary = SosiDocument.from_path(sample_file).summary()
        assert summary["file"]["name"] == "ledninger.sos"
        assert summary["encoding"]["used"] == "latin1"
        assert summary["analysis"]["by_category"]["lines"]["features"] == 1

    def test_fallback_logs_warning(self, caplog):
        data = ".PUNKT 1:\n..OBJTYPE Kum\n..NAVN Bjørn\n".encode("latin-1")
        with caplog.at_level(logging.WARNING, logger="sosi_rens"):
            document = SosiDocument.from_bytes(data, filename="gammel.sos")
        assert document.encoding.fallback_used is True
        assert "Bjørn" in document.text
        assert any("gammel.sos" in record.getMessage() for record in caplog.records)
