# ==============================================
# Pytest Configuration and Fixtures
# ==============================================
#
# Shared SOSI documents for all tests.
#
# FIXTURES:
# ---------
# - build_sosi          → join lines into a LF document (trailing newline)
# - kum_sluk_text       → two point features, Kum / Sluk
# - sample_lines        → header, two points, one pipe, footer
# - sample_text         → sample_lines as an LF document
# - sample_crlf_text    → sample_lines as a CRLF document
# - pipes_text          → five pipes with numeric DIMENSJON
# - sample_file         → sample_text written as Latin-1 to tmp_path
# - reset_config        → drop the config singleton around a test
#
# ==============================================

import pytest

import sosi_rens.config as config_module


def _join(lines, newline="\n"):
    return newline.join(lines) + newline


@pytest.fixture
def build_sosi():
    """Return a function turning a list of lines into document text."""
    return _join


@pytest.fixture
def kum_sluk_text():
    """Two point features: OBJTYPE Kum / P_TEMA KUM and OBJTYPE Sluk / P_TEMA SLU."""
    return _join([
        ".HODE",
        "..TEGNSETT UTF-8",
        ".PUNKT 1:",
        "..OBJTYPE Kum",
        "..EGS_PUNKT",
        "...P_TEMA KUM",
        "..NØH",
        "6650000 600000 100",
        ".PUNKT 2:",
        "..OBJTYPE Sluk",
        "..EGS_PUNKT",
        "...P_TEMA SLU",
        "..NØH",
        "6650010 600010 101",
        ".SLUTT",
    ])


@pytest.fixture
def sample_lines():
    """Header, two point features, one pipe and a footer (33 lines)."""
    return [
        ".HODE",
        "..TEGNSETT ISO8859-1",
        "..TRANSPAR",
        "...KOORDSYS 22",
        ".PUNKT 1:",
        "..OBJTYPE Kum",
        "..EGS_PUNKT",
        "...P_TEMA KUM",
        "...SID 101",
        "...EIER K",
        "...STATUS I",
        "..NØH",
        "6650000 600000 100",
        ".PUNKT 2:",
        "..OBJTYPE Sluk",
        "..EGS_PUNKT",
        "...P_TEMA SLU",
        "...SID 102",
        "...EIER P",
        "...STATUS I",
        "..NØH",
        "6650010 600010 101",
        ".KURVE 3:",
        "..OBJTYPE VannLedning",
        "..EGS_LEDNING",
        "...L_TEMA VL",
        "...LSID 201",
        "...DIMENSJON 200",
        "...MATERIAL PE",
        "..NØ",
        "6650000 600000",
        "6650010 600010",
        ".SLUTT",
    ]


@pytest.fixture
def sample_text(sample_lines):
    return _join(sample_lines)


@pytest.fixture
def sample_crlf_text(sample_lines):
    return _join(sample_lines, "\r\n")


@pytest.fixture
def pipes_text():
    """Five pipes with DIMENSJON 100, 150, 200, 250, 300."""
    lines = [".HODE", "..TEGNSETT UTF-8"]
    for index, (material, dimension) in enumerate(
        [("PE", "100"), ("PE", "150"), ("PVC", "200"), ("PVC", "250"), ("STØP", "300")],
        start=1,
    ):
        lines += [
            f".KURVE {index}:",
            "..OBJTYPE VannLedning",
            "..EGS_LEDNING",
            "...L_TEMA VL",
            f"...MATERIAL {material}",
            f"...DIMENSJON {dimension}",
            "..NØ",
            "6650000 600000",
        ]
    lines.append(".SLUTT")
    return _join(lines)


@pytest.fixture
def sample_file(tmp_path, sample_text):
    path = tmp_path / "ledninger.sos"
    path.write_bytes(sample_text.encode("latin-1"))
    return path


@pytest.fixture
def reset_config():
    """Make get_config() rebuild from the environment, before and after the test."""
    config_module._config_instance = None
    yield
    config_module._config_instance = None
