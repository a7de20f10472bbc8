# ==============================================
# Tests for Configuration
# ==============================================

import pytest

from sosi_rens.config import AppConfig, get_config
from sosi_rens.exceptions import ConfigError

_ENV_VARS = [
    "SOSI_PIVOT_TOP_COLUMNS",
    "SOSI_PIVOT_ROW_CAP",
    "SOSI_PIVOT_NUMERIC_BINS",
    "SOSI_PIVOT_BINNING",
    "SOSI_PIVOT_SAMPLE_SIZE",
    "SOSI_PIVOT_SEED",
    "SOSI_CLEAN_FIELD_MODE",
    "SOSI_CLEAN_SUFFIX",
    "SOSI_LOG_LEVEL",
    "SOSI_LOG_FILE",
]


@pytest.fixture
def clean_env(monkeypatch, reset_config):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestGetConfig:
    """Loading settings from the environment."""

    def test_defaults(self, clean_env):
        config = get_config()
        assert isinstance(config, AppConfig)
        assert config.pivot.top_columns == 25
        assert config.pivot.row_cap == 200
        assert config.pivot.numeric_bins == 10
        assert config.pivot.binning_mode == "equal-width"
        assert config.pivot.quantile_sample_size == 50000
        assert config.pivot.seed is None
        assert config.clean.field_mode == "remove-fields"
        assert config.clean.output_suffix == "-renset"
        assert config.log_level == "INFO"
        assert config.log_file is None

    def test_environment_overrides(self, clean_env):
        clean_env.setenv("SOSI_PIVOT_TOP_COLUMNS", "10")
        clean_env.setenv("SOSI_PIVOT_BINNING", "quantile")
        clean_env.setenv("SOSI_PIVOT_SEED", "3")
        clean_env.setenv("SOSI_CLEAN_FIELD_MODE", "clear-values")
        clean_env.setenv("SOSI_CLEAN_SUFFIX", "-vask")
        config = get_config()
        assert config.pivot.top_columns == 10
        assert config.pivot.binning_mode == "quantile"
        assert config.pivot.seed == 3
        assert config.clean.field_mode == "clear-values"
        assert config.clean.output_suffix == "-vask"

    def test_singleton(self, clean_env):
        """Repeated calls return the same instance until reload."""
        first = get_config()
        clean_env.setenv("SOSI_PIVOT_ROW_CAP", "7")
        assert get_config() is first
        assert get_config(reload=True).pivot.row_cap == 7

    def test_bad_integer_raises(self, clean_env):
        clean_env.setenv("SOSI_PIVOT_NUMERIC_BINS", "ti")
        with pytest.raises(ConfigError):
            get_config()

    def test_blank_value_uses_default(self, clean_env):
        clean_env.setenv("SOSI_PIVOT_ROW_CAP", " ")
        assert get_config().pivot.row_cap == 200
