# ==============================================
# Configuration Management
# ==============================================
#
# PURPOSE:
#   Load all tunables from environment variables / .env file.
#   Provides typed config objects to the orchestrator and CLI.
#   The core functions never read configuration themselves; they
#   take explicit options so they stay pure.
#
# CLASSES:
# --------
# - PivotConfig (dataclass)
#     top_columns: int           (default 25)
#     row_cap: int               (default 200)
#     numeric_bins: int          (default 10)
#     binning_mode: str          (default "equal-width")
#     quantile_sample_size: int  (default 50000)
#     seed: int | None           (default None)
#
# - CleanConfig (dataclass)
#     field_mode: str            (default "remove-fields")
#     output_suffix: str         (default "-renset")
#
# - AppConfig (dataclass)
#     pivot: PivotConfig
#     clean: CleanConfig
#     log_level: str             (default "INFO")
#     log_file: str | None       (default None)
#
# FUNCTION:
# ---------
# - get_config(reload: bool = False) -> AppConfig
#     Load .env using python-dotenv, construct AppConfig.
#     Returns the same singleton on repeated calls.
#
# USAGE:
# ------
#   from sosi_rens.config import get_config
#   config = get_config()
#   print(config.pivot.top_columns)
#
# ==============================================

import os
from dataclasses import dataclass, field
from typing import Optional
from pathlib import Path

from dotenv import load_dotenv

from sosi_rens.exceptions import ConfigError


@dataclass
class PivotConfig:
    """Defaults for the 2-D pivot engine."""
    top_columns: int = 25
    row_cap: int = 200
    numeric_bins: int = 10
    binning_mode: str = "equal-width"
    quantile_sample_size: int = 50000
    seed: Optional[int] = None


@dataclass
class CleanConfig:
    """Defaults for the selective rewriter."""
    field_mode: str = "remove-fields"
    output_suffix: str = "-renset"


@dataclass
class AppConfig:
    """Main application configuration."""
    pivot: PivotConfig = field(default_factory=PivotConfig)
    clean: CleanConfig = field(default_factory=CleanConfig)
    log_level: str = "INFO"
    log_file: Optional[str] = None


# Singleton instance
_config_instance: Optional[AppConfig] = None


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from e


def _env_optional_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    return _env_int(name, 0)


def get_config(reload: bool = False) -> AppConfig:
    """
    Load configuration from environment variables / .env file.
    Returns the same singleton instance on repeated calls.

    Args:
        reload: Rebuild the singleton from the current environment.

    Returns:
        AppConfig: Application configuration
    """
    global _config_instance

    if _config_instance is not None and not reload:
        return _config_instance

    # Load .env file from project root
    env_path = Path(__file__).parent.parent / ".env"
    load_dotenv(dotenv_path=env_path)

    pivot_config = PivotConfig(
        top_columns=_env_int("SOSI_PIVOT_TOP_COLUMNS", 25),
        row_cap=_env_int("SOSI_PIVOT_ROW_CAP", 200),
        numeric_bins=_env_int("SOSI_PIVOT_NUMERIC_BINS", 10),
        binning_mode=os.getenv("SOSI_PIVOT_BINNING", "equal-width"),
        quantile_sample_size=_env_int("SOSI_PIVOT_SAMPLE_SIZE", 50000),
        seed=_env_optional_int("SOSI_PIVOT_SEED"),
    )

    clean_config = CleanConfig(
        field_mode=os.getenv("SOSI_CLEAN_FIELD_MODE", "remove-fields"),
        output_suffix=os.getenv("SOSI_CLEAN_SUFFIX", "-renset"),
    )

    _config_instance = AppConfig(
        pivot=pivot_config,
        clean=clean_config,
        log_level=os.getenv("SOSI_LOG_LEVEL", "INFO"),
        log_file=os.getenv("SOSI_LOG_FILE") or None,
    )

    return _config_instance
