# ==============================================
# CLI: Command Line Entry Point
# ==============================================
#
# PURPOSE:
#   Run the core operations on a SOSI file from the shell.
#   Results are printed as JSON on stdout; logs go to stderr.
#
# COMMANDS:
# ---------
# 1. Aggregate statistics:
#    sosi-rens analyze ledninger.sos
#
# 2. Value frequency of one field:
#    sosi-rens frequency ledninger.sos --category points --field P_TEMA
#
# 3. 2-D pivot:
#    sosi-rens pivot ledninger.sos --category lines --primary OBJTYPE --secondary DIMENSJON --binning quantile --seed 1
#
# 4. Write a cleaned copy (default: keep everything the analysis found):
#    sosi-rens clean ledninger.sos --selection utvalg.json --field-mode clear-values
#
# 5. Write only the blocks matched by the selection's excluded IDs:
#    sosi-rens excluded ledninger.sos --selection utvalg.json
#
# Equivalent: python -m sosi_rens.cli <command> ...
#
# ==============================================

import argparse
import json
import logging
import pathlib
import sys
from typing import List, Optional

from sosi_rens.cleaning import FieldMode, Selection
from sosi_rens.config import get_config
from sosi_rens.document import SosiDocument
from sosi_rens.exceptions import SosiRensError
from sosi_rens.logging_config import setup_logging
from sosi_rens.pivot import BinningMode, PivotOptions

logger = logging.getLogger(__name__)

EXCLUDED_SUFFIX = "-ekskludert"


def _print_json(payload) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def _load_selection(path: Optional[pathlib.Path]) -> Optional[Selection]:
    if path is None:
        return None
    return Selection.from_json(path.read_text(encoding="utf-8"))


def _output_path(args, document: SosiDocument, suffix: str) -> pathlib.Path:
    if args.out is not None:
        return args.out
    return args.input_file.with_name(document.cleaned_filename(suffix))


def cmd_analyze(args, config) -> int:
    document = SosiDocument.from_path(args.input_file)
    _print_json(document.summary())
    return 0


def cmd_frequency(args, config) -> int:
    document = SosiDocument.from_path(args.input_file)
    entries = document.field_frequency(args.category, args.field)
    _print_json([[value, count] for value, count in entries])
    return 0


def cmd_pivot(args, config) -> int:
    options = PivotOptions.from_config(config.pivot)
    if args.top_columns is not None:
        options.top_columns = args.top_columns
    if args.row_cap is not None:
        options.row_cap = args.row_cap
    if args.bins is not None:
        options.numeric_bins = args.bins
    if args.binning is not None:
        options.binning_mode = BinningMode.parse(args.binning)
    if args.sample_size is not None:
        options.quantile_sample_size = args.sample_size
    if args.seed is not None:
        options.seed = args.seed

    document = SosiDocument.from_path(args.input_file)
    result = document.pivot_2d(args.category, args.primary, args.secondary, options)
    _print_json(result.to_dict())
    return 0


def cmd_clean(args, config) -> int:
    document = SosiDocument.from_path(args.input_file)
    selection = _load_selection(args.selection) or document.default_selection()
    field_mode = FieldMode.parse(args.field_mode or config.clean.field_mode)

    output = _output_path(args, document, config.clean.output_suffix)
    output.write_bytes(document.clean_bytes(selection, field_mode))
    logger.info("Wrote %s (%s, %s)", output, field_mode.value, document.encoding.used.value)
    _print_json({"output": str(output), "encoding": document.encoding.to_dict()})
    return 0


def cmd_excluded(args, config) -> int:
    document = SosiDocument.from_path(args.input_file)
    selection = _load_selection(args.selection)

    output = _output_path(args, document, EXCLUDED_SUFFIX)
    output.write_bytes(document.extract_excluded_bytes(selection))
    logger.info("Wrote %s", output)
    _print_json({"output": str(output), "encoding": document.encoding.to_dict()})
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sosi-rens",
        description="Analyze, pivot and clean SOSI files.",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default from SOSI_LOG_LEVEL or INFO)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze_parser = subparsers.add_parser("analyze", help="Aggregate statistics per category")
    analyze_parser.add_argument("input_file", type=pathlib.Path)
    analyze_parser.set_defaults(handler=cmd_analyze)

    frequency_parser = subparsers.add_parser("frequency", help="Value frequency of one field")
    frequency_parser.add_argument("input_file", type=pathlib.Path)
    frequency_parser.add_argument("--category", required=True, help="points | lines (punkter | ledninger)")
    frequency_parser.add_argument("--field", required=True, help="Attribute key, e.g. P_TEMA")
    frequency_parser.set_defaults(handler=cmd_frequency)

    pivot_parser = subparsers.add_parser("pivot", help="2-D crosstab of two fields")
    pivot_parser.add_argument("input_file", type=pathlib.Path)
    pivot_parser.add_argument("--category", required=True)
    pivot_parser.add_argument("--primary", required=True, help="Row field")
    pivot_parser.add_argument("--secondary", required=True, help="Column field")
    pivot_parser.add_argument("--top-columns", type=int, default=None)
    pivot_parser.add_argument("--row-cap", type=int, default=None)
    pivot_parser.add_argument("--bins", type=int, default=None)
    pivot_parser.add_argument("--binning", choices=[m.value for m in BinningMode], default=None)
    pivot_parser.add_argument("--sample-size", type=int, default=None)
    pivot_parser.add_argument("--seed", type=int, default=None)
    pivot_parser.set_defaults(handler=cmd_pivot)

    clean_parser = subparsers.add_parser("clean", help="Write a cleaned copy")
    clean_parser.add_argument("input_file", type=pathlib.Path)
    clean_parser.add_argument("--selection", type=pathlib.Path, default=None, help="Selection JSON file")
    clean_parser.add_argument("--field-mode", choices=[m.value for m in FieldMode], default=None)
    clean_parser.add_argument("-o", "--out", type=pathlib.Path, default=None)
    clean_parser.set_defaults(handler=cmd_clean)

    excluded_parser = subparsers.add_parser("excluded", help="Write only the excluded blocks")
    excluded_parser.add_argument("input_file", type=pathlib.Path)
    excluded_parser.add_argument("--selection", type=pathlib.Path, required=True)
    excluded_parser.add_argument("-o", "--out", type=pathlib.Path, default=None)
    excluded_parser.set_defaults(handler=cmd_excluded)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = get_config()
        setup_logging(args.log_level or config.log_level, config.log_file)
        return args.handler(args, config)
    except (SosiRensError, OSError) as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
