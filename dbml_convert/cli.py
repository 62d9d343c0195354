#!/usr/bin/env python3
"""Command line entry points: dbml-convert, dbml2csv and dbml2xlsx."""

import argparse
import logging
import sys
import traceback
from typing import List, Optional

from dbml_convert import __version__
from dbml_convert.converter import SUPPORTED_FORMATS, ConversionResult, convert_to_format
from dbml_convert.env import default_format, load_env, log_level
from dbml_convert.errors import ConversionError

logger = logging.getLogger(__name__)

EXAMPLES = """\
Examples:
  dbml-convert database.dbml --format csv
  dbml-convert database.dbml output.xlsx --format xlsx
  dbml-convert database.dbml output/ --format csv --verbose
"""


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(level=log_level(verbose), format="%(levelname)s: %(message)s")


def _base_parser(prog: str, description: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=prog, description=description)
    parser.add_argument("input", help="DBML (or schema JSON) input file path")
    parser.add_argument("output", nargs="?", help="Output file or directory path")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose output")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _print_result(result: ConversionResult, verbose: bool) -> None:
    print("Conversion completed successfully")
    if result.output_directory is not None:
        print(f"Output directory: {result.output_directory}")
        print(f"Files created: {', '.join(result.files)}")
    else:
        print(f"Output file: {result.file_path}")
    print(f"Tables processed: {result.tables_count}")
    if result.worksheets:
        print(f"Worksheets: {', '.join(result.worksheets)}")
    if verbose:
        print(f"Format: {result.format}")


def _run(args: argparse.Namespace, output: Optional[str], fmt: str, single_file: bool = False) -> int:
    if args.verbose:
        print(f"Converting {args.input} to {fmt} format...")
        print(f"Output: {output or 'auto-detected'}")
    try:
        result = convert_to_format(args.input, output, fmt, single_file=single_file)
    except ConversionError as e:
        print(f"Conversion failed: {e}", file=sys.stderr)
        if args.verbose:
            traceback.print_exc()
        return 1
    _print_result(result, args.verbose)
    return 0


def dbml_convert(argv: Optional[List[str]] = None) -> int:
    load_env()
    parser = _base_parser("dbml-convert", "Convert DBML files to CSV or Excel")
    parser.epilog = EXAMPLES
    parser.formatter_class = argparse.RawDescriptionHelpFormatter
    parser.add_argument("-f", "--format", default=None, help="Output format (csv, xlsx)")
    parser.add_argument("-o", "--out-file", help="Output file path (alternative to positional argument)")
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    fmt = (args.format or default_format()).lower()
    if fmt not in SUPPORTED_FORMATS:
        print(
            f"Error: Unsupported format '{fmt}'. Supported formats: {', '.join(SUPPORTED_FORMATS)}",
            file=sys.stderr,
        )
        return 1
    return _run(args, args.out_file or args.output, fmt)


def dbml2csv(argv: Optional[List[str]] = None) -> int:
    load_env()
    parser = _base_parser("dbml2csv", "Convert DBML files to CSV format")
    parser.add_argument(
        "--single-file",
        action="store_true",
        help="Output as single overview file instead of multiple files",
    )
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    return _run(args, args.output, "csv", single_file=args.single_file)


def dbml2xlsx(argv: Optional[List[str]] = None) -> int:
    load_env()
    parser = _base_parser("dbml2xlsx", "Convert DBML files to an Excel workbook")
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    return _run(args, args.output, "xlsx")


def main() -> None:
    raise SystemExit(dbml_convert())


def main_csv() -> None:
    raise SystemExit(dbml2csv())


def main_xlsx() -> None:
    raise SystemExit(dbml2xlsx())


if __name__ == "__main__":
    main()
