"""Conversion orchestration: read a schema, pick an exporter, write the output."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from dbml_convert.csv_export import OVERVIEW_FILENAME, CsvExporter
from dbml_convert.dbml_reader import load_schema_file
from dbml_convert.errors import UnsupportedFormatError
from dbml_convert.excel_export import ExcelExporter
from dbml_convert.file_writer import write_csv_file, write_multiple_csv_files
from dbml_convert.schema import NormalizedDatabase, normalize_database

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("csv", "xlsx")

PathLike = Union[str, Path]


@dataclass
class ConversionResult:
    format: str
    tables_count: int
    file_path: Optional[Path] = None
    output_directory: Optional[Path] = None
    files: List[str] = field(default_factory=list)
    worksheets: List[str] = field(default_factory=list)


def validate_format(fmt: str) -> str:
    normalized = (fmt or "").strip().lower()
    if normalized not in SUPPORTED_FORMATS:
        raise UnsupportedFormatError(
            f"Unsupported format '{fmt}'. Supported formats: {', '.join(SUPPORTED_FORMATS)}"
        )
    return normalized


def resolve_output_path(input_path: PathLike, output_path: Optional[PathLike], fmt: str) -> Path:
    """Explicit output wins; otherwise derive it next to the input file."""
    if output_path:
        return Path(output_path)
    source = Path(input_path)
    if fmt == "csv":
        return source.parent / f"{source.stem}_csv"
    if fmt == "xlsx":
        return source.parent / f"{source.stem}.xlsx"
    return source.parent


def is_directory_path(path: PathLike) -> bool:
    # Path() drops trailing separators, so check the raw string first.
    text = str(path)
    if text.endswith("/") or text.endswith(os.sep):
        return True
    return not Path(text).suffix


def parse_input(input_path: PathLike) -> NormalizedDatabase:
    return normalize_database(load_schema_file(input_path))


def convert_to_csv(
    database: NormalizedDatabase,
    output_path: PathLike,
    single_file: bool = False,
    as_directory: Optional[bool] = None,
) -> ConversionResult:
    """Write every CSV into a directory, or only the overview into a single file."""
    result = CsvExporter().export(database)
    if as_directory is None:
        as_directory = is_directory_path(output_path)

    if single_file or not as_directory:
        target = write_csv_file(output_path, result.overview)
        return ConversionResult(format=result.format, tables_count=result.tables_count, file_path=target)

    directory = Path(output_path)
    write_multiple_csv_files(directory, result.files)
    return ConversionResult(
        format=result.format,
        tables_count=result.tables_count,
        output_directory=directory,
        files=list(result.files),
    )


def convert_to_excel(database: NormalizedDatabase, output_path: PathLike) -> ConversionResult:
    exporter = ExcelExporter()
    exported = exporter.export(database)
    saved = exporter.save_to_file(output_path)
    return ConversionResult(
        format=exported.format,
        tables_count=exported.tables_count,
        file_path=saved.file_path,
        worksheets=exported.worksheets,
    )


def convert_to_format(
    input_path: PathLike,
    output_path: Optional[PathLike] = None,
    fmt: str = "csv",
    single_file: bool = False,
) -> ConversionResult:
    fmt = validate_format(fmt)
    database = parse_input(input_path)
    if fmt == "xlsx":
        resolved = output_path if output_path else resolve_output_path(input_path, None, fmt)
        logger.info("Converting %s to xlsx -> %s", input_path, resolved)
        return convert_to_excel(database, resolved)

    # The derived default is always a directory; a caller-supplied path decides by its shape.
    if output_path:
        resolved, as_directory = output_path, is_directory_path(output_path)
    else:
        resolved, as_directory = resolve_output_path(input_path, None, fmt), True
    if single_file and as_directory:
        resolved = Path(resolved) / OVERVIEW_FILENAME
    logger.info("Converting %s to csv -> %s", input_path, resolved)
    return convert_to_csv(database, resolved, single_file=single_file, as_directory=as_directory)
