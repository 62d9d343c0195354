"""Convert DBML schemas into CSV table definitions and Excel workbooks."""

from dbml_convert.converter import ConversionResult, convert_to_format
from dbml_convert.csv_export import CsvExporter
from dbml_convert.errors import ConversionError
from dbml_convert.excel_export import ExcelExporter
from dbml_convert.schema import normalize_database, render_type

__version__ = "1.0.0"

__all__ = [
    "ConversionError",
    "ConversionResult",
    "CsvExporter",
    "ExcelExporter",
    "convert_to_format",
    "normalize_database",
    "render_type",
]
