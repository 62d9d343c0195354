"""CSV exporter: one delimited text blob per projected row set."""

from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List

from dbml_convert.markers import display_row
from dbml_convert.projector import RowSet, project
from dbml_convert.schema import require_database

logger = logging.getLogger(__name__)

DELIMITER = ","
QUOTE = '"'
NEWLINE = "\n"
OVERVIEW_FILENAME = "tables_overview.csv"


@dataclass
class CsvExportResult:
    format: str
    files: Dict[str, str] = field(default_factory=dict)
    tables_count: int = 0

    @property
    def overview(self) -> str:
        return self.files[OVERVIEW_FILENAME]


def escape_csv(value: Any) -> str:
    """Quote a cell only when it holds a delimiter, a quote or a newline."""
    if value is None:
        return ""
    s = str(value)
    if DELIMITER in s or QUOTE in s or NEWLINE in s:
        return QUOTE + s.replace(QUOTE, QUOTE * 2) + QUOTE
    return s


def row_to_csv(row: Iterable[Any]) -> str:
    return DELIMITER.join(escape_csv(v) for v in row)


def rows_to_csv(rows: Iterable[Iterable[Any]]) -> str:
    # No trailing newline after the last row.
    return NEWLINE.join(row_to_csv(r) for r in rows)


def encode_csv(row_set: RowSet) -> str:
    rows: List[Iterable[Any]] = [row_set.header]
    rows.extend(display_row(row_set.kinds, r) for r in row_set.rows)
    return rows_to_csv(rows)


def parse_csv(text: str) -> List[List[str]]:
    """Read CSV text produced by encode_csv back into rows of strings."""
    return list(csv.reader(io.StringIO(text, newline=""), delimiter=DELIMITER, quotechar=QUOTE))


def table_filename(table_name: str) -> str:
    return f"{table_name}.csv"


class CsvExporter:
    """Export a database as the tables overview plus one CSV per table."""

    def __init__(self):
        self.format = "csv"

    def export(self, database) -> CsvExportResult:
        db = require_database(database)
        projection = project(db)

        files: Dict[str, str] = {OVERVIEW_FILENAME: encode_csv(projection.overview)}
        for row_set in projection.tables:
            files[table_filename(row_set.title)] = encode_csv(row_set)

        logger.info("Encoded %d table(s) into %d CSV file(s)", len(db.tables), len(files))
        return CsvExportResult(format=self.format, files=files, tables_count=len(db.tables))
