"""Excel exporter: a styled workbook with an overview sheet and one sheet per table."""

from __future__ import annotations

import io
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

from openpyxl import Workbook
from openpyxl.styles import Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.utils.exceptions import IllegalCharacterError

from dbml_convert.errors import InvalidSheetNameError, NoWorkbookError, SchemaStructureError
from dbml_convert.file_writer import write_file_atomic
from dbml_convert.markers import display_row
from dbml_convert.projector import OVERVIEW_TITLE, project
from dbml_convert.schema import require_database

logger = logging.getLogger(__name__)

WORKBOOK_CREATOR = "DBML Converter Extensions"
HEADER_FILL_COLOR = "E0E0E0"
MIN_COLUMN_WIDTH = 12
COLUMN_PADDING = 2
MAX_SHEET_TITLE = 31
_FORBIDDEN_SHEET_CHARS = re.compile(r"[\[\]:*?/\\]")


@dataclass
class ExcelExportResult:
    format: str
    workbook: Workbook
    worksheets: List[str] = field(default_factory=list)
    tables_count: int = 0


@dataclass
class SaveResult:
    file_path: Path
    format: str


def validate_sheet_titles(titles):
    """Reject titles Excel cannot store, before any sheet is created."""
    seen = set()
    for title in titles:
        if not title:
            raise InvalidSheetNameError("Invalid sheet name: table name is empty")
        if len(title) > MAX_SHEET_TITLE:
            raise InvalidSheetNameError(
                f"Invalid sheet name '{title}': longer than {MAX_SHEET_TITLE} characters"
            )
        if _FORBIDDEN_SHEET_CHARS.search(title):
            raise InvalidSheetNameError(f"Invalid sheet name '{title}': contains one of []:*?/\\")
        key = title.lower()
        if key in seen:
            raise InvalidSheetNameError(f"Duplicate sheet name '{title}'")
        seen.add(key)


def _style_header(ws, column_count):
    header_fill = PatternFill(start_color=HEADER_FILL_COLOR, end_color=HEADER_FILL_COLOR, fill_type="solid")
    header_font = Font(bold=True)
    for col_idx in range(1, column_count + 1):
        cell = ws.cell(row=1, column=col_idx)
        cell.fill = header_fill
        cell.font = header_font


def _auto_adjust_column_widths(ws, column_count):
    for col_idx in range(1, column_count + 1):
        max_len = 0
        for (value,) in ws.iter_rows(min_col=col_idx, max_col=col_idx, values_only=True):
            if value is not None:
                max_len = max(max_len, len(str(value)))
        ws.column_dimensions[get_column_letter(col_idx)].width = max(max_len + COLUMN_PADDING, MIN_COLUMN_WIDTH)


def _add_borders(ws, row_count, column_count):
    thin = Side(style="thin")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    for row in ws.iter_rows(min_row=1, max_row=row_count, min_col=1, max_col=column_count):
        for cell in row:
            cell.border = border


def _write_sheet(ws, row_set):
    ws.append(list(row_set.header))
    for idx, row in enumerate(row_set.rows, start=2):
        try:
            ws.append(display_row(row_set.kinds, row))
        except IllegalCharacterError as e:
            raise SchemaStructureError(
                f"Sheet '{ws.title}' row {idx} contains a character Excel cannot store: {row!r}"
            ) from e

    _style_header(ws, row_set.column_count)
    _auto_adjust_column_widths(ws, row_set.column_count)
    _add_borders(ws, len(row_set.rows) + 1, row_set.column_count)
    ws.freeze_panes = "A2"


class ExcelExporter:
    """Build a workbook from a database, then persist it with save_to_file()."""

    def __init__(self):
        self.format = "xlsx"
        self.workbook: Optional[Workbook] = None

    def export(self, database) -> ExcelExportResult:
        db = require_database(database)
        projection = project(db)

        titles = [OVERVIEW_TITLE] + [rs.title for rs in projection.tables]
        validate_sheet_titles(titles)

        wb = Workbook()
        wb.properties.creator = WORKBOOK_CREATOR
        wb.properties.created = datetime.now()

        ws = wb.active
        ws.title = OVERVIEW_TITLE
        _write_sheet(ws, projection.overview)
        for row_set in projection.tables:
            _write_sheet(wb.create_sheet(title=row_set.title), row_set)

        self.workbook = wb
        logger.info("Built workbook with %d sheet(s)", len(titles))
        return ExcelExportResult(
            format=self.format,
            workbook=wb,
            worksheets=titles,
            tables_count=len(db.tables),
        )

    def to_bytes(self) -> bytes:
        if self.workbook is None:
            raise NoWorkbookError("No workbook to save. Call export() first.")
        buffer = io.BytesIO()
        self.workbook.save(buffer)
        return buffer.getvalue()

    def save_to_file(self, output_path: Union[str, Path]) -> SaveResult:
        """Write the exported workbook; the file is complete once this returns."""
        data = self.to_bytes()
        path = write_file_atomic(output_path, data)
        logger.info("Saved workbook to %s", path)
        return SaveResult(file_path=path, format=self.format)
