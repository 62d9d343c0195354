# tests/test_excel_export.py

import os

import pytest
from openpyxl import load_workbook

from dbml_convert.errors import ExportWriteError, InvalidSheetNameError, NoWorkbookError, SchemaStructureError
from dbml_convert.excel_export import MIN_COLUMN_WIDTH, ExcelExporter, validate_sheet_titles


def test_export_scenario_sheets(sample_database):
    exporter = ExcelExporter()
    result = exporter.export(sample_database)
    assert result.format == "xlsx"
    assert result.tables_count == 2
    assert result.worksheets == ["テーブル一覧", "users", "products"]
    assert result.workbook.sheetnames == ["テーブル一覧", "users", "products"]
    assert exporter.workbook is result.workbook


def test_overview_field_count_is_numeric(sample_database):
    wb = ExcelExporter().export(sample_database).workbook
    ws = wb["テーブル一覧"]
    assert ws.cell(row=2, column=1).value == "users"
    assert ws.cell(row=2, column=3).value == 4
    assert ws.cell(row=2, column=3).data_type == "n"


def test_detail_sheet_markers(sample_database):
    ws = ExcelExporter().export(sample_database).workbook["users"]
    rows = list(ws.iter_rows(values_only=True))
    assert len(rows) == 5
    assert rows[0][2] == "NULL許可"
    assert rows[1][:3] == ("id", "bigint", "×")
    assert rows[1][4] == "○"
    assert rows[3][2] == "○"


def test_header_styling_limited_to_columns(sample_database):
    ws = ExcelExporter().export(sample_database).workbook["users"]
    for col in range(1, 9):
        cell = ws.cell(row=1, column=col)
        assert cell.font.bold is True
        assert cell.fill.fill_type == "solid"
    assert ws.cell(row=1, column=9).fill.fill_type is None
    assert ws.cell(row=2, column=1).font.bold is not True


def test_borders_cover_data_rectangle_only(sample_database):
    ws = ExcelExporter().export(sample_database).workbook["products"]
    inside = ws.cell(row=2, column=8).border
    assert inside.left.style == "thin" and inside.right.style == "thin"
    assert inside.top.style == "thin" and inside.bottom.style == "thin"
    assert ws.cell(row=3, column=1).border.left.style is None
    assert ws.cell(row=1, column=9).border.left.style is None


def test_column_widths_have_floor(sample_database):
    ws = ExcelExporter().export(sample_database).workbook["users"]
    assert ws.column_dimensions["E"].width == MIN_COLUMN_WIDTH
    long_note = "x" * 40
    sample_database["tables"][0]["fields"][0]["note"] = long_note
    ws = ExcelExporter().export(sample_database).workbook["users"]
    assert ws.column_dimensions["H"].width == len(long_note) + 2


def test_empty_database_has_only_overview():
    result = ExcelExporter().export({"tables": []})
    assert result.workbook.sheetnames == ["テーブル一覧"]
    assert result.workbook["テーブル一覧"].max_row == 1


@pytest.mark.parametrize("bad", [{}, {"tables": None}, {"tables": "not-an-array"}])
def test_export_rejects_structural_errors(bad):
    exporter = ExcelExporter()
    with pytest.raises(SchemaStructureError, match="Invalid database structure"):
        exporter.export(bad)
    assert exporter.workbook is None


@pytest.mark.parametrize(
    "names",
    [["users", "users"], ["Users", "users"], ["a/b"], ["x" * 32], [""], ["テーブル一覧"]],
)
def test_invalid_sheet_names_are_rejected(names):
    exporter = ExcelExporter()
    with pytest.raises(InvalidSheetNameError):
        exporter.export({"tables": [{"name": n, "fields": []} for n in names]})
    assert exporter.workbook is None


def test_validate_sheet_titles_accepts_valid():
    validate_sheet_titles(["テーブル一覧", "users", "x" * 31])


def test_save_before_export_fails(tmp_path):
    with pytest.raises(NoWorkbookError):
        ExcelExporter().save_to_file(tmp_path / "out.xlsx")
    assert not (tmp_path / "out.xlsx").exists()


def test_save_round_trip(tmp_path, sample_database):
    exporter = ExcelExporter()
    exporter.export(sample_database)
    target = tmp_path / "nested" / "dir" / "out.xlsx"
    saved = exporter.save_to_file(target)
    assert saved.file_path == target
    assert saved.format == "xlsx"

    wb = load_workbook(target)
    assert wb.sheetnames == ["テーブル一覧", "users", "products"]
    assert wb["テーブル一覧"].cell(row=2, column=3).value == 4
    assert wb["users"].cell(row=1, column=1).font.bold is True
    assert wb["users"].cell(row=2, column=1).border.top.style == "thin"
    assert [p for p in os.listdir(target.parent) if p.endswith(".tmp")] == []


def test_save_failure_is_wrapped(tmp_path, sample_database):
    blocker = tmp_path / "blocker"
    blocker.write_text("file, not a directory", encoding="utf-8")
    exporter = ExcelExporter()
    exporter.export(sample_database)
    with pytest.raises(ExportWriteError) as excinfo:
        exporter.save_to_file(blocker / "out.xlsx")
    assert excinfo.value.path == blocker / "out.xlsx" or excinfo.value.path == blocker
    assert isinstance(excinfo.value.__cause__, OSError)


def test_control_character_is_reported_with_sheet_name():
    exporter = ExcelExporter()
    with pytest.raises(SchemaStructureError, match="テーブル一覧"):
        exporter.export({"tables": [{"name": "t", "note": "bad\x01note", "fields": []}]})
    assert exporter.workbook is None


def test_control_character_in_field_note_names_table_sheet():
    database = {"tables": [{"name": "t", "fields": [{"name": "a", "type": "int", "note": "x\x02y"}]}]}
    with pytest.raises(SchemaStructureError, match="Sheet 't' row 2"):
        ExcelExporter().export(database)


def test_non_scalar_default_is_written_as_text():
    database = {"tables": [{"name": "t", "fields": [{"name": "a", "type": "int", "default": [1, 2]}]}]}
    ws = ExcelExporter().export(database).workbook["t"]
    assert ws["D2"].value == "[1, 2]"
