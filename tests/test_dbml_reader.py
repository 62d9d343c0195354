# tests/test_dbml_reader.py

import pytest

from dbml_convert.dbml_reader import load_schema_file, parse_dbml_content, parse_dbml_file
from dbml_convert.errors import DBMLParseError, InputNotFoundError
from dbml_convert.schema import render_type


def test_parse_dbml_content_tables_and_notes(dbml_text):
    raw = parse_dbml_content(dbml_text)
    assert [t["name"] for t in raw["tables"]] == ["users", "products"]
    assert raw["tables"][0]["note"] == "ユーザー情報テーブル"
    assert len(raw["tables"][0]["fields"]) == 4
    assert len(raw["tables"][1]["fields"]) == 1


def test_parse_dbml_content_field_attributes(dbml_text):
    users = parse_dbml_content(dbml_text)["tables"][0]["fields"]
    id_field, email, name, status = users
    assert id_field["pk"] is True
    assert id_field["increment"] is True
    assert email["unique"] is True
    assert email["not_null"] is True
    assert email["note"] == "メールアドレス"
    assert name["not_null"] is False
    assert status["default"] == "active"


def test_parse_dbml_content_sized_types(dbml_text):
    raw = parse_dbml_content(dbml_text)
    assert render_type(raw["tables"][0]["fields"][1]["type"]) == "varchar(255)"
    assert render_type(raw["tables"][1]["fields"][0]["type"]) == "decimal(10, 2)"
    assert render_type(raw["tables"][0]["fields"][0]["type"]) == "bigint"


@pytest.mark.parametrize("content", ["", "   \n", None])
def test_parse_dbml_content_rejects_empty(content):
    with pytest.raises(DBMLParseError, match="empty or invalid"):
        parse_dbml_content(content)


def test_parse_dbml_content_wraps_parser_errors():
    with pytest.raises(DBMLParseError, match="Failed to parse DBML content"):
        parse_dbml_content("Table users { id int [pk")


def test_parse_dbml_file_missing(tmp_path):
    with pytest.raises(InputNotFoundError, match="DBML file not found"):
        parse_dbml_file(tmp_path / "missing.dbml")


def test_load_schema_file_dbml(dbml_file):
    assert len(load_schema_file(dbml_file)["tables"]) == 2


def test_load_schema_file_json(json_file, sample_database):
    assert load_schema_file(json_file) == sample_database


def test_load_schema_file_bad_json(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(DBMLParseError):
        load_schema_file(path)
