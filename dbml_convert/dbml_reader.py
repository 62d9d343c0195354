"""Read schema input: DBML text via pydbml, or an exported schema JSON file.

pydbml returns an object graph; ``database_to_raw`` flattens it into the
plain ``{"tables": [{"name", "note", "fields": [...]}]}`` mapping that the
rest of the package consumes.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Union

from pydbml import PyDBML

from dbml_convert.errors import DBMLParseError, InputNotFoundError

logger = logging.getLogger(__name__)

_SIZED_TYPE = re.compile(r"^\s*([^()]+?)\s*\((.*)\)\s*$")


def _note_text(note: Any) -> str:
    if note is None:
        return ""
    text = getattr(note, "text", note)
    return str(text or "")


def _split_type(type_value: Any) -> Union[str, Dict[str, Any]]:
    """'varchar(100)' -> {'type_name': 'varchar', 'args': ['100']}; enums use their name."""
    if not isinstance(type_value, str):
        type_value = getattr(type_value, "name", str(type_value))
    m = _SIZED_TYPE.match(type_value)
    if not m:
        return type_value
    args = [a.strip() for a in m.group(2).split(",") if a.strip()]
    return {"type_name": m.group(1), "args": args}


def _default_value(default: Any) -> Any:
    if default is None:
        return None
    if isinstance(default, (bool, int, float, str)):
        return default
    # pydbml wraps backtick defaults in an Expression object.
    return getattr(default, "text", str(default))


def _column_to_raw(column) -> Dict[str, Any]:
    return {
        "name": column.name,
        "type": _split_type(column.type),
        "not_null": bool(getattr(column, "not_null", False)),
        "unique": bool(getattr(column, "unique", False)),
        "pk": bool(getattr(column, "pk", False)),
        "increment": bool(getattr(column, "autoinc", False)),
        "default": _default_value(getattr(column, "default", None)),
        "note": _note_text(getattr(column, "note", None)),
    }


def _table_to_raw(table) -> Dict[str, Any]:
    return {
        "name": table.name,
        "schema": getattr(table, "schema", None),
        "alias": getattr(table, "alias", None),
        "note": _note_text(getattr(table, "note", None)),
        "fields": [_column_to_raw(c) for c in table.columns],
    }


def database_to_raw(parsed) -> Dict[str, Any]:
    tables: List[Dict[str, Any]] = [_table_to_raw(t) for t in parsed.tables]
    return {"tables": tables}


def parse_dbml_content(content: str) -> Dict[str, Any]:
    if not content or not isinstance(content, str) or not content.strip():
        raise DBMLParseError("DBML content is empty or invalid")
    try:
        parsed = PyDBML(content)
    except Exception as e:
        raise DBMLParseError(f"Failed to parse DBML content: {e}") from e
    raw = database_to_raw(parsed)
    logger.info("Parsed DBML with %d table(s)", len(raw["tables"]))
    return raw


def _read_text(path: Path) -> str:
    if not path.exists():
        raise InputNotFoundError(f"DBML file not found: {path}")
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise DBMLParseError(f"Failed to read DBML file: {e}") from e


def parse_dbml_file(file_path: Union[str, Path]) -> Dict[str, Any]:
    return parse_dbml_content(_read_text(Path(file_path)))


def load_schema_file(file_path: Union[str, Path]) -> Any:
    """Load a schema from ``.json`` (already in raw form) or DBML text."""
    path = Path(file_path)
    if path.suffix.lower() != ".json":
        return parse_dbml_file(path)
    text = _read_text(path)
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise DBMLParseError(f"Failed to parse schema JSON {path}: {e}") from e
