"""Display markers for boolean field attributes.

Both exporters share one convention: attribute flags show ``○`` when set
and nothing otherwise. The NULL許可 column answers "are nulls allowed?",
so it shows ``×`` for a not_null field and ``○`` for a nullable one.
"""

from typing import Any

from dbml_convert.projector import COUNT, FLAG, NULLABLE

MARK_ON = "○"
MARK_OFF = ""
NULL_NOT_ALLOWED = "×"
NULL_ALLOWED = "○"


def flag_marker(value: Any) -> str:
    return MARK_ON if value else MARK_OFF


def nullable_marker(not_null: Any) -> str:
    return NULL_NOT_ALLOWED if not_null else NULL_ALLOWED


def display_value(kind: str, value: Any) -> Any:
    """Turn a projected cell into its display value; counts stay numeric."""
    if kind == FLAG:
        return flag_marker(value)
    if kind == NULLABLE:
        return nullable_marker(value)
    if kind == COUNT:
        return value
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return value
    # Lists and objects from JSON input are shown as text in both encoders.
    return str(value)


def display_row(kinds, row):
    return [display_value(kind, value) for kind, value in zip(kinds, row)]
