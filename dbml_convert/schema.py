"""Canonical in-memory form of a parsed DBML schema.

The parser collaborator hands over a loosely shaped mapping
(``{"tables": [...]}``). ``normalize_database`` reshapes it once so the
projector and both exporters can iterate ``table.fields`` without
re-checking the input. Field types are resolved into a small tagged union
and rendered to a single display string.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from dbml_convert.errors import SchemaStructureError

UNKNOWN_TYPE = "unknown"
TYPE_ARGS_SEPARATOR = ", "
INVALID_STRUCTURE_MESSAGE = "Invalid database structure: tables array required"


# --------------------------------------------------------------------------------------
# Field types
# --------------------------------------------------------------------------------------
@dataclass(frozen=True)
class PlainType:
    name: str

    def render(self) -> str:
        return self.name


@dataclass(frozen=True)
class ParameterizedType:
    name: str
    args: Tuple[Any, ...] = ()

    def render(self) -> str:
        if not self.args:
            return self.name
        return f"{self.name}({TYPE_ARGS_SEPARATOR.join(str(a) for a in self.args)})"


FieldType = Union[PlainType, ParameterizedType]


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def resolve_type(raw: Any) -> Optional[FieldType]:
    """Map a raw ``type`` attribute onto PlainType / ParameterizedType, or None."""
    if isinstance(raw, str):
        return PlainType(raw)
    if isinstance(raw, Mapping) and raw.get("type_name"):
        args = raw.get("args")
        return ParameterizedType(str(raw["type_name"]), tuple(args) if _is_sequence(args) else ())
    return None


def render_type(raw: Any) -> str:
    resolved = resolve_type(raw)
    if resolved is None:
        return UNKNOWN_TYPE
    return resolved.render()


# --------------------------------------------------------------------------------------
# Normalized schema
# --------------------------------------------------------------------------------------
@dataclass(frozen=True)
class NormalizedField:
    name: str
    type: Any
    not_null: bool = False
    unique: bool = False
    pk: bool = False
    increment: bool = False
    default: Any = None
    note: str = ""

    @classmethod
    def from_raw(cls, raw: Any, table_name: str = "") -> "NormalizedField":
        if not isinstance(raw, Mapping):
            raise SchemaStructureError(
                f"Invalid field in table '{table_name}': expected an object, got {type(raw).__name__}"
            )
        name = raw.get("name")
        return cls(
            name="" if name is None else str(name),
            type=raw.get("type"),
            not_null=bool(raw.get("not_null")),
            unique=bool(raw.get("unique")),
            pk=bool(raw.get("pk")),
            increment=bool(raw.get("increment")),
            default=raw.get("default"),
            note=raw.get("note") or "",
        )

    @property
    def type_display(self) -> str:
        return render_type(self.type)


@dataclass(frozen=True)
class NormalizedTable:
    name: Any
    note: Any = ""
    fields: Tuple[Any, ...] = ()
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def field_count(self) -> int:
        return len(self.fields)

    def iter_fields(self):
        for raw in self.fields:
            yield NormalizedField.from_raw(raw, str(self.name))

    def to_raw(self) -> Dict[str, Any]:
        out = dict(self.extra)
        out["name"] = self.name
        out["note"] = self.note
        out["fields"] = list(self.fields)
        return out


@dataclass(frozen=True)
class NormalizedDatabase:
    tables: Tuple[NormalizedTable, ...] = ()

    def to_raw(self) -> Dict[str, Any]:
        return {"tables": [t.to_raw() for t in self.tables]}


def _normalize_table(raw: Any) -> NormalizedTable:
    # Non-mapping entries spread to nothing, leaving an anonymous empty table.
    table = dict(raw) if isinstance(raw, Mapping) else {}
    fields = table.pop("fields", None)
    name = table.pop("name", "")
    note = table.pop("note", None)
    return NormalizedTable(
        name="" if name is None else name,
        note="" if note is None else note,
        fields=tuple(fields) if _is_sequence(fields) else (),
        extra=table,
    )


def normalize_database(raw: Any) -> NormalizedDatabase:
    """Return a NormalizedDatabase for any raw schema shape; never raises.

    ``tables`` that is absent, null or not a list becomes an empty tuple.
    Each table keeps its other properties, and a missing or non-list
    ``fields`` becomes empty. The input is not modified.
    """
    if isinstance(raw, NormalizedDatabase):
        return raw
    tables = raw.get("tables") if isinstance(raw, Mapping) else None
    if not _is_sequence(tables):
        return NormalizedDatabase(())
    return NormalizedDatabase(tuple(_normalize_table(t) for t in tables))


def require_database(database: Any) -> NormalizedDatabase:
    """Entry check shared by the exporters.

    A NormalizedDatabase passes through; a raw mapping must carry a list
    ``tables`` and is then normalized. Anything else is a structural error.
    """
    if isinstance(database, NormalizedDatabase):
        return database
    if not isinstance(database, Mapping) or not _is_sequence(database.get("tables")):
        raise SchemaStructureError(INVALID_STRUCTURE_MESSAGE)
    return normalize_database(database)
