"""Format-agnostic projection of a normalized schema into row sets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from dbml_convert.schema import NormalizedDatabase

OVERVIEW_TITLE = "テーブル一覧"
OVERVIEW_HEADERS = ("テーブル名", "説明", "フィールド数")
TABLE_HEADERS = (
    "フィールド名",
    "データ型",
    "NULL許可",
    "デフォルト値",
    "主キー",
    "ユニーク",
    "自動増分",
    "説明",
)

# Column kinds tell each encoder how to turn a raw cell into display text.
TEXT = "text"
COUNT = "count"
NULLABLE = "nullable"
FLAG = "flag"

OVERVIEW_KINDS = (TEXT, TEXT, COUNT)
TABLE_KINDS = (TEXT, TEXT, NULLABLE, TEXT, FLAG, FLAG, FLAG, TEXT)


@dataclass
class RowSet:
    title: str
    header: Tuple[str, ...]
    kinds: Tuple[str, ...]
    rows: List[Tuple[Any, ...]] = field(default_factory=list)

    @property
    def column_count(self) -> int:
        return len(self.header)

    def __len__(self) -> int:
        return len(self.rows)


@dataclass
class Projection:
    overview: RowSet
    tables: List[RowSet] = field(default_factory=list)

    @property
    def details(self) -> Dict[str, RowSet]:
        # Later tables with a repeated name replace earlier ones.
        return {rs.title: rs for rs in self.tables}


def _overview_row(table):
    return (str(table.name), table.note or "", table.field_count)


def _field_row(f):
    # Flags stay boolean; the NULLABLE column carries not_null and is inverted on render.
    return (
        f.name,
        f.type_display,
        f.not_null,
        "" if f.default is None else f.default,
        f.pk,
        f.unique,
        f.increment,
        f.note or "",
    )


def project_overview(db):
    return RowSet(
        title=OVERVIEW_TITLE,
        header=OVERVIEW_HEADERS,
        kinds=OVERVIEW_KINDS,
        rows=[_overview_row(t) for t in db.tables],
    )


def project_table(table):
    return RowSet(
        title=str(table.name),
        header=TABLE_HEADERS,
        kinds=TABLE_KINDS,
        rows=[_field_row(f) for f in table.iter_fields()],
    )


def project(db: NormalizedDatabase) -> Projection:
    """Build the overview row set and one detail row set per table, in input order."""
    return Projection(
        overview=project_overview(db),
        tables=[project_table(t) for t in db.tables],
    )
