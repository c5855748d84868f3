"""
Catalog introspection for Redshift tables.

Column metadata comes from the PostgreSQL-compatible ``pg_*`` catalogs.
Storage layout comes from the Redshift-specific ``pg_class.reldiststyle``,
``pg_attribute.attisdistkey`` and ``pg_attribute.attsortkeyord`` columns.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, List

from ..adapters.base import DatabaseAdapter
from ..dialects.base import Dialect
from ..utils import get_logger

TABLES_SQL = (
    "SELECT pg_class.relname FROM pg_class "
    "JOIN pg_namespace ON pg_namespace.oid = pg_class.relnamespace "
    "WHERE pg_class.relkind = 'r' AND pg_namespace.nspname = %s "
    "ORDER BY pg_class.relname"
)

# Redshift's pg_index.indkey cannot be compared with ANY() directly, so the
# int2vector is round-tripped through text first.
COLUMNS_SQL = (
    "SELECT pg_attribute.attname, "
    "format_type(pg_type.oid, pg_attribute.atttypmod), "
    "pg_get_expr(pg_attrdef.adbin, pg_class.oid), "
    "NOT pg_attribute.attnotnull, "
    "COALESCE(pg_attribute.attnum = ANY(string_to_array(textin(int2vectorout(pg_index.indkey)), ' ')), false) "
    "FROM pg_class "
    "JOIN pg_attribute ON pg_attribute.attrelid = pg_class.oid "
    "JOIN pg_type ON pg_type.oid = pg_attribute.atttypid "
    "LEFT OUTER JOIN pg_attrdef ON pg_attrdef.adrelid = pg_class.oid "
    "AND pg_attrdef.adnum = pg_attribute.attnum "
    "LEFT OUTER JOIN pg_index ON pg_index.indrelid = pg_class.oid AND pg_index.indisprimary "
    "WHERE NOT pg_attribute.attisdropped AND pg_attribute.attnum > 0 "
    "AND pg_class.oid = %s::regclass "
    "ORDER BY pg_attribute.attnum"
)

DISTSTYLE_SQL = "SELECT pg_class.reldiststyle FROM pg_class WHERE pg_class.oid = %s::regclass"

LAYOUT_SQL = (
    "SELECT pg_attribute.attname, pg_attribute.attisdistkey, pg_attribute.attsortkeyord "
    "FROM pg_attribute "
    "WHERE pg_attribute.attrelid = %s::regclass "
    "AND pg_attribute.attnum > 0 AND NOT pg_attribute.attisdropped "
    "ORDER BY pg_attribute.attnum"
)

# pg_class.reldiststyle codes.
DISTSTYLE_CODES = {
    0: "even",
    1: "key",
    8: "all",
    9: "auto",
    10: "auto",
    11: "auto",
}

_SIZED_RE = re.compile(r"^(?P<base>[a-z ]+?)\s*\((?P<args>[^)]*)\)(?P<suffix>.*)$")
_INTEGER_RE = re.compile(r"^-?\d+$")
_FLOAT_RE = re.compile(r"^-?\d+\.\d+$")
_QUOTED_DEFAULT_RE = re.compile(
    r"^'(?P<literal>(?:[^']|'')*)'(?:::(?P<cast>[a-z ]+?)\s*(?:\([\d,\s]+\))?)?$",
    re.IGNORECASE,
)

_NUMERIC_CASTS = {
    "integer", "int", "int4", "bigint", "int8", "smallint", "int2",
    "numeric", "decimal", "real", "float4", "double precision", "float8",
}

_BASE_TYPES = {
    "character varying": "string",
    "varchar": "string",
    "character": "string",
    "char": "string",
    "bpchar": "string",
    "text": "text",
    "integer": "integer",
    "int": "integer",
    "int4": "integer",
    "bigint": "bigint",
    "int8": "bigint",
    "smallint": "smallint",
    "int2": "smallint",
    "boolean": "boolean",
    "bool": "boolean",
    "double precision": "float",
    "real": "float",
    "float8": "float",
    "float4": "float",
    "numeric": "decimal",
    "decimal": "decimal",
    "date": "date",
    "timestamp without time zone": "timestamp",
    "timestamp": "timestamp",
    "timestamp with time zone": "timestamptz",
    "timestamptz": "timestamptz",
}


@dataclass
class ColumnInfo:
    name: str
    db_type: str
    type: str | None = None
    size: int | None = None
    precision: int | None = None
    scale: int | None = None
    allow_null: bool = True
    default: Any = None
    db_default: str | None = None
    primary_key: bool = False


@dataclass
class TableStorage:
    """Storage layout as read from the catalog, before option normalization."""

    diststyle: str | None = None
    distkey: str | None = None
    sortstyle: str | None = None
    sortkeys: List[str] = field(default_factory=list)


def schema_column_type(db_type: str) -> tuple[str | None, int | None, int | None, int | None]:
    """
    Map a ``format_type`` string to ``(generic type, size, precision, scale)``.
    """
    normalized = db_type.strip().lower()
    size = precision = scale = None
    match = _SIZED_RE.match(normalized)
    if match:
        normalized = (match.group("base") + match.group("suffix")).strip()
        args = [arg.strip() for arg in match.group("args").split(",") if arg.strip()]
        numbers = [int(arg) for arg in args if arg.isdigit()]
        generic = _BASE_TYPES.get(normalized)
        if generic == "decimal":
            precision = numbers[0] if numbers else None
            scale = numbers[1] if len(numbers) > 1 else None
        elif generic in {"string", "text"}:
            size = numbers[0] if numbers else None
        return generic, size, precision, scale
    return _BASE_TYPES.get(normalized), size, precision, scale


def parse_default(expression: str | None) -> tuple[Any, str | None]:
    """
    Split a catalog default expression into a Python value or raw SQL.

    Returns ``(value, None)`` for simple literals and ``(None, expression)``
    otherwise.
    """
    if expression is None or not expression.strip():
        return None, None
    text = expression.strip()
    number = _parse_number(text)
    if number is not None:
        return number, None
    if text.lower() in {"true", "false"}:
        return text.lower() == "true", None
    match = _QUOTED_DEFAULT_RE.match(text)
    if match:
        literal = match.group("literal").replace("''", "'")
        cast = (match.group("cast") or "").strip().lower()
        if cast not in _NUMERIC_CASTS:
            return literal, None
        # Negative numbers come back quoted, e.g. '-1'::integer.
        number = _parse_number(literal)
        if number is not None:
            return number, None
    return None, text


def _parse_number(text: str) -> int | float | None:
    if _INTEGER_RE.match(text):
        return int(text)
    if _FLOAT_RE.match(text):
        return float(text)
    return None


class SchemaIntrospector:
    """
    Reads table structure and storage layout through a database adapter.
    """

    def __init__(self, adapter: DatabaseAdapter, dialect: Dialect | None = None) -> None:
        self.adapter = adapter
        self.dialect = dialect or adapter.dialect
        self.logger = get_logger("schema.introspection")

    def tables(self, schema: str = "public") -> list[str]:
        cursor = self.adapter.execute(TABLES_SQL, (schema,))
        return [row[0] for row in cursor.fetchall()]

    def columns(self, table: str) -> list[ColumnInfo]:
        cursor = self.adapter.execute(COLUMNS_SQL, (self._regclass(table),))
        columns: list[ColumnInfo] = []
        for name, db_type, default, allow_null, primary_key in cursor.fetchall():
            generic, size, precision, scale = schema_column_type(db_type)
            value, raw_default = parse_default(default)
            columns.append(
                ColumnInfo(
                    name=name,
                    db_type=db_type,
                    type=generic,
                    size=size,
                    precision=precision,
                    scale=scale,
                    allow_null=bool(allow_null),
                    default=value,
                    db_default=raw_default,
                    primary_key=bool(primary_key),
                )
            )
        return columns

    def storage_layout(self, table: str) -> TableStorage:
        if not self.dialect.capabilities.supports_storage_layout:
            return TableStorage()
        regclass = self._regclass(table)
        row = self.adapter.execute(DISTSTYLE_SQL, (regclass,)).fetchone()
        diststyle = None
        if row is not None and row[0] is not None:
            diststyle = DISTSTYLE_CODES.get(int(row[0]))
            if diststyle is None:
                self.logger.warning("Unrecognized reldiststyle %s for %s", row[0], table)

        storage = TableStorage(diststyle=diststyle)
        sortkey_positions: list[tuple[int, str]] = []
        for name, is_distkey, sortkey_ord in self.adapter.execute(LAYOUT_SQL, (regclass,)).fetchall():
            if is_distkey:
                storage.distkey = name
            if sortkey_ord:
                sortkey_positions.append((int(sortkey_ord), name))

        if sortkey_positions:
            interleaved = any(position < 0 for position, _ in sortkey_positions)
            storage.sortstyle = "interleaved" if interleaved else "compound"
            storage.sortkeys = [name for _, name in sorted(sortkey_positions, key=lambda item: abs(item[0]))]
        return storage

    def _regclass(self, table: str) -> str:
        return self.dialect.format_table(table)
