"""
Column generator used to describe tables for DDL compilation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List

GENERIC_TYPES = frozenset(
    {
        "string",
        "text",
        "integer",
        "bigint",
        "smallint",
        "boolean",
        "float",
        "decimal",
        "date",
        "timestamp",
        "timestamptz",
    }
)


class SchemaDefinitionError(Exception):
    """Raised when a table definition is inconsistent."""


@dataclass
class ColumnSpec:
    """
    A single column declaration.

    ``type`` is either one of ``GENERIC_TYPES``, which dialects translate, or a
    raw database type that is emitted verbatim.
    """

    name: str
    type: str
    size: int | None = None
    precision: int | None = None
    scale: int | None = None
    nullable: bool = True
    default: Any = None
    db_default: str | None = None
    primary_key: bool = False
    unique: bool = False
    serial: bool = False

    @property
    def is_generic(self) -> bool:
        return self.type in GENERIC_TYPES


class TableGenerator:
    """
    Collects column declarations inside a ``create_table`` block.
    """

    def __init__(self) -> None:
        self.columns: List[ColumnSpec] = []
        self.primary_key_columns: tuple[str, ...] = ()

    @property
    def column_names(self) -> list[str]:
        return [column.name for column in self.columns]

    def column(self, name: str, type: str, **options: Any) -> ColumnSpec:
        if name in self.column_names:
            raise SchemaDefinitionError(f"Column '{name}' is already defined.")
        spec = ColumnSpec(name=name, type=type, **options)
        if spec.primary_key:
            spec.nullable = False
        self.columns.append(spec)
        return spec

    def primary_key(self, name: str = "id", type: str = "integer", **options: Any) -> ColumnSpec:
        if self.primary_key_columns:
            raise SchemaDefinitionError("Table already declares a composite primary key.")
        options.setdefault("serial", type == "integer")
        return self.column(name, type, primary_key=True, **options)

    def composite_primary_key(self, *names: str) -> None:
        if any(column.primary_key for column in self.columns):
            raise SchemaDefinitionError("Table already declares a column primary key.")
        missing = [name for name in names if name not in self.column_names]
        if missing:
            raise SchemaDefinitionError(
                f"Primary key references undefined column(s): {', '.join(missing)}"
            )
        self.primary_key_columns = tuple(names)

    # Typed helpers ------------------------------------------------------
    def string(self, name: str, size: int | None = None, **options: Any) -> ColumnSpec:
        return self.column(name, "string", size=size, **options)

    def text(self, name: str, **options: Any) -> ColumnSpec:
        return self.column(name, "text", **options)

    def integer(self, name: str, **options: Any) -> ColumnSpec:
        return self.column(name, "integer", **options)

    def bigint(self, name: str, **options: Any) -> ColumnSpec:
        return self.column(name, "bigint", **options)

    def smallint(self, name: str, **options: Any) -> ColumnSpec:
        return self.column(name, "smallint", **options)

    def boolean(self, name: str, **options: Any) -> ColumnSpec:
        return self.column(name, "boolean", **options)

    def float(self, name: str, **options: Any) -> ColumnSpec:
        return self.column(name, "float", **options)

    def decimal(
        self,
        name: str,
        precision: int | None = None,
        scale: int | None = None,
        **options: Any,
    ) -> ColumnSpec:
        return self.column(name, "decimal", precision=precision, scale=scale, **options)

    def date(self, name: str, **options: Any) -> ColumnSpec:
        return self.column(name, "date", **options)

    def timestamp(self, name: str, **options: Any) -> ColumnSpec:
        return self.column(name, "timestamp", **options)

    def timestamptz(self, name: str, **options: Any) -> ColumnSpec:
        return self.column(name, "timestamptz", **options)
