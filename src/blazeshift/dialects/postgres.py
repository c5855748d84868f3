"""
PostgreSQL dialect implementation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from ..storage import StorageOptionError, StorageOptions
from .base import DialectCapabilities

if TYPE_CHECKING:
    from ..schema.generator import ColumnSpec


class UnsupportedStorageLayout(StorageOptionError):
    """Raised when a dialect without storage-layout clauses receives layout options."""


class PostgresDialect:
    """
    PostgreSQL dialect using percent positional parameters.
    """

    name: str = "postgresql"
    param_style: Final[str] = "pyformat"
    capabilities: DialectCapabilities = DialectCapabilities(
        supports_returning=True,
        supports_schema_namespaces=True,
    )

    type_map: dict[str, str] = {
        "string": "TEXT",
        "text": "TEXT",
        "integer": "INTEGER",
        "bigint": "BIGINT",
        "smallint": "SMALLINT",
        "boolean": "BOOLEAN",
        "float": "DOUBLE PRECISION",
        "decimal": "NUMERIC",
        "date": "DATE",
        "timestamp": "TIMESTAMP",
        "timestamptz": "TIMESTAMPTZ",
    }
    serial_type: str = "SERIAL"

    def quote_identifier(self, identifier: str) -> str:
        escaped = identifier.replace('"', '""')
        return f'"{escaped}"'

    def format_table(self, table_name: str) -> str:
        if "." in table_name:
            schema, table = table_name.split(".", 1)
            return f"{self.quote_identifier(schema)}.{self.quote_identifier(table)}"
        return self.quote_identifier(table_name)

    def parameter_placeholder(self, position: int | None = None) -> str:
        return "%s"

    def render_column_definition(self, column: str, column_type: str, *, nullable: bool) -> str:
        null_clause = "" if nullable else " NOT NULL"
        return f"{self.quote_identifier(column)} {column_type}{null_clause}"

    def column_type_sql(self, column: "ColumnSpec") -> str:
        if column.serial:
            return self.serial_type
        if column.type == "string" and column.size is not None:
            return f"VARCHAR({column.size})"
        if column.type == "decimal" and column.precision is not None:
            if column.scale is not None:
                return f"NUMERIC({column.precision}, {column.scale})"
            return f"NUMERIC({column.precision})"
        return self.type_map.get(column.type, column.type)

    def table_options_sql(self, options: StorageOptions) -> str:
        if not options.is_empty():
            raise UnsupportedStorageLayout(
                f"{self.name} does not support DISTSTYLE, DISTKEY, or SORTKEY clauses"
            )
        return ""
