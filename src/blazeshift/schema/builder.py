"""
Schema builder converting table definitions into DDL statements.
"""

from __future__ import annotations

from typing import Any, List, Mapping

from ..dialects.base import Dialect
from ..storage import StorageOptions, option_columns
from ..utils import get_logger
from .generator import ColumnSpec, SchemaDefinitionError, TableGenerator


class SchemaBuilder:
    """
    Produces dialect-specific SQL for schema manipulation.
    """

    def __init__(self, dialect: Dialect) -> None:
        self.dialect = dialect
        self.logger = get_logger("schema.builder")

    def create_table_sql(
        self,
        table_name: str,
        generator: TableGenerator,
        options: StorageOptions | Mapping[str, Any] | None = None,
        *,
        if_not_exists: bool = False,
    ) -> str:
        # Options are validated before anything is rendered.
        storage = StorageOptions.coerce(options)
        if not generator.columns:
            raise SchemaDefinitionError(f"Table '{table_name}' defines no columns.")

        pieces = self._render_columns(generator)
        if generator.primary_key_columns:
            keys = ", ".join(self.dialect.quote_identifier(name) for name in generator.primary_key_columns)
            pieces.append(f"PRIMARY KEY ({keys})")

        undefined = [name for name in option_columns(storage) if name not in generator.column_names]
        if undefined:
            self.logger.warning(
                "Storage layout for %s references undefined column(s): %s",
                table_name,
                ", ".join(undefined),
            )

        table = self.dialect.format_table(table_name)
        prefix = "CREATE TABLE IF NOT EXISTS" if if_not_exists else "CREATE TABLE"
        sql = f"{prefix} {table} ({', '.join(pieces)})"
        sql += self.dialect.table_options_sql(storage)
        self.logger.debug("Compiled CREATE TABLE for %s", table_name, extra={"sql": sql})
        return sql

    def create_table_statements(
        self,
        table_name: str,
        generator: TableGenerator,
        options: StorageOptions | Mapping[str, Any] | None = None,
        *,
        replace: bool = False,
        if_not_exists: bool = False,
    ) -> list[str]:
        create = self.create_table_sql(table_name, generator, options, if_not_exists=if_not_exists)
        if replace:
            return [self.drop_table_sql(table_name), create]
        return [create]

    def drop_table_sql(self, table_name: str, *, if_exists: bool = True) -> str:
        table = self.dialect.format_table(table_name)
        self.logger.warning(
            "DROP TABLE generated for %s; confirm destructive migration before applying.",
            table,
        )
        if if_exists:
            return f"DROP TABLE IF EXISTS {table}"
        return f"DROP TABLE {table}"

    def _render_columns(self, generator: TableGenerator) -> List[str]:
        pieces: List[str] = []
        for column in generator.columns:
            column_def = self.dialect.render_column_definition(
                column.name,
                self.dialect.column_type_sql(column),
                nullable=column.nullable,
            )
            extras: List[str] = []
            if column.primary_key:
                extras.append("PRIMARY KEY")
            if column.unique and not column.primary_key:
                extras.append("UNIQUE")
            default_sql = self._default_clause(column)
            if default_sql:
                extras.append(default_sql)

            if extras:
                column_def = f"{column_def} {' '.join(extras)}"
            pieces.append(column_def)
        return pieces

    def _default_clause(self, column: ColumnSpec) -> str | None:
        if column.db_default is not None:
            return f"DEFAULT {column.db_default}"
        value = column.default
        if value is None:
            return None
        if isinstance(value, bool):
            return f"DEFAULT {'TRUE' if value else 'FALSE'}"
        if isinstance(value, str):
            escaped = value.replace("'", "''")
            return f"DEFAULT '{escaped}'"
        return f"DEFAULT {value}"
