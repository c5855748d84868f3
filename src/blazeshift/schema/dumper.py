"""
Schema dumper rendering introspected tables as ``create_table`` source.

The rendered source is accepted by ``SchemaScript.run``; replaying it compiles
each table through the same storage clause compiler that created it.
"""

from __future__ import annotations

import json
import textwrap
from typing import Any, Iterable, List

from ..adapters.base import DatabaseAdapter
from ..dialects.base import Dialect
from ..storage import DistStyle, SortStyle, StorageOptions
from ..utils import get_logger
from .introspection import ColumnInfo, SchemaIntrospector, TableStorage

INDENT = "    "
DEFAULT_SCHEMA = "public"


def render_literal(value: Any) -> str:
    if isinstance(value, str):
        # Keep non-ASCII literal; escaped astral characters replay as lone surrogates.
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(render_literal(item) for item in value) + "]"
    return repr(value)


def render_call(name: str, args: Iterable[Any], kwargs: dict[str, Any]) -> str:
    parts = [render_literal(arg) for arg in args]
    parts.extend(f"{key}={render_literal(value)}" for key, value in kwargs.items())
    return f"{name}({', '.join(parts)})"


class SchemaDumper:
    """
    Turns catalog metadata back into table-definition source.
    """

    def __init__(self, adapter: DatabaseAdapter, dialect: Dialect | None = None) -> None:
        self.introspector = SchemaIntrospector(adapter, dialect)
        self.logger = get_logger("schema.dumper")

    @staticmethod
    def dump_options(storage: TableStorage) -> StorageOptions:
        diststyle: DistStyle | None = None
        if storage.diststyle == "key":
            # DISTKEY alone implies KEY distribution.
            if storage.distkey is None:
                diststyle = DistStyle.KEY
        elif storage.diststyle in ("even", "all"):
            diststyle = DistStyle(storage.diststyle)

        sortstyle: SortStyle | None = None
        if storage.sortkeys and storage.sortstyle == "interleaved":
            sortstyle = SortStyle.INTERLEAVED

        return StorageOptions(
            diststyle=diststyle,
            distkey=storage.distkey,
            sortstyle=sortstyle,
            sortkeys=tuple(storage.sortkeys),
        )

    def render_create_call(
        self,
        table_name: str,
        options: StorageOptions,
        columns: Iterable[ColumnInfo],
        *,
        receiver: str | None = None,
        replace: bool = False,
    ) -> str:
        kwargs = options.as_kwargs()
        if replace:
            kwargs["replace"] = True
        name = f"{receiver}.create_table" if receiver else "create_table"
        lines = [f"with {render_call(name, [table_name], kwargs)} as t:"]
        columns = list(columns)
        composite = [column.name for column in columns if column.primary_key]
        if len(composite) < 2:
            composite = []
        for column in columns:
            lines.append(INDENT + self._render_column(column, composite_key=bool(composite)))
        if composite:
            lines.append(INDENT + render_call("t.composite_primary_key", composite, {}))
        if not columns:
            lines.append(INDENT + "pass")
        return "\n".join(lines)

    def dump_table_schema(self, table: str, *, replace: bool = False) -> str:
        options = self.dump_options(self.introspector.storage_layout(table))
        columns = self.introspector.columns(table)
        self.logger.debug("Dumping %s with storage options %s", table, options.as_kwargs())
        return self.render_create_call(table, options, columns, replace=replace)

    def dump_schema_migration(self, schema: str = DEFAULT_SCHEMA) -> str:
        tables = [self.qualified_name(schema, table) for table in self.introspector.tables(schema)]
        upgrade: List[str] = []
        for table in tables:
            options = self.dump_options(self.introspector.storage_layout(table))
            columns = self.introspector.columns(table)
            block = self.render_create_call(table, options, columns, receiver="schema")
            upgrade.append(textwrap.indent(block, INDENT))
        downgrade = [
            INDENT + render_call("schema.drop_table", [table], {}) for table in reversed(tables)
        ]
        self.logger.info("Dumped %d table(s) from schema %s", len(tables), schema)

        sections = [
            '"""Schema migration dumped by blazeshift."""',
            "",
            "",
            "def upgrade(schema):",
            "\n\n".join(upgrade) if upgrade else INDENT + "pass",
            "",
            "",
            "def downgrade(schema):",
            "\n".join(downgrade) if downgrade else INDENT + "pass",
        ]
        return "\n".join(sections) + "\n"

    def qualified_name(self, schema: str, table: str) -> str:
        """
        Name a table so it resolves in ``schema`` rather than through search_path.
        """
        namespaced = self.introspector.dialect.capabilities.supports_schema_namespaces
        if schema == DEFAULT_SCHEMA or not namespaced:
            return table
        return f"{schema}.{table}"

    def _render_column(self, column: ColumnInfo, *, composite_key: bool) -> str:
        if (
            column.primary_key
            and not composite_key
            and column.type == "integer"
            and column.default is None
            and column.db_default is None
        ):
            if column.name == "id":
                return "t.primary_key()"
            return render_call("t.primary_key", [column.name], {})

        kwargs: dict[str, Any] = {}
        if column.type is None:
            method, args = "t.column", [column.name, column.db_type]
        else:
            method, args = f"t.{column.type}", [column.name]
            if column.size is not None:
                kwargs["size"] = column.size
            if column.precision is not None:
                kwargs["precision"] = column.precision
            if column.scale is not None:
                kwargs["scale"] = column.scale
        if column.primary_key and not composite_key:
            kwargs["primary_key"] = True
        elif not column.allow_null:
            kwargs["nullable"] = False
        if column.default is not None:
            kwargs["default"] = column.default
        if column.db_default is not None:
            kwargs["db_default"] = column.db_default
        return render_call(method, args, kwargs)
