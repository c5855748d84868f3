"""
A stand-in for a Redshift cluster's catalog.

It answers the introspection queries issued by ``SchemaIntrospector`` from
tables registered in memory, so the example runs without a cluster.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from blazeshift.dialects import RedshiftDialect
from blazeshift.storage import DistStyle, SortStyle, StorageOptions

_RELDISTSTYLE = {DistStyle.EVEN: 0, DistStyle.KEY: 1, DistStyle.ALL: 8}
AUTO_EVEN = 10


class StubCursor:
    def __init__(self, rows: Sequence[tuple]) -> None:
        self._rows = list(rows)

    def fetchall(self) -> list[tuple]:
        return list(self._rows)

    def fetchone(self) -> tuple | None:
        return self._rows[0] if self._rows else None


@dataclass
class StubTable:
    columns: list[tuple[str, str, bool]]
    options: StorageOptions = field(default_factory=StorageOptions)


class StubCatalog:
    """
    Minimal adapter exposing ``dialect`` and ``execute`` for introspection.
    """

    def __init__(self) -> None:
        self.dialect = RedshiftDialect()
        self.tables: dict[str, StubTable] = {}

    def register(self, name: str, columns: list[tuple[str, str, bool]], options: StorageOptions) -> None:
        self.tables[name] = StubTable(columns, options)

    def execute(self, sql: str, params: Sequence[Any] | None = None) -> StubCursor:
        if "relkind" in sql:
            return StubCursor([(name,) for name in sorted(self.tables)])
        table = self._lookup(params[0] if params else "")
        if "format_type" in sql:
            return StubCursor(
                [(name, db_type, None, allow_null, False) for name, db_type, allow_null in table.columns]
            )
        if "reldiststyle" in sql:
            return StubCursor([(self._reldiststyle(table.options),)])
        if "attsortkeyord" in sql:
            return StubCursor(self._layout_rows(table))
        raise ValueError(f"Unsupported catalog query: {sql}")

    def _lookup(self, regclass: str) -> StubTable:
        for name, table in self.tables.items():
            if self.dialect.format_table(name) == regclass:
                return table
        raise LookupError(f"relation {regclass} does not exist")

    @staticmethod
    def _reldiststyle(options: StorageOptions) -> int:
        if options.diststyle is not None:
            return _RELDISTSTYLE[options.diststyle]
        if options.distkey is not None:
            return _RELDISTSTYLE[DistStyle.KEY]
        return AUTO_EVEN

    @staticmethod
    def _layout_rows(table: StubTable) -> list[tuple[str, bool, int]]:
        sign = -1 if table.options.sortstyle is SortStyle.INTERLEAVED else 1
        positions = {name: index + 1 for index, name in enumerate(table.options.sortkeys)}
        return [
            (name, name == table.options.distkey, sign * positions.get(name, 0))
            for name, _, _ in table.columns
        ]
