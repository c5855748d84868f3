"""
Migration engine executing DDL operations with version tracking.
"""

from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, List, Sequence

from ..adapters.base import DatabaseAdapter
from ..dialects.base import Dialect
from ..security.migrations import confirm_destructive_operation
from ..utils import get_logger
from .operations import MigrationOperation
from .script import SchemaScript


class MigrationEngine:
    """
    Executes migrations and records applied versions.
    """

    def __init__(
        self,
        adapter: DatabaseAdapter,
        dialect: Dialect | None = None,
        *,
        version_table: str = "blazeshift_migrations",
    ) -> None:
        self.adapter = adapter
        self.dialect = dialect or adapter.dialect
        self.version_table = version_table
        self.logger = get_logger("schema.migration")
        self._ensure_version_table()

    def _ensure_version_table(self) -> None:
        table = self.dialect.format_table(self.version_table)
        sql = (
            f"CREATE TABLE IF NOT EXISTS {table} ("
            '"app" VARCHAR(255) NOT NULL, '
            '"name" VARCHAR(255) NOT NULL, '
            '"applied_at" VARCHAR(64) NOT NULL, '
            'PRIMARY KEY ("app", "name")'
            ")"
        )
        self.adapter.execute(sql)

    def applied_migrations(self) -> List[tuple[str, str]]:
        table = self.dialect.format_table(self.version_table)
        cursor = self.adapter.execute(f'SELECT "app", "name" FROM {table} ORDER BY "applied_at"')
        return [(row[0], row[1]) for row in cursor.fetchall()]

    def apply(self, app: str, name: str, operations: Sequence[MigrationOperation]) -> None:
        # Confirm everything up front so a refused operation leaves nothing half-applied.
        for op in operations:
            if op.destructive:
                description = op.description or op.sql
                self.logger.warning(
                    "Destructive migration detected: %s (force=%s)", description, op.force
                )
                confirm_destructive_operation(description, force=op.force)
        with self._transaction():
            for op in operations:
                self.adapter.execute(op.sql)
            self._record_migration(app, name)
        self.logger.info("Applied migration %s.%s (%d operation(s))", app, name, len(operations))

    def apply_source(
        self,
        app: str,
        name: str,
        source: str,
        *,
        entrypoint: str = "upgrade",
    ) -> List[MigrationOperation]:
        operations = SchemaScript(self.dialect).run(source, entrypoint=entrypoint)
        self.apply(app, name, operations)
        return operations

    @contextmanager
    def _transaction(self) -> Iterator[None]:
        self.adapter.begin()
        try:
            yield
        except Exception:
            self.adapter.rollback()
            raise
        else:
            self.adapter.commit()

    def _record_migration(self, app: str, name: str) -> None:
        table = self.dialect.format_table(self.version_table)
        placeholder = self.dialect.parameter_placeholder()
        timestamp = datetime.now(timezone.utc).isoformat()
        self.adapter.execute(
            f'INSERT INTO {table} ("app", "name", "applied_at") '
            f"VALUES ({placeholder}, {placeholder}, {placeholder})",
            (app, name, timestamp),
        )
