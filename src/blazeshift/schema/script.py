"""
Table-definition mini-language executed by dumped schema source.

Dumped tables look like::

    with create_table("apples", distkey="region", sortkeys=["colour"]) as t:
        t.string("region", size=255)
        t.string("colour", size=255)

``SchemaScript.run`` executes such source and collects the compiled DDL as
``MigrationOperation`` records instead of touching a database.
"""

from __future__ import annotations

import builtins
from contextlib import contextmanager
from typing import Any, Callable, Iterator, List

from ..dialects.base import Dialect
from ..storage import StorageOptions
from ..utils import get_logger
from .builder import SchemaBuilder
from .generator import TableGenerator
from .operations import MigrationOperation

# Names dumped source and hand-written migrations may use besides the schema calls.
SCRIPT_BUILTINS = (
    "__build_class__",
    "bool",
    "dict",
    "enumerate",
    "float",
    "int",
    "len",
    "list",
    "range",
    "reversed",
    "sorted",
    "str",
    "tuple",
    "zip",
)


class SchemaScript:
    """
    Collects DDL operations from ``create_table`` / ``drop_table`` calls.
    """

    def __init__(self, dialect: Dialect) -> None:
        self.dialect = dialect
        self.builder = SchemaBuilder(dialect)
        self.operations: List[MigrationOperation] = []
        self.logger = get_logger("schema.script")

    @property
    def statements(self) -> list[str]:
        return [op.sql for op in self.operations]

    @contextmanager
    def create_table(
        self,
        name: str,
        *,
        replace: bool = False,
        if_not_exists: bool = False,
        **options: Any,
    ) -> Iterator[TableGenerator]:
        storage = StorageOptions.from_mapping(options)
        generator = TableGenerator()
        yield generator
        if replace:
            self.operations.append(
                MigrationOperation(
                    sql=self.builder.drop_table_sql(name),
                    destructive=True,
                    force=True,
                    description=f"replace table {name}",
                )
            )
        self.operations.append(
            MigrationOperation(
                sql=self.builder.create_table_sql(
                    name, generator, storage, if_not_exists=if_not_exists
                ),
                description=f"create table {name}",
            )
        )

    def drop_table(self, name: str, *, if_exists: bool = True, force: bool = False) -> None:
        self.operations.append(
            MigrationOperation(
                sql=self.builder.drop_table_sql(name, if_exists=if_exists),
                destructive=True,
                force=force,
                description=f"drop table {name}",
            )
        )

    def namespace(self) -> dict[str, Any]:
        return {"create_table": self.create_table, "drop_table": self.drop_table}

    def run(self, source: str, *, entrypoint: str = "upgrade") -> List[MigrationOperation]:
        """
        Execute schema source and return the operations it produced.

        Top-level ``create_table`` blocks run immediately. When the source
        defines ``entrypoint`` (a migration module), it is called with this
        script as its only argument.

        The source is executed as Python. The reduced builtins keep dumped
        files from reaching the filesystem by accident; they are not a
        sandbox, so only run source you trust.
        """
        namespace = {
            "__builtins__": {name: getattr(builtins, name) for name in SCRIPT_BUILTINS},
            "__name__": "<schema>",
            **self.namespace(),
        }
        code = compile(source, "<schema>", "exec")
        exec(code, namespace)
        migration: Callable[[SchemaScript], Any] | None = namespace.get(entrypoint)
        if callable(migration):
            migration(self)
        self.logger.debug("Schema source produced %d operation(s)", len(self.operations))
        return list(self.operations)
