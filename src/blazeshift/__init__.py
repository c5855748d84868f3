"""
blazeshift public package initialization.

Amazon Redshift schema support: storage-layout DDL compilation, catalog
introspection and schema dumping on top of a PostgreSQL-compatible adapter.
"""

from .adapters import ConnectionConfig, PostgresAdapter, RedshiftAdapter  # noqa: F401
from .dialects import PostgresDialect, RedshiftDialect  # noqa: F401
from .schema import (
    MigrationEngine,
    MigrationOperation,
    SchemaBuilder,
    SchemaDumper,
    SchemaIntrospector,
    SchemaScript,
    TableGenerator,
)  # noqa: F401
from .storage import (
    DistStyle,
    InvalidDistStyle,
    InvalidSortStyle,
    SortStyle,
    StorageOptionError,
    StorageOptions,
    UnknownStorageOption,
    compile_storage_clauses,
)  # noqa: F401

__all__ = [
    "ConnectionConfig",
    "PostgresAdapter",
    "RedshiftAdapter",
    "PostgresDialect",
    "RedshiftDialect",
    "MigrationEngine",
    "MigrationOperation",
    "SchemaBuilder",
    "SchemaDumper",
    "SchemaIntrospector",
    "SchemaScript",
    "TableGenerator",
    "DistStyle",
    "SortStyle",
    "StorageOptions",
    "StorageOptionError",
    "InvalidDistStyle",
    "InvalidSortStyle",
    "UnknownStorageOption",
    "compile_storage_clauses",
]
