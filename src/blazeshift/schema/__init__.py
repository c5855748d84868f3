"""
Schema building, introspection, dumping and migration utilities.
"""

from .builder import SchemaBuilder
from .dumper import SchemaDumper
from .generator import ColumnSpec, SchemaDefinitionError, TableGenerator
from .introspection import ColumnInfo, SchemaIntrospector, TableStorage
from .migration import MigrationEngine
from .operations import MigrationOperation
from .script import SchemaScript

__all__ = [
    "ColumnInfo",
    "ColumnSpec",
    "MigrationEngine",
    "MigrationOperation",
    "SchemaBuilder",
    "SchemaDefinitionError",
    "SchemaDumper",
    "SchemaIntrospector",
    "SchemaScript",
    "TableGenerator",
    "TableStorage",
]
