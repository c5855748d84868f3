"""
Amazon Redshift dialect implementation.

Redshift speaks the PostgreSQL wire protocol and most of its DDL, but lacks
serial columns and RETURNING, and adds storage-layout clauses to CREATE TABLE.
"""

from __future__ import annotations

from ..storage import StorageOptions, storage_clause_sql
from .base import DialectCapabilities
from .postgres import PostgresDialect

DEFAULT_STRING_SIZE = 255


class RedshiftDialect(PostgresDialect):
    """
    Redshift dialect layered over the PostgreSQL one.
    """

    name: str = "redshift"
    capabilities: DialectCapabilities = DialectCapabilities(
        supports_returning=False,
        supports_schema_namespaces=True,
        supports_storage_layout=True,
    )

    type_map: dict[str, str] = {
        **PostgresDialect.type_map,
        "string": f"VARCHAR({DEFAULT_STRING_SIZE})",
        "text": "VARCHAR(MAX)",
    }
    # No serial/identity support; primary keys are plain integers.
    serial_type: str = "INTEGER"

    def table_options_sql(self, options: StorageOptions) -> str:
        return storage_clause_sql(options)
