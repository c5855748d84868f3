"""
Dialect strategy registry.
"""

from .base import Dialect, DialectCapabilities
from .postgres import PostgresDialect, UnsupportedStorageLayout
from .redshift import RedshiftDialect

__all__ = [
    "Dialect",
    "DialectCapabilities",
    "PostgresDialect",
    "RedshiftDialect",
    "UnsupportedStorageLayout",
]
