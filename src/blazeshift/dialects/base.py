"""
Dialect strategy interfaces describing SQL compilation behaviors.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from ..storage import StorageOptions

if TYPE_CHECKING:
    from ..schema.generator import ColumnSpec


@dataclass(frozen=True)
class DialectCapabilities:
    """
    Feature flags describing backend capabilities.
    """

    supports_returning: bool = False
    supports_schema_namespaces: bool = False
    supports_storage_layout: bool = False


class Dialect(Protocol):
    """
    Strategy interface consumed across schema and adapter layers.
    """

    @property
    def name(self) -> str: ...

    @property
    def param_style(self) -> str: ...

    @property
    def capabilities(self) -> DialectCapabilities: ...

    def quote_identifier(self, identifier: str) -> str: ...

    def format_table(self, table_name: str) -> str: ...

    def parameter_placeholder(self, position: int | None = None) -> str: ...

    def render_column_definition(self, column: str, column_type: str, *, nullable: bool) -> str: ...

    def column_type_sql(self, column: "ColumnSpec") -> str: ...

    def table_options_sql(self, options: StorageOptions) -> str: ...
