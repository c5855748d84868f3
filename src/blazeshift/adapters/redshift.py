"""
Amazon Redshift database adapter.

Redshift accepts PostgreSQL wire connections, so this adapter reuses the
psycopg-backed PostgreSQL adapter and adds Redshift version detection.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from ..dialects.redshift import RedshiftDialect
from .base import ConnectionConfig
from .postgres import PostgresAdapter, PostgresConnectionState

VERSION_SQL = "SELECT version()"

_VERSION_RE = re.compile(r"Redshift ([\d.]+)")


def parse_redshift_version(text: str | None) -> int | None:
    """
    Extract the Redshift release from a ``version()`` string.

    ``"... Redshift 1.0.6 ..."`` becomes ``106``. Anything unrecognizable
    yields None.
    """
    if not text:
        return None
    match = _VERSION_RE.search(text)
    if not match:
        return None
    digits = match.group(1).replace(".", "")
    if not digits:
        return None
    return int(digits)


@dataclass
class RedshiftConnectionState(PostgresConnectionState):
    server_version: int | None = None
    version_probed: bool = False


class RedshiftAdapter(PostgresAdapter):
    """
    Adapter for Redshift clusters, connected through psycopg.
    """

    label = "Redshift"
    logger_name = "adapters.redshift"

    def __init__(self, slow_query_ms: int | None = None) -> None:
        super().__init__(slow_query_ms, dialect=RedshiftDialect())

    def _make_state(self, connection: Any, config: ConnectionConfig, driver: Any) -> RedshiftConnectionState:
        return RedshiftConnectionState(connection, config, driver)

    @property
    def server_version(self) -> int | None:
        """
        Redshift release number, probed once per connection.

        None when not connected, matching ``PostgresAdapter``.
        """
        if self._state is None:
            return None
        self._ensure_connection()
        state = self._state
        if not state.version_probed:
            row = self.execute(VERSION_SQL).fetchone()
            text = row[0] if row else None
            state.server_version = parse_redshift_version(text)
            state.version_probed = True
            if state.server_version is None:
                self.logger.warning("Unable to determine Redshift version from %r", text)
            else:
                self.logger.debug("Detected Redshift version %s", state.server_version)
        return state.server_version

    def reset_server_version(self) -> None:
        if self._state is not None:
            self._state.server_version = None
            self._state.version_probed = False
