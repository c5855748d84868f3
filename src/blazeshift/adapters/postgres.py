"""
PostgreSQL database adapter implementation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Sequence

from ..dialects.base import Dialect
from ..dialects.postgres import PostgresDialect
from ..security.redaction import redact_params
from ..utils import get_logger, resolve_slow_query_ms, time_call
from .base import (
    AdapterConfigurationError,
    AdapterConnectionError,
    AdapterExecutionError,
    AdapterTransactionError,
    ConnectionConfig,
    DatabaseAdapter,
)


def _load_driver():
    try:
        import psycopg

        return psycopg
    except ImportError:
        return None


@dataclass
class PostgresConnectionState:
    connection: Any
    config: ConnectionConfig
    driver: Any


class PostgresAdapter(DatabaseAdapter):
    """
    Adapter wrapping the psycopg PostgreSQL driver.
    """

    label = "PostgreSQL"
    logger_name = "adapters.postgres"

    def __init__(self, slow_query_ms: int | None = None, *, dialect: Dialect | None = None) -> None:
        self.dialect = dialect or PostgresDialect()
        self._state: PostgresConnectionState | None = None
        self.logger = get_logger(self.logger_name)
        self.slow_query_ms = resolve_slow_query_ms(default=100, override=slow_query_ms)

    @property
    def connected(self) -> bool:
        return self._state is not None

    def connect(self, config: ConnectionConfig) -> Any:
        driver = _load_driver()
        if driver is None:
            raise AdapterConfigurationError(f"psycopg is required to use {type(self).__name__}.")

        self.logger.info(
            "Connecting to %s %s (autocommit=%s)",
            self.label,
            config.descriptive_label(),
            config.autocommit,
        )

        try:
            connection = driver.connect(config.driver_url(), **config.driver_options())
        except Exception as exc:
            raise AdapterConnectionError(f"Failed to connect to {self.label}.") from exc
        connection.autocommit = bool(config.autocommit)
        if config.isolation_level:
            setattr(connection, "isolation_level", config.isolation_level)

        self._state = self._make_state(connection, config, driver)
        return connection

    def close(self) -> None:
        if self._state:
            try:
                self._state.connection.close()
            finally:
                self._state = None

    def _make_state(self, connection: Any, config: ConnectionConfig, driver: Any) -> PostgresConnectionState:
        return PostgresConnectionState(connection, config, driver)

    def _ensure_connection(self):
        if not self._state:
            raise AdapterConnectionError(f"{type(self).__name__} is not connected.")
        conn = self._state.connection
        if getattr(conn, "closed", False):
            self.logger.warning("%s connection closed; reconnecting.", self.label)
            conn = self.connect(self._state.config)
        return conn

    def execute(self, sql: str, params: Sequence[Any] | None = None):
        connection = self._ensure_connection()
        cursor = connection.cursor()
        params = params or ()
        self._validate_params(sql, params)
        with time_call(
            f"{self.dialect.name}.execute",
            self.logger,
            sql=sql,
            params=redact_params(params),
            threshold_ms=self.slow_query_ms,
        ):
            try:
                cursor.execute(sql, params)
            except Exception as exc:
                raise AdapterExecutionError(f"{self.label} statement failed: {exc}") from exc
        return cursor

    def begin(self) -> None:
        if self._state and getattr(self._state.connection, "autocommit", False):
            return
        connection = self._ensure_connection()
        self._transaction_step("BEGIN", lambda: connection.cursor().execute("BEGIN"))

    def commit(self) -> None:
        connection = self._ensure_connection()
        self._transaction_step("COMMIT", connection.commit)

    def rollback(self) -> None:
        connection = self._ensure_connection()
        self._transaction_step("ROLLBACK", connection.rollback)

    def _transaction_step(self, label: str, step: Callable[[], Any]) -> None:
        try:
            step()
        except Exception as exc:
            raise AdapterTransactionError(f"{self.label} {label} failed: {exc}") from exc

    def last_insert_id(self, cursor: Any, table: str, pk_column: str) -> Any:
        if not self.dialect.capabilities.supports_returning:
            raise AdapterExecutionError(
                f"{self.label} does not support RETURNING; cannot read the id inserted into {table}."
            )
        row = cursor.fetchone()
        if not row:
            raise AdapterExecutionError("No RETURNING data available for last insert id.")
        return row[0]

    @property
    def server_version(self) -> int | None:
        if not self._state:
            return None
        info = getattr(self._state.connection, "info", None)
        return getattr(info, "server_version", None)

    @staticmethod
    def _count_placeholders(sql: str) -> int:
        count = 0
        idx = 0
        while idx < len(sql) - 1:
            if sql[idx] == "%" and sql[idx + 1] == "s":
                count += 1
                idx += 2
                continue
            if sql[idx] == "%" and sql[idx + 1] == "%":
                idx += 2
                continue
            idx += 1
        return count

    def _validate_params(self, sql: str, params: Sequence[Any]) -> None:
        placeholder_count = self._count_placeholders(sql)
        if placeholder_count == 0:
            if params:
                raise AdapterExecutionError(
                    "Parameters provided but SQL statement has no placeholders."
                )
            return
        if placeholder_count != len(params):
            raise AdapterExecutionError(
                f"Parameter count mismatch: expected {placeholder_count}, received {len(params)}."
            )
