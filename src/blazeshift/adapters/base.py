"""
Connection configuration and the adapter protocol.

Redshift clusters are reached with the PostgreSQL driver, so a
``redshift://`` DSN is rewritten to ``postgresql://`` and given the
cluster's default port before it reaches psycopg.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from typing import Any, Callable, Protocol, Sequence

from ..dialects.base import Dialect
from ..security.dsns import DSNConfig, parse_dsn

REDSHIFT_DEFAULT_PORT = 5439

# DSN scheme -> scheme understood by psycopg.
DRIVER_SCHEMES = {
    "redshift": "postgresql",
    "redshift+psycopg": "postgresql",
    "postgres": "postgresql",
    "postgresql": "postgresql",
}


class AdapterError(RuntimeError):
    """Base error for adapter-related failures."""


class AdapterConfigurationError(AdapterError):
    """Raised for malformed DSNs, bad option values or a missing driver."""


class AdapterConnectionError(AdapterError):
    """Raised when a connection cannot be opened or is not open."""


class AdapterExecutionError(AdapterError):
    """Raised when a statement fails or its parameters do not fit."""


class AdapterTransactionError(AdapterError):
    """Raised when BEGIN, COMMIT or ROLLBACK fails."""


@dataclass
class SSLConfig:
    """libpq SSL settings, named after their DSN query keys."""

    sslmode: str | None = None
    sslrootcert: str | None = None
    sslcert: str | None = None
    sslkey: str | None = None

    @classmethod
    def from_query(cls, query: dict[str, str]) -> "SSLConfig | None":
        values = {f.name: query.pop(f.name) for f in fields(cls) if f.name in query}
        return cls(**values) if values else None

    def driver_options(self) -> dict[str, str]:
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name)}


def _boolean(value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise ValueError(value)


def _take(query: dict[str, str], key: str, convert: Callable[[str], Any]) -> Any:
    if key not in query:
        return None
    raw = query.pop(key)
    try:
        return convert(raw)
    except ValueError as exc:
        raise AdapterConfigurationError(f"Invalid value for '{key}': {raw!r}") from exc


@dataclass
class ConnectionConfig:
    """
    Connection settings parsed from a DSN.

    ``autocommit``, ``timeout``, ``isolation_level`` and the ``ssl*`` keys are
    consumed from the query string; anything else is handed to the driver
    untouched (``connect_timeout`` as an integer).
    """

    url: str
    autocommit: bool = False
    isolation_level: str | None = None
    timeout: float | None = None
    options: dict[str, Any] | None = None
    ssl: SSLConfig | None = None
    dsn: DSNConfig | None = None
    source: str | None = None

    @classmethod
    def from_dsn(cls, dsn: str, **overrides: Any) -> "ConnectionConfig":
        parsed = parse_dsn(dsn)
        if parsed.driver not in DRIVER_SCHEMES:
            raise AdapterConfigurationError(
                f"Unsupported DSN scheme '{parsed.driver}'; expected one of {sorted(DRIVER_SCHEMES)}"
            )
        query = dict(parsed.query)
        settings: dict[str, Any] = {
            "autocommit": _take(query, "autocommit", _boolean),
            "timeout": _take(query, "timeout", float),
            "isolation_level": query.pop("isolation_level", None),
            "ssl": SSLConfig.from_query(query),
        }
        connect_timeout = _take(query, "connect_timeout", int)
        if connect_timeout is not None:
            query["connect_timeout"] = connect_timeout

        options = {**query, **(overrides.pop("options", None) or {})}
        settings.update(overrides)
        if settings["autocommit"] is None:
            settings["autocommit"] = False
        return cls(url=dsn, dsn=parsed, options=options or None, **settings)

    @classmethod
    def from_env(cls, env_var: str, **overrides: Any) -> "ConnectionConfig":
        value = os.getenv(env_var)
        if not value:
            raise AdapterConfigurationError(f"Environment variable {env_var} is not set")
        return cls.from_dsn(value, source=env_var, **overrides)

    @property
    def is_redshift(self) -> bool:
        return bool(self.dsn and self.dsn.driver.startswith("redshift"))

    @property
    def port(self) -> int | None:
        if self.dsn is None:
            return None
        if self.dsn.port is None and self.is_redshift:
            return REDSHIFT_DEFAULT_PORT
        return self.dsn.port

    def driver_url(self) -> str:
        """
        URL handed to psycopg: PostgreSQL scheme, resolved port, no query.
        """
        if self.dsn is None:
            return self.url
        target = self.dsn
        if self.dsn.host and self.port != self.dsn.port:
            target = replace(self.dsn, port=self.port)
        return target.to_url(scheme=DRIVER_SCHEMES[self.dsn.driver], include_query=False)

    def driver_options(self) -> dict[str, Any]:
        """
        Keyword arguments for ``psycopg.connect``.
        """
        options = dict(self.options or {})
        if self.ssl:
            for key, value in self.ssl.driver_options().items():
                options.setdefault(key, value)
        if self.timeout and "connect_timeout" not in options:
            options["connect_timeout"] = int(self.timeout)
        return options

    def redacted_dsn(self) -> str:
        return self.dsn.redacted() if self.dsn else self.url

    def descriptive_label(self) -> str:
        redacted = self.redacted_dsn()
        return f"{self.source} ({redacted})" if self.source else redacted


class DatabaseAdapter(Protocol):
    """
    What the schema layer needs from a connection.
    """

    dialect: Dialect
    slow_query_ms: int

    def connect(self, config: ConnectionConfig) -> Any: ...

    def close(self) -> None: ...

    def execute(self, sql: str, params: Sequence[Any] | None = None) -> Any:
        """
        Run one statement and return a cursor with ``fetchone``/``fetchall``.
        """

    def begin(self) -> None: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...

    def last_insert_id(self, cursor: Any, table: str, pk_column: str) -> Any: ...

    @property
    def server_version(self) -> int | None:
        """
        Numeric server version; None when not connected or undetectable.
        """
