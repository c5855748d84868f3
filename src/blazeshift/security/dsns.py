"""DSN parsing and redaction utilities."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from urllib.parse import parse_qs, quote, unquote, urlencode, urlparse

from .redaction import REDACTED_VALUE, redact_query_params


@dataclass
class DSNConfig:
    driver: str
    username: Optional[str]
    password: Optional[str]
    host: Optional[str]
    port: Optional[int]
    database: Optional[str]
    path: str
    query: dict[str, str]

    def to_url(
        self,
        *,
        scheme: str | None = None,
        redact: bool = False,
        include_query: bool = True,
    ) -> str:
        netloc = ""
        if self.username:
            netloc += quote(self.username, safe="")
            if self.password:
                netloc += ":" + (REDACTED_VALUE if redact else quote(self.password, safe=""))
            netloc += "@"
        if self.host:
            netloc += self.host
        if self.port:
            netloc += f":{self.port}"

        query = redact_query_params(self.query) if redact else self.query
        query_string = urlencode(query, safe="*") if query and include_query else ""

        # Build manually so we retain the double slash prefix even when netloc is empty
        result = f"{scheme or self.driver}://"
        if netloc:
            result += netloc
        result += self.path or ""
        if query_string:
            result += f"?{query_string}"
        return result

    def redacted(self) -> str:
        """
        Return the DSN with credentials redacted but structure preserved.
        """
        return self.to_url(redact=True)


def parse_dsn(dsn: str) -> DSNConfig:
    parsed = urlparse(dsn)
    query = {k: v[0] for k, v in parse_qs(parsed.query).items()}
    return DSNConfig(
        driver=parsed.scheme,
        username=unquote(parsed.username) if parsed.username else None,
        password=unquote(parsed.password) if parsed.password else None,
        host=parsed.hostname,
        port=parsed.port,
        database=parsed.path.lstrip("/") or None,
        path=parsed.path or "",
        query=query,
    )
