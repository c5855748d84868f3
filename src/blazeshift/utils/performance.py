"""
Slow-query threshold configuration.
"""

from __future__ import annotations

import os

from .logging import get_logger

SLOW_QUERY_ENV = "BLAZESHIFT_SLOW_QUERY_MS"

logger = get_logger("utils.performance")


def resolve_slow_query_ms(*, default: int, override: int | None = None) -> int:
    """
    Pick the slow-query threshold: explicit override, then environment, then default.
    """
    if override is not None:
        return int(override)
    raw = os.getenv(SLOW_QUERY_ENV)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r; using %sms", SLOW_QUERY_ENV, raw, default)
        return default
    if value < 0:
        logger.warning("Ignoring negative %s=%r; using %sms", SLOW_QUERY_ENV, raw, default)
        return default
    return value
