"""
Operation records produced by schema scripts and applied by migrations.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class MigrationOperation:
    sql: str
    destructive: bool = False
    force: bool = False
    description: str | None = None
