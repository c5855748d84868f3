"""Security helpers for blazeshift."""

from .dsns import DSNConfig, parse_dsn
from .migrations import confirm_destructive_operation
from .redaction import redact_params

__all__ = ["DSNConfig", "confirm_destructive_operation", "parse_dsn", "redact_params"]
