"""
Redshift storage-layout options and the DDL clauses compiled from them.

``StorageOptions`` carries the four table options Redshift understands beyond
plain PostgreSQL: distribution style, distribution key, sort style and the
ordered sort keys. The fragment helpers render each option independently and
return an empty string when the option is absent, so callers can concatenate
them unconditionally after a ``CREATE TABLE (...)`` statement.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Iterable, Mapping


class StorageOptionError(ValueError):
    """Base error for invalid storage-layout options."""


class InvalidDistStyle(StorageOptionError):
    """Raised when ``diststyle`` is not one of the supported styles."""


class InvalidSortStyle(StorageOptionError):
    """Raised when ``sortstyle`` is not one of the supported styles."""


class UnknownStorageOption(StorageOptionError):
    """Raised when an options mapping carries keys outside the storage vocabulary."""


class DistStyle(str, Enum):
    EVEN = "even"
    KEY = "key"
    ALL = "all"


class SortStyle(str, Enum):
    COMPOUND = "compound"
    INTERLEAVED = "interleaved"


OPTION_NAMES = ("diststyle", "distkey", "sortkeys", "sortstyle")

_SPACES_RE = re.compile(r" {2,}")


def _accepted(enum_cls: type[Enum]) -> str:
    names = [f"'{member.value}'" for member in enum_cls]
    return ", ".join(names[:-1]) + f", or {names[-1]}" if len(names) > 2 else " or ".join(names)


def _coerce_enum(value: Any, enum_cls: type[Enum], field_name: str, error: type[StorageOptionError]):
    if value is None or isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        try:
            return enum_cls(value.lower())
        except ValueError:
            pass
    raise error(f"{field_name} must be one of {_accepted(enum_cls)} (got {value!r})")


def _coerce_columns(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(str(column) for column in value)


@dataclass(frozen=True)
class StorageOptions:
    """
    Typed storage-layout options for a single table.

    Enum fields accept their members or the member values (case-insensitive).
    ``distkey`` is deliberately not tied to ``diststyle=key``; Redshift infers
    KEY distribution from a bare DISTKEY clause.
    """

    diststyle: DistStyle | None = None
    distkey: str | None = None
    sortstyle: SortStyle | None = None
    sortkeys: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "diststyle",
            _coerce_enum(self.diststyle, DistStyle, "diststyle", InvalidDistStyle),
        )
        object.__setattr__(
            self,
            "sortstyle",
            _coerce_enum(self.sortstyle, SortStyle, "sortstyle", InvalidSortStyle),
        )
        if self.distkey is not None:
            object.__setattr__(self, "distkey", str(self.distkey))
        object.__setattr__(self, "sortkeys", _coerce_columns(self.sortkeys))

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "StorageOptions":
        unknown = sorted(set(options) - set(OPTION_NAMES))
        if unknown:
            raise UnknownStorageOption(
                f"Unknown storage option(s) {', '.join(unknown)}; "
                f"expected any of {', '.join(OPTION_NAMES)}"
            )
        return cls(
            diststyle=options.get("diststyle"),
            distkey=options.get("distkey"),
            sortstyle=options.get("sortstyle"),
            sortkeys=options.get("sortkeys"),
        )

    @classmethod
    def coerce(cls, value: "StorageOptions | Mapping[str, Any] | None") -> "StorageOptions":
        if value is None:
            return cls()
        if isinstance(value, cls):
            return value
        return cls.from_mapping(value)

    def is_empty(self) -> bool:
        return self.diststyle is None and self.distkey is None and not self.sortkeys

    def canonical(self) -> "StorageOptions":
        """
        Drop settings Redshift implies on its own.

        A DISTKEY implies KEY distribution and sort keys default to compound
        order, so two options with equal canonical forms build the same table.
        """
        diststyle = self.diststyle
        if diststyle is DistStyle.KEY and self.distkey is not None:
            diststyle = None
        sortstyle = self.sortstyle
        if sortstyle is SortStyle.COMPOUND or not self.sortkeys:
            sortstyle = None
        return replace(self, diststyle=diststyle, sortstyle=sortstyle)

    def as_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {}
        if self.diststyle is not None:
            kwargs["diststyle"] = self.diststyle.value
        if self.distkey is not None:
            kwargs["distkey"] = self.distkey
        if self.sortkeys:
            kwargs["sortkeys"] = list(self.sortkeys)
            if self.sortstyle is not None:
                kwargs["sortstyle"] = self.sortstyle.value
        return kwargs


def validate_storage_options(options: StorageOptions | Mapping[str, Any] | None) -> StorageOptions:
    return StorageOptions.coerce(options)


def diststyle_sql(options: StorageOptions) -> str:
    if options.diststyle is None:
        return ""
    return f" DISTSTYLE {options.diststyle.value.upper()}"


def distkey_sql(options: StorageOptions) -> str:
    if options.distkey is None:
        return ""
    return f" DISTKEY ({options.distkey})"


def sortkey_sql(options: StorageOptions) -> str:
    if not options.sortkeys:
        return ""
    style = options.sortstyle.value.upper() if options.sortstyle else ""
    clause = f" {style} SORTKEY ({', '.join(options.sortkeys)})"
    return _SPACES_RE.sub(" ", clause)


def compile_storage_clauses(options: StorageOptions | Mapping[str, Any] | None) -> list[str]:
    validated = validate_storage_options(options)
    return [diststyle_sql(validated), distkey_sql(validated), sortkey_sql(validated)]


def storage_clause_sql(options: StorageOptions | Mapping[str, Any] | None) -> str:
    return "".join(compile_storage_clauses(options))


def option_columns(options: StorageOptions) -> Iterable[str]:
    """Columns referenced by the layout, in declaration order without repeats."""
    referenced = ([options.distkey] if options.distkey else []) + list(options.sortkeys)
    return list(dict.fromkeys(referenced))
