"""
Pool and migration options.

``Options`` starts from the defaults below and is then modified by option
functions, applied in order::

    MySQL.new(dsn, with_max_open_connections(20), with_migration_path("db/migrations"))
"""

from collections.abc import Callable
from dataclasses import dataclass, fields, replace
from datetime import timedelta
from typing import Any

DEFAULT_MIGRATION_PATH = "migrations"
DEFAULT_MAX_OPEN_CONNECTIONS = 10
DEFAULT_MAX_IDLE_CONNECTIONS = 0
DEFAULT_MAX_CONNECTION_LIFETIME = timedelta(seconds=600)


@dataclass
class Options:
    migration_path: str = DEFAULT_MIGRATION_PATH
    max_open_connections: int = DEFAULT_MAX_OPEN_CONNECTIONS
    max_idle_connections: int = DEFAULT_MAX_IDLE_CONNECTIONS
    max_connection_lifetime: timedelta = DEFAULT_MAX_CONNECTION_LIFETIME


Option = Callable[[Options], None]


def _to_timedelta(value: timedelta | float | int) -> timedelta:
    if isinstance(value, timedelta):
        return value
    return timedelta(seconds=float(value))


def with_migration_path(path: str) -> Option:
    def _apply(opts: Options) -> None:
        opts.migration_path = str(path)

    return _apply


def with_max_open_connections(n: int) -> Option:
    """Upper bound on connections open at once; 0 or less means unlimited."""

    def _apply(opts: Options) -> None:
        opts.max_open_connections = int(n)

    return _apply


def with_max_idle_connections(n: int) -> Option:
    """Connections kept open between checkouts; 0 or less keeps none."""

    def _apply(opts: Options) -> None:
        opts.max_idle_connections = int(n)

    return _apply


def with_max_connection_lifetime(lifetime: timedelta | float | int) -> Option:
    """Recycle connections older than *lifetime* (timedelta or seconds); 0 or less never recycles."""

    def _apply(opts: Options) -> None:
        opts.max_connection_lifetime = _to_timedelta(lifetime)

    return _apply


def build_options(*options: Option, **overrides: Any) -> Options:
    """Defaults, then each option function in order, then keyword overrides by field name."""
    opts = Options()
    for opt in options:
        opt(opts)
    if not overrides:
        return opts

    known = {f.name for f in fields(Options)}
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise TypeError(f"unknown option(s): {', '.join(unknown)}")
    if "max_connection_lifetime" in overrides:
        overrides["max_connection_lifetime"] = _to_timedelta(
            overrides["max_connection_lifetime"]
        )
    return replace(opts, **overrides)
