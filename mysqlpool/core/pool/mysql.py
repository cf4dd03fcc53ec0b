"""
MySQL connection pool holder.

Wraps a SQLAlchemy engine configured from ``Options`` and runs Alembic
migrations to an integer version on a separate connection.
"""

import logging
from typing import Any

from sqlalchemy.engine import Engine

from mysqlpool.core.config import ENVIRONMENT_VARIABLE, DatabaseSettings
from mysqlpool.core.migrate import migrate_to
from mysqlpool.exceptions import NoChangeError, PoolClosedError

from .connect import create_pool_engine, open_raw_engine, redact
from .health import health_check
from .options import Option, Options, build_options

_log = logging.getLogger(__name__)


class MySQL:
    """Connection pool plus migration runner for one database."""

    def __init__(self, engine: Engine, dsn: str, options: Options) -> None:
        self._engine = engine
        self._dsn = dsn
        self._opts = options
        self._closed = False

    @classmethod
    def new(cls, dsn: str, *options: Option, **overrides: Any) -> "MySQL":
        """
        Connect using *dsn* and configure the pool.

        The engine is checked with one connection; a failing connect raises the
        driver error unchanged.
        """
        opts = build_options(*options, **overrides)
        engine = create_pool_engine(dsn, opts)
        try:
            with engine.connect():
                pass
        except Exception:
            engine.dispose()
            raise
        _log.info(
            "Connected to %s (max_open=%d, max_idle=%d, max_lifetime=%s)",
            redact(engine.url),
            opts.max_open_connections,
            opts.max_idle_connections,
            opts.max_connection_lifetime,
        )
        return cls(engine, dsn, opts)

    @classmethod
    def from_environment(cls, *options: Option, **overrides: Any) -> "MySQL":
        """Like new(), with the DSN taken from the DATABASE_ADDRESS environment variable."""
        dsn = DatabaseSettings().DATABASE_ADDRESS
        if not dsn:
            raise ValueError(f"environment variable {ENVIRONMENT_VARIABLE} not set")
        return cls.new(dsn, *options, **overrides)

    @property
    def db(self) -> Engine:
        """The underlying engine, for ad-hoc queries."""
        self._check_open()
        return self._engine

    @property
    def options(self) -> Options:
        return self._opts

    @property
    def closed(self) -> bool:
        return self._closed

    def migrate(self, version: int) -> None:
        """
        Migrate up or down to *version* on a dedicated connection.

        Being at *version* already is not an error.
        """
        self._check_open()
        engine = open_raw_engine(self._dsn)
        try:
            migrate_to(engine, self._opts.migration_path, version)
        except NoChangeError:
            _log.info("No migration to apply: already at version %d", version)
        finally:
            engine.dispose()

    def ping(self) -> bool:
        return not self._closed and health_check(self._engine)

    def stats(self) -> dict[str, Any]:
        """Snapshot of the pool for monitoring."""
        self._check_open()
        pool = self._engine.pool
        out: dict[str, Any] = {"pool": type(pool).__name__, "status": pool.status()}
        for name in ("size", "checkedin", "checkedout", "overflow"):
            fn = getattr(pool, name, None)
            if callable(fn):
                out[name] = fn()
        return out

    def close(self) -> None:
        """Close every pooled connection. Further use raises PoolClosedError."""
        if self._closed:
            return
        self._engine.dispose()
        self._closed = True
        _log.info("Connection pool for %s closed", redact(self._engine.url))

    def _check_open(self) -> None:
        if self._closed:
            raise PoolClosedError("connection pool is closed")

    def __enter__(self) -> "MySQL":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<MySQL {redact(self._engine.url)} ({state})>"


new = MySQL.new
new_from_environment = MySQL.from_environment
