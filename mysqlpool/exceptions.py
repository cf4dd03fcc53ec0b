"""Errors raised by mysqlpool itself. Driver, SQLAlchemy and Alembic errors pass through unchanged."""


class MigrationError(RuntimeError):
    """The migration directory or the requested version cannot be used."""


class NoChangeError(MigrationError):
    """The database is already at the requested version."""

    def __init__(self, version: int) -> None:
        super().__init__(f"no change: database already at version {version}")
        self.version = version


class PoolClosedError(RuntimeError):
    """The connection pool was used after close()."""
