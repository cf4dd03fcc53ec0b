"""
Connection pool for a MySQL database, with schema migrations to a version.

Pooling is SQLAlchemy's, the wire protocol is PyMySQL's, migrations are Alembic's.
"""

from .connect import create_pool_engine, open_raw_engine, to_url
from .health import health_check
from .mysql import MySQL, new, new_from_environment
from .options import (
    DEFAULT_MAX_CONNECTION_LIFETIME,
    DEFAULT_MAX_IDLE_CONNECTIONS,
    DEFAULT_MAX_OPEN_CONNECTIONS,
    DEFAULT_MIGRATION_PATH,
    Option,
    Options,
    build_options,
    with_max_connection_lifetime,
    with_max_idle_connections,
    with_max_open_connections,
    with_migration_path,
)

__all__ = [
    "MySQL",
    "new",
    "new_from_environment",
    "Option",
    "Options",
    "build_options",
    "with_migration_path",
    "with_max_open_connections",
    "with_max_idle_connections",
    "with_max_connection_lifetime",
    "DEFAULT_MIGRATION_PATH",
    "DEFAULT_MAX_OPEN_CONNECTIONS",
    "DEFAULT_MAX_IDLE_CONNECTIONS",
    "DEFAULT_MAX_CONNECTION_LIFETIME",
    "to_url",
    "create_pool_engine",
    "open_raw_engine",
    "health_check",
]
