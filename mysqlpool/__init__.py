from mysqlpool.core.config import ENVIRONMENT_VARIABLE
from mysqlpool.core.pool import (
    MySQL,
    Option,
    Options,
    new,
    new_from_environment,
    with_max_connection_lifetime,
    with_max_idle_connections,
    with_max_open_connections,
    with_migration_path,
)
from mysqlpool.exceptions import MigrationError, NoChangeError, PoolClosedError

__all__ = [
    "ENVIRONMENT_VARIABLE",
    "MySQL",
    "Option",
    "Options",
    "new",
    "new_from_environment",
    "with_migration_path",
    "with_max_open_connections",
    "with_max_idle_connections",
    "with_max_connection_lifetime",
    "MigrationError",
    "NoChangeError",
    "PoolClosedError",
]
