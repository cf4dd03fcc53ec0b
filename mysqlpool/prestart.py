"""Prestart: migrate the database named by DATABASE_ADDRESS to MIGRATION_VERSION."""

import logging

from mysqlpool.core.config import PrestartSettings
from mysqlpool.core.pool import (
    MySQL,
    with_max_connection_lifetime,
    with_max_idle_connections,
    with_max_open_connections,
    with_migration_path,
)

logger = logging.getLogger(__name__)


def init(db: MySQL, version: int) -> None:
    try:
        db.migrate(version)
    except Exception as e:
        logger.error(e)
        raise


def main() -> None:
    settings = PrestartSettings()
    logging.basicConfig(level=settings.LOG_LEVEL.upper())
    if settings.MIGRATION_VERSION is None:
        raise SystemExit("environment variable MIGRATION_VERSION not set")

    logger.info("Migrating database to version %d", settings.MIGRATION_VERSION)
    with MySQL.from_environment(
        with_migration_path(settings.MIGRATION_PATH),
        with_max_open_connections(settings.MAX_OPEN_CONNECTIONS),
        with_max_idle_connections(settings.MAX_IDLE_CONNECTIONS),
        with_max_connection_lifetime(settings.MAX_CONNECTION_LIFETIME),
    ) as db:
        init(db, settings.MIGRATION_VERSION)
    logger.info("Database is at version %d", settings.MIGRATION_VERSION)


if __name__ == "__main__":
    main()
