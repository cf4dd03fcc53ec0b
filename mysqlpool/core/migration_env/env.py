"""
Alembic environment used by mysqlpool.core.migrate.

Migrations always run on the connection handed over in
``config.attributes["connection"]``; offline (SQL script) mode is not supported.
"""

from alembic import context

config = context.config


def run_migrations_online() -> None:
    connection = config.attributes.get("connection")
    if connection is None:
        raise RuntimeError(
            "mysqlpool migrations need a connection in config.attributes['connection']"
        )
    context.configure(connection=connection, target_metadata=None)

    with context.begin_transaction():
        context.run_migrations()


if context.is_offline_mode():
    raise RuntimeError("offline migrations are not supported")
run_migrations_online()
