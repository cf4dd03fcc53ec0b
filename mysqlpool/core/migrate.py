"""
Apply Alembic migrations up or down to an integer version.

Migration scripts live in a plain directory (``version_locations``); the
Alembic environment itself is the bundled ``migration_env``. Each revision
id starts with its version number, e.g. ``001_create_users`` is version 1.
Version 0 is the empty schema (Alembic ``base``).
"""

import logging
import re
from pathlib import Path

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy.engine import Connection, Engine

from mysqlpool.exceptions import MigrationError, NoChangeError

_log = logging.getLogger(__name__)

ENV_DIR = Path(__file__).resolve().parent / "migration_env"
BASE = "base"

_VERSION_RE = re.compile(r"^(\d+)")


def _escape(value: str) -> str:
    # Config values go through ConfigParser interpolation
    return value.replace("%", "%%")


def alembic_config(migration_path: str | Path) -> Config:
    """In-memory Alembic config pointing at *migration_path*; raises MigrationError if it is not a directory."""
    path = Path(migration_path)
    if not path.is_dir():
        raise MigrationError(f"migration path does not exist or is not a directory: {path}")
    cfg = Config()
    cfg.set_main_option("script_location", _escape(str(ENV_DIR)))
    cfg.set_main_option("path_separator", "os")
    cfg.set_main_option("version_locations", _escape(str(path.resolve())))
    return cfg


def _version_of(revision: str) -> int:
    m = _VERSION_RE.match(revision)
    if m is None:
        raise MigrationError(f"revision id {revision!r} does not start with a version number")
    return int(m.group(1))


def revision_map(script: ScriptDirectory) -> dict[int, str]:
    """Map version number -> revision id for every script in the directory."""
    versions: dict[int, str] = {}
    for sc in script.walk_revisions():
        version = _version_of(sc.revision)
        if version == 0:
            raise MigrationError(f"revision {sc.revision!r}: version 0 is reserved for the empty schema")
        if version in versions:
            raise MigrationError(
                f"duplicate migration version {version}: {versions[version]!r} and {sc.revision!r}"
            )
        versions[version] = sc.revision
    return versions


def _current_version(conn: Connection, versions: dict[int, str]) -> int:
    current = MigrationContext.configure(conn).get_current_revision()
    if current is None:
        return 0
    for version, revision in versions.items():
        if revision == current:
            return version
    raise MigrationError(f"database is at revision {current!r}, which is not in the migration path")


def current_version(engine: Engine, migration_path: str | Path) -> int:
    """Version the database is currently at (0 when nothing is applied)."""
    script = ScriptDirectory.from_config(alembic_config(migration_path))
    versions = revision_map(script)
    with engine.connect() as conn:
        return _current_version(conn, versions)


def migrate_to(engine: Engine, migration_path: str | Path, version: int) -> None:
    """
    Upgrade or downgrade the database behind *engine* to *version*.

    Raises NoChangeError when it is already there. Alembic and driver errors
    propagate unchanged.
    """
    if version < 0:
        raise MigrationError(f"invalid migration version {version}: must not be negative")

    cfg = alembic_config(migration_path)
    script = ScriptDirectory.from_config(cfg)
    versions = revision_map(script)
    if version != 0 and version not in versions:
        raise MigrationError(f"no migration found for version {version} in {migration_path}")

    with engine.begin() as conn:
        current = _current_version(conn, versions)
        if current == version:
            raise NoChangeError(version)

        target = versions[version] if version else BASE
        cfg.attributes["connection"] = conn
        if version > current:
            _log.info("Upgrading schema from version %d to %d (%s)", current, version, target)
            command.upgrade(cfg, target)
        else:
            _log.info("Downgrading schema from version %d to %d (%s)", current, version, target)
            command.downgrade(cfg, target)
