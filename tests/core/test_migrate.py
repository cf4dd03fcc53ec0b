"""Tests for core.migrate: revision discovery and the NoChangeError contract."""

import warnings
from pathlib import Path

import pytest
from alembic.script import ScriptDirectory
from sqlalchemy import inspect

from mysqlpool.core.migrate import (
    alembic_config,
    current_version,
    migrate_to,
    revision_map,
)
from mysqlpool.core.pool import open_raw_engine
from mysqlpool.exceptions import MigrationError, NoChangeError
from tests.utils.migrations import write_migration


@pytest.fixture
def engine(sqlite_dsn: str):
    eng = open_raw_engine(sqlite_dsn)
    yield eng
    eng.dispose()


def test_revision_map(migrations_dir: Path) -> None:
    script = ScriptDirectory.from_config(alembic_config(migrations_dir))
    assert revision_map(script) == {1: "001_create_users", 2: "002_create_accounts"}


def test_alembic_config_uses_current_path_separator_option(migrations_dir: Path) -> None:
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        cfg = alembic_config(migrations_dir)
        revision_map(ScriptDirectory.from_config(cfg))

    assert cfg.get_main_option("path_separator") == "os"
    assert cfg.get_main_option("version_path_separator") is None
    assert not [w for w in caught if "separator" in str(w.message)]


def test_alembic_config_missing_directory(tmp_path: Path) -> None:
    with pytest.raises(MigrationError, match="does not exist"):
        alembic_config(tmp_path / "missing")


def test_alembic_config_file_is_not_a_directory(tmp_path: Path) -> None:
    f = tmp_path / "migrations.txt"
    f.write_text("", encoding="utf-8")
    with pytest.raises(MigrationError):
        alembic_config(f)


def test_revision_without_version_prefix(tmp_path: Path) -> None:
    directory = tmp_path / "bad"
    directory.mkdir()
    write_migration(directory, "create_users", "users", None)
    script = ScriptDirectory.from_config(alembic_config(directory))
    with pytest.raises(MigrationError, match="does not start with a version number"):
        revision_map(script)


def test_duplicate_versions(tmp_path: Path) -> None:
    directory = tmp_path / "dup"
    directory.mkdir()
    write_migration(directory, "001_create_users", "users", None)
    write_migration(directory, "01_create_accounts", "accounts", "001_create_users")
    script = ScriptDirectory.from_config(alembic_config(directory))
    with pytest.raises(MigrationError, match="duplicate migration version 1"):
        revision_map(script)


def test_version_zero_is_reserved(tmp_path: Path) -> None:
    directory = tmp_path / "zero"
    directory.mkdir()
    write_migration(directory, "000_create_users", "users", None)
    script = ScriptDirectory.from_config(alembic_config(directory))
    with pytest.raises(MigrationError, match="reserved"):
        revision_map(script)


def test_migrate_to_raises_no_change(engine, migrations_dir: Path) -> None:
    migrate_to(engine, migrations_dir, 1)
    with pytest.raises(NoChangeError) as exc_info:
        migrate_to(engine, migrations_dir, 1)
    assert exc_info.value.version == 1
    assert "no change" in str(exc_info.value)


def test_migrate_to_negative_version(engine, migrations_dir: Path) -> None:
    with pytest.raises(MigrationError, match="negative"):
        migrate_to(engine, migrations_dir, -1)


def test_migrate_to_downgrade_one_step(engine, migrations_dir: Path) -> None:
    migrate_to(engine, migrations_dir, 2)
    migrate_to(engine, migrations_dir, 1)
    tables = set(inspect(engine).get_table_names())
    assert "users" in tables
    assert "accounts" not in tables
    assert current_version(engine, migrations_dir) == 1


def test_database_revision_missing_from_directory(engine, migrations_dir: Path, tmp_path: Path) -> None:
    migrate_to(engine, migrations_dir, 2)
    other = tmp_path / "other"
    other.mkdir()
    write_migration(other, "001_create_users", "users", None)
    with pytest.raises(MigrationError, match="002_create_accounts"):
        migrate_to(engine, other, 1)


def test_alembic_errors_propagate(engine, tmp_path: Path) -> None:
    directory = tmp_path / "broken"
    directory.mkdir()
    write_migration(directory, "001_create_users", "users", None)
    write_migration(directory, "002_create_users_again", "users", "001_create_users")
    migrate_to(engine, directory, 1)
    # creating the same table twice fails inside the database driver
    with pytest.raises(Exception) as exc_info:
        migrate_to(engine, directory, 2)
    assert not isinstance(exc_info.value, MigrationError)
