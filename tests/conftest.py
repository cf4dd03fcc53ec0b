from pathlib import Path

import pytest

from tests.utils.migrations import write_migrations

MIGRATION_TABLES = ["users", "accounts"]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """No DSN from the developer's shell or a stray .env file."""
    for name in (
        "DATABASE_ADDRESS",
        "DATABASE_URI",
        "MIGRATION_PATH",
        "MIGRATION_VERSION",
        "MAX_OPEN_CONNECTIONS",
        "MAX_IDLE_CONNECTIONS",
        "MAX_CONNECTION_LIFETIME",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def sqlite_dsn(tmp_path: Path) -> str:
    return f"sqlite:///{tmp_path / 'test.db'}"


@pytest.fixture
def migrations_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "migrations"
    write_migrations(directory, MIGRATION_TABLES)
    return directory
