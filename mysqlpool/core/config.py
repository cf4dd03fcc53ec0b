"""
Settings read from the environment (and an optional .env file).

Instantiate at the point of use so the current environment is read.
``DatabaseSettings`` validates only the DSN, so unrelated variables cannot
break ``MySQL.from_environment``.
"""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ENVIRONMENT_VARIABLE = "DATABASE_ADDRESS"
LEGACY_ENVIRONMENT_VARIABLE = "DATABASE_URI"


class DatabaseSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    DATABASE_ADDRESS: str | None = Field(
        default=None,
        validation_alias=AliasChoices(ENVIRONMENT_VARIABLE, LEGACY_ENVIRONMENT_VARIABLE),
    )


class PrestartSettings(DatabaseSettings):
    """Pool and migration settings for the prestart entry point; MySQL.new() has its own defaults."""

    MIGRATION_PATH: str = "migrations"
    MIGRATION_VERSION: int | None = None
    MAX_OPEN_CONNECTIONS: int = 10
    MAX_IDLE_CONNECTIONS: int = 0
    MAX_CONNECTION_LIFETIME: float = 600.0  # seconds

    LOG_LEVEL: str = "INFO"
