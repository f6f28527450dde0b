"""Registry configuration using pydantic-settings."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import ClassVar, Literal

from pydantic import Field, PositiveInt
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DB_PATH = Path.cwd() / "data" / "registry.sqlite"


class RegistryApiSettings(BaseSettings):
    """Process/runtime settings for the registry API server."""

    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(
        env_prefix="REGISTRY_API_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="0.0.0.0", description="Bind address for the registry API.")
    port: PositiveInt = Field(default=3000, description="Port for the registry API.")
    reload: bool = Field(default=False, description="Enable uvicorn auto-reload (dev only).")
    log_level: Literal["critical", "error", "warning", "info", "debug", "trace"] = Field(
        default="info",
        description="Log level for registry API / uvicorn.",
    )


class RegistrySettings(BaseSettings):
    """Validated settings for the registry store and publish access."""

    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(
        env_prefix="REGISTRY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_url: str = Field(
        default=f"sqlite:///{DEFAULT_DB_PATH.as_posix()}",
        description="SQLAlchemy URL of the version store.",
    )
    isolation_level: str | None = Field(
        default=None,
        description="Transaction isolation level for non-SQLite engines (e.g. SERIALIZABLE).",
    )
    publish_token: str | None = Field(
        default=None,
        description="Bearer token required by the publish endpoint; publishing is disabled when unset.",
    )
    run_migrations: bool = Field(
        default=True,
        description="Apply Alembic migrations when the API starts.",
    )


@lru_cache()
def get_settings() -> RegistrySettings:
    """Return memoized registry settings."""

    return RegistrySettings()


@lru_cache()
def get_api_settings() -> RegistryApiSettings:
    """Return memoized API process settings."""

    return RegistryApiSettings()
