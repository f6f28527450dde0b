"""Helpers to apply Alembic migrations programmatically."""

from __future__ import annotations

from pathlib import Path

from alembic import command
from alembic.config import Config

from registry_api.config import get_settings

from .session import resolve_database_url

PROJECT_ROOT = Path(__file__).resolve().parents[3]


def upgrade_database(database_url: str | None = None) -> None:
    """Run Alembic migrations up to the latest revision."""

    alembic_cfg = Config(str(PROJECT_ROOT / "alembic.ini"))
    # Prevent Alembic from overriding the application's logging configuration.
    alembic_cfg.attributes["configure_logger"] = False
    alembic_cfg.set_main_option("script_location", str(PROJECT_ROOT / "migrations"))
    alembic_cfg.set_main_option(
        "sqlalchemy.url",
        resolve_database_url(database_url or get_settings().database_url).replace("%", "%%"),
    )
    command.upgrade(alembic_cfg, "head")


__all__ = ["upgrade_database"]
