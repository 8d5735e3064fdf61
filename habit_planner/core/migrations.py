"""Alembic migration helpers."""

from __future__ import annotations

from alembic import command
from alembic.config import Config

from habit_planner.core.config import BASE_DIR


def _build_alembic_config(database_url: str) -> Config:
    config = Config(str(BASE_DIR / "alembic.ini"))
    config.set_main_option("script_location", str(BASE_DIR / "migrations"))
    config.set_main_option("sqlalchemy.url", database_url)
    # 日本語: アプリ側のログ設定を alembic.ini で上書きしない / English: Keep the application's logging setup when migrating in-process
    config.attributes["configure_logger"] = False
    return config


def upgrade_to_head(database_url: str) -> None:
    """Apply migrations to the latest revision."""
    command.upgrade(_build_alembic_config(database_url), "head")
