"""Smoke tests for Alembic migrations covering the users table."""

from __future__ import annotations

from pathlib import Path

import pytest
import sqlalchemy as sa
from alembic import command
from alembic.config import Config

from usertx.db import Base

PROJECT_ROOT = Path(__file__).resolve().parents[3]


def _alembic_config(database_url: str) -> Config:
    config = Config(str(PROJECT_ROOT / "alembic.ini"))
    config.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    config.set_main_option("sqlalchemy.url", database_url)
    config.attributes["configure_logger"] = False
    return config


@pytest.mark.integration
def test_upgrade_head_matches_models(tmp_path, monkeypatch) -> None:
    """Upgrade to head and verify the schema mirrors the declarative models."""

    monkeypatch.delenv("USERTX_DATABASE_URL", raising=False)
    database_url = f"sqlite:///{tmp_path / 'migrated.db'}"
    config = _alembic_config(database_url)

    command.upgrade(config, "head")

    engine = sa.create_engine(database_url)
    try:
        inspector = sa.inspect(engine)
        assert "users" in inspector.get_table_names()
        migrated_columns = {column["name"] for column in inspector.get_columns("users")}
        assert migrated_columns == set(Base.metadata.tables["users"].columns.keys())
        assert {index["name"] for index in inspector.get_indexes("users")} == {"ix_users_level"}
    finally:
        engine.dispose()

    command.downgrade(config, "base")

    engine = sa.create_engine(database_url)
    try:
        assert "users" not in sa.inspect(engine).get_table_names()
    finally:
        engine.dispose()
