from __future__ import annotations

import pytest
import sqlalchemy as sa

from usertx import build_app, load_config
from usertx.core.config import AppSettings
from usertx.domain import Level

from tests.helpers.users import create_user

pytestmark = pytest.mark.unit


def test_settings_read_prefixed_environment(monkeypatch) -> None:
    monkeypatch.setenv("USERTX_DATABASE_URL", "sqlite:///custom.db")
    monkeypatch.setenv("USERTX_LOG_COUNT_FOR_SILVER", "7")
    monkeypatch.setenv("USERTX_MAIL_SENDER_ADDRESS", "noreply@example.com")

    settings = AppSettings()

    assert settings.database_url == "sqlite:///custom.db"
    assert settings.log_count_for_silver == 7
    assert settings.rec_count_for_gold == 30
    assert settings.mail_sender_address == "noreply@example.com"


def test_settings_reject_non_positive_thresholds() -> None:
    with pytest.raises(ValueError):
        AppSettings(log_count_for_silver=0)


def test_load_config_creates_schema(tmp_path) -> None:
    settings = AppSettings(database_url=f"sqlite:///{tmp_path / 'app.db'}")

    config = load_config(settings)

    assert "users" in sa.inspect(config.engine).get_table_names()
    config.engine.dispose()


def test_build_app_applies_configured_thresholds(tmp_path) -> None:
    settings = AppSettings(
        database_url=f"sqlite:///{tmp_path / 'app.db'}",
        log_count_for_silver=3,
    )
    app = build_app(load_config(settings))

    app.user_service.add(create_user("1", "hong", "1234", Level.BASIC, 3, 0))
    app.user_service.upgrade_levels()

    assert app.user_dao.get("1").level is Level.SILVER
    app.config.engine.dispose()


def test_build_app_defaults_to_environment(monkeypatch) -> None:
    monkeypatch.setenv("USERTX_DATABASE_URL", "sqlite:///:memory:")

    app = build_app()

    assert app.config.settings.database_url == "sqlite:///:memory:"
    assert app.user_service.get_count() == 0
    app.config.engine.dispose()
