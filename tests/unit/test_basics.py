from __future__ import annotations

import pytest

from clients_service import config
from clients_service.config import Settings
from clients_service.infrastructure.db_factory import build_dsn


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("DB_HOST", "DB_PORT", "DB_USER", "DB_PASSWORD", "DB_NAME", "DATABASE_URL"):
        monkeypatch.delenv(name, raising=False)
    config.get_settings.cache_clear()
    yield
    config.get_settings.cache_clear()


def test_get_settings_defaults() -> None:
    settings = config.get_settings()
    assert settings.db_host == "localhost"
    assert settings.db_port == 5432
    assert settings.db_user == "postgres"
    assert settings.db_name == "clients"
    assert settings.database_url is None
    assert settings.db_pool_min_size > 0
    assert settings.db_pool_max_size >= settings.db_pool_min_size
    assert settings.db_statement_timeout_ms > 0


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DB_HOST", "db.internal")
    monkeypatch.setenv("DB_PORT", "6543")
    settings = Settings()
    assert settings.db_host == "db.internal"
    assert settings.db_port == 6543


def test_build_dsn_from_parts() -> None:
    settings = Settings(db_host="h", db_port=1, db_user="u", db_password="p", db_name="n")
    assert build_dsn(settings) == "postgresql://u:p@h:1/n"


def test_database_url_overrides_parts() -> None:
    settings = Settings(database_url="postgresql://x@y/z", db_host="ignored")
    assert build_dsn(settings) == "postgresql://x@y/z"
