"""Tests for environment settings."""

import pytest

from roomledger.infra.settings import (
    DEFAULT_LOCK_TIMEOUT_MS,
    get_lock_timeout_ms,
    load_settings,
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in (
        "DATABASE_URL",
        "DB_PASSWORD",
        "ROOMLEDGER_LOCK_TIMEOUT_MS",
        "ROOMLEDGER_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestLoadSettings:
    def test_defaults(self, clean_env):
        clean_env.setenv("DATABASE_URL", "dbname=roomledger")

        settings = load_settings()

        assert settings.database_url == "dbname=roomledger"
        assert settings.db_password is None
        assert settings.lock_timeout_ms == DEFAULT_LOCK_TIMEOUT_MS
        assert settings.log_level == "INFO"

    def test_overrides(self, clean_env):
        clean_env.setenv("DATABASE_URL", "postgres://u@h/db")
        clean_env.setenv("DB_PASSWORD", "pw")
        clean_env.setenv("ROOMLEDGER_LOCK_TIMEOUT_MS", "0")
        clean_env.setenv("ROOMLEDGER_LOG_LEVEL", "debug")

        settings = load_settings()

        assert settings.db_password == "pw"
        assert settings.lock_timeout_ms == 0
        assert settings.log_level == "DEBUG"

    def test_missing_database_url(self, clean_env):
        with pytest.raises(RuntimeError, match="DATABASE_URL"):
            load_settings()

    def test_empty_password_is_none(self, clean_env):
        clean_env.setenv("DATABASE_URL", "dbname=db")
        clean_env.setenv("DB_PASSWORD", "")

        assert load_settings().db_password is None

    def test_settings_are_frozen(self, clean_env):
        clean_env.setenv("DATABASE_URL", "dbname=db")
        settings = load_settings()

        with pytest.raises(Exception):
            settings.lock_timeout_ms = 1


class TestLockTimeout:
    def test_without_database_url(self, clean_env):
        clean_env.setenv("ROOMLEDGER_LOCK_TIMEOUT_MS", "750")

        assert get_lock_timeout_ms() == 750

    def test_invalid_value(self, clean_env):
        clean_env.setenv("ROOMLEDGER_LOCK_TIMEOUT_MS", "soon")

        with pytest.raises(RuntimeError, match="ROOMLEDGER_LOCK_TIMEOUT_MS"):
            get_lock_timeout_ms()

    def test_negative_value(self, clean_env):
        clean_env.setenv("ROOMLEDGER_LOCK_TIMEOUT_MS", "-5")

        with pytest.raises(RuntimeError, match=">= 0"):
            get_lock_timeout_ms()
