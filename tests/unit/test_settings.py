from __future__ import annotations

from collections.abc import Generator
from contextlib import suppress
from datetime import timedelta

import pytest
from pydantic import ValidationError

from py_category_sync.infrastructure.config.settings import BaseAppSettings, TestSettingsNoFile, get_settings


@pytest.fixture(autouse=True)
def clear_env(monkeypatch: pytest.MonkeyPatch) -> Generator:
    # Сброс кэша настроек перед каждым тестом
    with suppress(Exception):
        get_settings.cache_clear()  # type: ignore[attr-defined]
    for key in (
        "ENV",
        "CATSYNC__ENV",
        "API_BASE_URL",
        "CATSYNC__API_BASE_URL",
        "API_TOKEN",
        "CATSYNC__API_TOKEN",
        "LOG_LEVEL",
        "CATSYNC__LOG_LEVEL",
        "JSON_LOGS",
        "LOGGING_ENABLED",
        "CATSYNC__LOGGING_ENABLED",
        "SYNC_TTL_HOURS",
        "CATSYNC__SYNC_TTL_HOURS",
        "STATE_DATABASE_URL",
    ):
        monkeypatch.delenv(key, raising=False)
    yield
    with suppress(Exception):
        get_settings.cache_clear()  # type: ignore[attr-defined]


def test_settings_test_profile_defaults() -> None:
    s = get_settings(ignore_env_file=True)
    assert s.env == "test"
    assert s.state_database_url.startswith("sqlite+aiosqlite")
    assert s.log_level.upper() == "DEBUG"
    assert s.json_logs is False
    assert s.logging_enabled is True
    assert s.api_timeout_sec == 10
    assert s.api_retry_attempts == 3
    assert s.sync_ttl == timedelta(hours=24)
    assert s.use_restore_defaults_endpoint is False
    assert s.api_token is None


def test_settings_prod_profile_requires_api_url() -> None:
    with pytest.raises(ValidationError):
        _ = get_settings(forced_env="production", ignore_env_file=True)


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENV", "production")
    monkeypatch.setenv("API_BASE_URL", "https://api.example.com/api")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    s: BaseAppSettings = get_settings(ignore_env_file=True)
    assert s.env == "production"
    assert s.api_base_url == "https://api.example.com/api"
    assert s.log_level.upper() == "WARNING"
    assert s.json_logs is True  # production default


def test_namespaced_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CATSYNC__API_TOKEN", "abc")
    monkeypatch.setenv("CATSYNC__SYNC_TTL_HOURS", "6")
    monkeypatch.setenv("CATSYNC__LOG_LEVEL", "warning")
    s = get_settings(ignore_env_file=True)
    assert s.api_token == "abc"
    assert s.sync_ttl == timedelta(hours=6)
    assert s.log_level.upper() == "WARNING"


def test_namespaced_env_selector(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CATSYNC__ENV", "production")
    monkeypatch.setenv("CATSYNC__API_BASE_URL", "https://api.example.com")
    assert get_settings(ignore_env_file=True).env == "production"


def test_forced_env_switch(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENV", "production")
    s = get_settings(forced_env="test", ignore_env_file=True)
    assert s.env == "test"


def test_logging_enabled_flag(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOGGING_ENABLED", "false")
    s = get_settings(ignore_env_file=True)
    assert s.logging_enabled is False


@pytest.mark.parametrize(
    "field,value",
    [("API_RETRY_ATTEMPTS", 0), ("SYNC_TTL_HOURS", -1), ("API_TIMEOUT_SEC", -0.5)],
)
def test_invalid_values_rejected(field: str, value: float) -> None:
    with pytest.raises(ValidationError):
        TestSettingsNoFile(**{field: value})
