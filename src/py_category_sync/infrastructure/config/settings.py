from __future__ import annotations

from datetime import timedelta
from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

EnvName = Literal["test", "production"]

ENV_PREFIX = "CATSYNC__"


def _prefixed(name: str) -> AliasChoices:
    return AliasChoices(f"{ENV_PREFIX}{name}", name)


class BaseAppSettings(BaseSettings):
    """
    Общие настройки клиента синхронизации категорий.

    Используется pydantic-settings для загрузки из ENV/.env. Каждое поле читается
    как ``CATSYNC__<NAME>`` или просто ``<NAME>``.

    Группы параметров:
    - Удалённое хранилище категорий (URL, токен, таймаут, ретраи GET)
    - Локальное хранилище состояния (флаг bootstrap и время последней синхронизации)
    - Политика синхронизации (TTL, серверное восстановление дефолтов)
    - Логирование
    """

    model_config = SettingsConfigDict(env_file=(".env",), env_file_encoding="utf-8", extra="ignore")

    # Поле env не связано напрямую с ENV, чтобы исключить коллизии и обеспечить явный контроль
    env: EnvName = Field(default="test")

    # Remote category store
    api_base_url: str = Field(alias="API_BASE_URL", default="http://localhost:3000/api", validation_alias=_prefixed("API_BASE_URL"))
    api_token: str | None = Field(alias="API_TOKEN", default=None, validation_alias=_prefixed("API_TOKEN"))
    api_timeout_sec: float = Field(alias="API_TIMEOUT_SEC", default=10.0, validation_alias=_prefixed("API_TIMEOUT_SEC"))
    api_retry_attempts: int = Field(alias="API_RETRY_ATTEMPTS", default=3, validation_alias=_prefixed("API_RETRY_ATTEMPTS"))
    api_retry_backoff_ms: int = Field(alias="API_RETRY_BACKOFF_MS", default=50, validation_alias=_prefixed("API_RETRY_BACKOFF_MS"))  # initial backoff in ms
    api_retry_max_backoff_ms: int = Field(alias="API_RETRY_MAX_BACKOFF_MS", default=1000, validation_alias=_prefixed("API_RETRY_MAX_BACKOFF_MS"))  # cap in ms

    # Device-local state (bootstrap flag, last sync timestamp)
    state_database_url: str = Field(
        alias="STATE_DATABASE_URL",
        default="sqlite+aiosqlite:///./category_sync_state.db",
        validation_alias=_prefixed("STATE_DATABASE_URL"),
    )

    # Sync policy
    sync_ttl_hours: float = Field(alias="SYNC_TTL_HOURS", default=24.0, validation_alias=_prefixed("SYNC_TTL_HOURS"))
    use_restore_defaults_endpoint: bool = Field(
        alias="USE_RESTORE_DEFAULTS_ENDPOINT", default=False, validation_alias=_prefixed("USE_RESTORE_DEFAULTS_ENDPOINT")
    )

    log_level: str = Field(alias="LOG_LEVEL", default="INFO", validation_alias=_prefixed("LOG_LEVEL"))
    json_logs: bool = Field(alias="JSON_LOGS", default=False, validation_alias=_prefixed("JSON_LOGS"))
    logging_enabled: bool = Field(alias="LOGGING_ENABLED", default=True, validation_alias=_prefixed("LOGGING_ENABLED"))

    # Rotation options (used mainly when json_logs is true)
    log_file: str | None = Field(alias="LOG_FILE", default=None, validation_alias=_prefixed("LOG_FILE"))
    log_rotation: Literal["time", "size"] = Field(alias="LOG_ROTATION", default="time", validation_alias=_prefixed("LOG_ROTATION"))
    log_max_bytes: int = Field(alias="LOG_MAX_BYTES", default=10_485_760, validation_alias=_prefixed("LOG_MAX_BYTES"))  # 10 MiB
    log_backup_count: int = Field(alias="LOG_BACKUP_COUNT", default=7, validation_alias=_prefixed("LOG_BACKUP_COUNT"))
    log_rotate_when: str = Field(alias="LOG_ROTATE_WHEN", default="midnight", validation_alias=_prefixed("LOG_ROTATE_WHEN"))
    log_rotate_utc: bool = Field(alias="LOG_ROTATE_UTC", default=True, validation_alias=_prefixed("LOG_ROTATE_UTC"))

    @field_validator("api_timeout_sec", "sync_ttl_hours")
    @classmethod
    def validate_non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("must be >= 0")
        return v

    @field_validator("api_retry_attempts")
    @classmethod
    def validate_retry_attempts(cls, v: int) -> int:
        if v < 1:
            raise ValueError("API_RETRY_ATTEMPTS must be >= 1")
        return v

    @property
    def sync_ttl(self) -> timedelta:
        return timedelta(hours=self.sync_ttl_hours)


class TestSettings(BaseAppSettings):
    """
    Тестовая среда.

    - Локальный API по умолчанию
    - SQLite in-memory для состояния
    - Подробное логирование
    """

    model_config = SettingsConfigDict(env_prefix="", extra="ignore")

    env: EnvName = Field(default="test")
    state_database_url: str = Field(
        alias="STATE_DATABASE_URL", default="sqlite+aiosqlite:///:memory:", validation_alias=_prefixed("STATE_DATABASE_URL")
    )
    log_level: str = Field(alias="LOG_LEVEL", default="DEBUG", validation_alias=_prefixed("LOG_LEVEL"))
    json_logs: bool = Field(alias="JSON_LOGS", default=False, validation_alias=_prefixed("JSON_LOGS"))


class ProdSettings(BaseAppSettings):
    """
    Продакшен среда.

    Требует явного задания адреса API.
    """

    model_config = SettingsConfigDict(env_prefix="", extra="ignore")

    env: EnvName = Field(default="production")
    # api_base_url обязательно должен быть задан через ENV/секреты
    api_base_url: str = Field(alias="API_BASE_URL", default="__MISSING_API_URL__", validation_alias=_prefixed("API_BASE_URL"))
    log_level: str = Field(alias="LOG_LEVEL", default="INFO", validation_alias=_prefixed("LOG_LEVEL"))
    json_logs: bool = Field(alias="JSON_LOGS", default=True, validation_alias=_prefixed("JSON_LOGS"))

    @field_validator("api_base_url")
    @classmethod
    def validate_api_base_url(cls, v: str) -> str:
        """Ensure API_BASE_URL provided for production profile."""
        if v == "__MISSING_API_URL__":
            raise ValueError("API_BASE_URL required")
        return v


# Классы без чтения .env для тестов изолированных профилей
class TestSettingsNoFile(TestSettings):
    model_config = SettingsConfigDict(env_file=(), extra="ignore")


class ProdSettingsNoFile(ProdSettings):
    model_config = SettingsConfigDict(env_file=(), extra="ignore")


@lru_cache(maxsize=8)
def get_settings(forced_env: EnvName | None = None, *, ignore_env_file: bool = False) -> BaseAppSettings:
    """
    Фабрика настроек на основе ENV с кэшированием.

    Parameters:
    - forced_env: Явно выбрать профиль ("test" или "production"), перекрывает ENV.
    - ignore_env_file: Отключить чтение .env (используются *NoFile классы).

    Returns:
    - Экземпляр настроек текущего окружения.
    """
    import os

    selector: EnvName = forced_env or os.getenv(f"{ENV_PREFIX}ENV") or os.getenv("ENV", "test")  # type: ignore[assignment]
    if selector == "production":
        cls = ProdSettingsNoFile if ignore_env_file else ProdSettings
    else:
        cls = TestSettingsNoFile if ignore_env_file else TestSettings

    instance = cls()
    instance.env = selector  # гарантируем согласованность поля env с выбором профиля
    return instance
