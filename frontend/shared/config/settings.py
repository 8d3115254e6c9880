# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_SECTION_CONFIG = SettingsConfigDict(
    env_file=".env",
    env_file_encoding="utf-8",
    extra="ignore",
    validate_by_name=True,
)


class ApiConfig(BaseSettings):
    base_url: str = Field("http://127.0.0.1:3000", alias="API_BASE_URL")
    timeout: float = Field(15.0, gt=0, alias="API_TIMEOUT")

    model_config = _SECTION_CONFIG

    @field_validator("base_url", mode="after")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


class StorageConfig(BaseSettings):
    credentials_file: Path = Field(
        Path(".frontend/credentials.json"), alias="CREDENTIALS_FILE"
    )
    refresh_token_key: str = Field("refresh_token", min_length=1, alias="REFRESH_TOKEN_KEY")

    model_config = _SECTION_CONFIG


def _api_config_factory() -> ApiConfig:
    return ApiConfig()  # type: ignore[call-arg]


def _storage_config_factory() -> StorageConfig:
    return StorageConfig()  # type: ignore[call-arg]


class AppConfig(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    debug_logging: bool = Field(False, alias="DEBUG_LOGGING")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_file: str | None = Field(None, alias="LOG_FILE")

    api: ApiConfig = Field(default_factory=_api_config_factory)
    storage: StorageConfig = Field(default_factory=_storage_config_factory)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_assignment=True,
        validate_by_name=True,
    )

    @field_validator("debug_logging", mode="before")
    @classmethod
    def _parse_debug_logging(cls, value: str | bool) -> bool:
        if isinstance(value, str):
            return value.lower() in ("1", "true", "yes")
        return bool(value)

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug_logging else self.log_level.upper()


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return AppConfig()  # type: ignore[call-arg]


def load_config_from_env_file(env_file: str | Path | None) -> AppConfig:
    return AppConfig(  # type: ignore[call-arg]
        _env_file=env_file,
        api=ApiConfig(_env_file=env_file),  # type: ignore[call-arg]
        storage=StorageConfig(_env_file=env_file),  # type: ignore[call-arg]
    )


__all__ = ["ApiConfig", "AppConfig", "StorageConfig", "load_config", "load_config_from_env_file"]
