# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from functools import lru_cache
from typing import Annotated, Any

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from recordkeeper.shared.errors.base import ConfigError

AUTH_SECRET_MIN_BYTES = 48


def _parse_bool(value: str | bool) -> bool:
    if isinstance(value, str):
        return value.lower() in ("1", "true", "yes")
    return bool(value)


class DatabaseConfig(BaseSettings):
    url: str = Field("sqlite:///recordkeeper.db", alias="DATABASE_URL")
    pool_size: int = Field(10, ge=1, alias="DATABASE_POOL_SIZE")
    max_overflow: int = Field(5, ge=0, alias="DATABASE_MAX_OVERFLOW")
    pool_timeout: float = Field(30.0, ge=0.1, alias="DATABASE_POOL_TIMEOUT")
    connect_retries: int = Field(3, ge=0, alias="DATABASE_CONNECT_RETRIES")
    connect_backoff: float = Field(0.5, ge=0.0, alias="DATABASE_CONNECT_BACKOFF")
    connect_backoff_cap: float = Field(8.0, ge=0.0, alias="DATABASE_CONNECT_BACKOFF_CAP")

    model_config = SettingsConfigDict(
        env_file=".env", extra="ignore", validate_by_name=True
    )


class ObservabilityConfig(BaseSettings):
    metrics_enabled: bool = Field(True, alias="METRICS_ENABLED")

    model_config = SettingsConfigDict(
        env_file=".env", extra="ignore", validate_by_name=True
    )

    @field_validator("metrics_enabled", mode="before")
    @classmethod
    def _parse_enabled(cls, value: str | bool) -> bool:
        return _parse_bool(value)


class SecurityConfig(BaseSettings):
    # CORS
    allowed_origins: Annotated[list[str], NoDecode] = Field(["*"], alias="ALLOWED_ORIGINS")

    # HSTS
    enable_hsts: bool = Field(False, alias="ENABLE_HSTS")

    model_config = SettingsConfigDict(
        env_file=".env", extra="ignore", validate_by_name=True
    )

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _parse_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("enable_hsts", mode="before")
    @classmethod
    def _parse_hsts(cls, value: str | bool) -> bool:
        return _parse_bool(value)


def _database_config_factory() -> DatabaseConfig:
    return DatabaseConfig()  # type: ignore[call-arg]


def _observability_config_factory() -> ObservabilityConfig:
    return ObservabilityConfig()  # type: ignore[call-arg]


def _security_config_factory() -> SecurityConfig:
    return SecurityConfig()  # type: ignore[call-arg]


class AppConfig(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    auth_secret: SecretStr = Field(alias="AUTH_SECRET")
    auth_test_bypass_token: SecretStr | None = Field(None, alias="AUTH_TEST_BYPASS_TOKEN")
    auth_hash_cost: int = Field(14, ge=1, le=20, alias="AUTH_HASH_COST")
    bootstrap_admin: bool = Field(True, alias="BOOTSTRAP_ADMIN")
    debug_logging: bool = Field(False, alias="DEBUG_LOGGING")
    host: str = Field("0.0.0.0", alias="HOST")
    port: int = Field(8080, ge=1, le=65535, alias="PORT")

    database: DatabaseConfig = Field(default_factory=_database_config_factory)
    observability: ObservabilityConfig = Field(default_factory=_observability_config_factory)
    security: SecurityConfig = Field(default_factory=_security_config_factory)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_by_name=True,
    )

    @field_validator("auth_secret")
    @classmethod
    def _check_secret_length(cls, value: SecretStr) -> SecretStr:
        size = len(value.get_secret_value().encode("utf-8"))
        if size < AUTH_SECRET_MIN_BYTES:
            raise ValueError(
                f"AUTH_SECRET must be at least {AUTH_SECRET_MIN_BYTES} bytes, got {size}"
            )
        return value

    @field_validator("auth_test_bypass_token", mode="before")
    @classmethod
    def _blank_bypass_is_unset(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("bootstrap_admin", "debug_logging", mode="before")
    @classmethod
    def _parse_flags(cls, value: str | bool) -> bool:
        return _parse_bool(value)

    @model_validator(mode="after")
    def _validate_production_settings(self) -> "AppConfig":
        if self.is_production() and self.auth_test_bypass_token is not None:
            raise ValueError("AUTH_TEST_BYPASS_TOKEN must not be set when APP_ENV=production")
        return self

    def is_production(self) -> bool:
        return self.app_env.lower() in ("production", "prod")

    def is_test(self) -> bool:
        return self.app_env.lower() == "test"


def _describe(exc: PydanticValidationError) -> str:
    # Input values are omitted: AUTH_SECRET must never reach a log line.
    parts = []
    for error in exc.errors():
        loc = ".".join(str(part) for part in error.get("loc", ()))
        parts.append(f"{loc or 'config'}: {error.get('msg', 'invalid value')}")
    return "; ".join(parts)


def build_config(**values: Any) -> AppConfig:
    try:
        return AppConfig(**values)
    except PydanticValidationError as exc:
        raise ConfigError(_describe(exc)) from exc


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return build_config()


__all__ = [
    "AUTH_SECRET_MIN_BYTES",
    "AppConfig",
    "DatabaseConfig",
    "ObservabilityConfig",
    "SecurityConfig",
    "build_config",
    "load_config",
]
