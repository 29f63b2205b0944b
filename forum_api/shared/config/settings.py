# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import sys
from collections.abc import Callable
from functools import lru_cache
from typing import TypeVar

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

S = TypeVar("S", bound=BaseSettings)

TEN_YEARS_SECONDS = 60 * 60 * 24 * 365 * 10

_SECTION_CONFIG = SettingsConfigDict(
    env_file=".env",
    env_file_encoding="utf-8",
    populate_by_name=True,
    extra="ignore",
)


class DatabaseConfig(BaseSettings):
    url: str = Field("sqlite:///forum.db", alias="DATABASE_URL")
    pool_size: int = Field(10, ge=1, alias="DATABASE_POOL_SIZE")
    max_overflow: int = Field(5, ge=0, alias="DATABASE_MAX_OVERFLOW")
    pool_timeout: float = Field(30.0, ge=0.1, alias="DATABASE_POOL_TIMEOUT")

    model_config = _SECTION_CONFIG


class SessionConfig(BaseSettings):
    backend: str = Field("redis", alias="SESSION_BACKEND")
    redis_url: str = Field("redis://localhost:6379/0", alias="SESSION_REDIS_URL")
    key_prefix: str = Field("sess:", alias="SESSION_KEY_PREFIX")
    cookie_name: str = Field("qid", alias="SESSION_COOKIE_NAME")
    lifetime_seconds: int = Field(TEN_YEARS_SECONDS, ge=1, alias="SESSION_LIFETIME")
    socket_timeout: float = Field(5.0, ge=0.1, alias="SESSION_SOCKET_TIMEOUT")
    connect_timeout: float = Field(5.0, ge=0.1, alias="SESSION_CONNECT_TIMEOUT")

    model_config = _SECTION_CONFIG

    @field_validator("backend", mode="before")
    @classmethod
    def _parse_backend(cls, value: str) -> str:
        value = str(value).strip().lower()
        if value not in ("redis", "memory"):
            raise ValueError("SESSION_BACKEND must be 'redis' or 'memory'")
        return value


class PasswordHashingConfig(BaseSettings):
    time_cost: int = Field(3, ge=1, alias="ARGON2_TIME_COST")
    memory_cost: int = Field(65536, ge=8, alias="ARGON2_MEMORY_COST")
    parallelism: int = Field(4, ge=1, alias="ARGON2_PARALLELISM")

    model_config = _SECTION_CONFIG


class ResilienceConfig(BaseSettings):
    max_retries: int = Field(2, ge=0, alias="RESILIENCE_RETRIES")
    backoff_base: float = Field(0.1, ge=0.01, alias="RESILIENCE_BACKOFF_BASE")
    backoff_cap: float = Field(1.0, ge=0.01, alias="RESILIENCE_BACKOFF_CAP")

    model_config = _SECTION_CONFIG


def _flag(value: str | bool) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


class SecurityConfig(BaseSettings):
    # CORS, comma separated; the session cookie needs explicit origins cross-site
    origins: str = Field("*", alias="ALLOWED_ORIGINS")
    enable_hsts: bool = Field(False, alias="ENABLE_HSTS")

    model_config = _SECTION_CONFIG

    @field_validator("enable_hsts", mode="before")
    @classmethod
    def _parse_hsts(cls, value: str | bool) -> bool:
        return _flag(value)

    @property
    def allowed_origins(self) -> list[str]:
        return [origin.strip() for origin in self.origins.split(",") if origin.strip()]


def _section(model: type[S]) -> Callable[[], S]:
    # each section reads its own env aliases
    return lambda: model()  # type: ignore[call-arg]


_INSECURE_SECRETS = frozenset({"", "dev", "development", "test", "secret", "changeme"})


class AppConfig(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    secret_key: str = Field("dev", alias="SECRET_KEY")
    debug_logging: bool = Field(False, alias="DEBUG_LOGGING")
    graphql_ide: bool = Field(True, alias="GRAPHQL_IDE")

    database: DatabaseConfig = Field(default_factory=_section(DatabaseConfig))
    session: SessionConfig = Field(default_factory=_section(SessionConfig))
    password_hashing: PasswordHashingConfig = Field(
        default_factory=_section(PasswordHashingConfig)
    )
    resilience: ResilienceConfig = Field(default_factory=_section(ResilienceConfig))
    security: SecurityConfig = Field(default_factory=_section(SecurityConfig))

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        validate_assignment=True,
        extra="ignore",
    )

    @field_validator("debug_logging", "graphql_ide", mode="before")
    @classmethod
    def _parse_flags(cls, value: str | bool) -> bool:
        return _flag(value)

    def is_production(self) -> bool:
        return self.app_env.lower() in ("production", "prod")

    def production_warnings(self) -> list[str]:
        warnings = []
        if "*" in self.security.allowed_origins:
            warnings.append("ALLOWED_ORIGINS is '*': browsers will not send the qid cookie cross-site")
        if not self.security.enable_hsts:
            warnings.append("HSTS is disabled")
        if self.session.backend == "memory":
            warnings.append("SESSION_BACKEND=memory loses every session on restart")
        if self.graphql_ide:
            warnings.append("GRAPHQL_IDE is set but the IDE is never served in production")
        return warnings

    @model_validator(mode="after")
    def _validate_production_settings(self) -> "AppConfig":
        if not self.is_production():
            return self

        if self.secret_key.strip().lower() in _INSECURE_SECRETS:
            print(
                "\nCRITICAL: insecure SECRET_KEY in production.\n"
                "   It signs the qid session cookie; set a long random value, e.g.\n"
                "   python -c \"import secrets; print(secrets.token_urlsafe(48))\"\n",
                file=sys.stderr,
            )
            sys.exit(1)

        warnings = self.production_warnings()
        if warnings:
            print("\nProduction configuration warnings:", file=sys.stderr)
            for warning in warnings:
                print(f"   - {warning}", file=sys.stderr)
        return self


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return AppConfig()


__all__ = ["AppConfig", "load_config"]
