"""Runtime configuration based on environment variables."""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CacheSettings(BaseModel):
    enabled: bool = True
    max_entries: int = Field(default=100, ge=1)
    ttl_seconds: float = Field(default=300, gt=0)


class RateLimitSettings(BaseModel):
    max_requests: int = Field(default=30, ge=1)
    window_seconds: float = Field(default=60, gt=0)


class SanitizerSettings(BaseModel):
    max_query_length: int = Field(default=500, ge=1)
    max_response_length: int = Field(default=4000, ge=1)
    redaction_context_chars: int = Field(
        default=200,
        ge=0,
        description="Characters after a flagged phrase that are removed with it.",
    )
    extra_injection_patterns: list[str] = Field(default_factory=list)
    extra_response_patterns: list[str] = Field(default_factory=list)

    @field_validator("extra_injection_patterns", "extra_response_patterns")
    @classmethod
    def _patterns_compile(cls, value: list[str]) -> list[str]:
        for pattern in value:
            try:
                re.compile(pattern)
            except re.error as exc:
                raise ValueError(f"invalid pattern {pattern!r}: {exc}") from exc
        return value


class ProviderSettings(BaseModel):
    name: str = Field(default="gemini", min_length=1)
    timeout_seconds: float = Field(default=15.0, gt=0, le=600)


class GeminiSettings(BaseModel):
    api_key: SecretStr | None = None
    model: str | None = Field(
        default=None,
        description="Model identifier; falls back to GEMINI_MODEL, then the provider default.",
    )

    @field_validator("api_key", "model", mode="before")
    @classmethod
    def _empty_str_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class ServerSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="WEB_SEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    server_name: str = "gemini-web-search"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    cache: CacheSettings = Field(default_factory=CacheSettings)
    rate_limit: RateLimitSettings = Field(default_factory=RateLimitSettings)
    sanitizer: SanitizerSettings = Field(default_factory=SanitizerSettings)
    provider: ProviderSettings = Field(default_factory=ProviderSettings)
    gemini: GeminiSettings = Field(default_factory=GeminiSettings)

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value):
        if isinstance(value, str):
            return value.strip().upper()
        return value


@lru_cache
def get_settings() -> ServerSettings:
    """Return cached settings instance."""

    return ServerSettings()


__all__ = [
    "CacheSettings",
    "RateLimitSettings",
    "SanitizerSettings",
    "ProviderSettings",
    "GeminiSettings",
    "ServerSettings",
    "get_settings",
]
