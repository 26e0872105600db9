from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Currency Converter Service"
    api_prefix: str = "/v1"
    log_level: str = "INFO"

    redis_url: str | None = "redis://localhost:6379/0"

    rates_api_url: str = "https://api.exchangerate.host/latest"
    rates_api_key: str | None = None
    rates_cache_ttl_seconds: int = 12 * 60 * 60
    # None leaves the provider call unbounded; callers impose their own deadline.
    request_timeout_seconds: float | None = None

    max_amount: float = 1_000_000_000
    default_from_currency: str = "USD"
    default_to_currency: str = "EUR"

    @field_validator("redis_url", "rates_api_key", mode="before")
    @classmethod
    def _blank_to_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = str(value).strip()
        return value or None

    @field_validator("default_from_currency", "default_to_currency")
    @classmethod
    def _normalize_currency(cls, value: str) -> str:
        return value.strip().upper()

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        return value.strip().upper()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
