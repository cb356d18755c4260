from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="STORECACHE_", env_file=".env", extra="ignore")

    # Cache store
    cache_backend: str = Field(default="redis", validation_alias="CACHE_BACKEND")
    redis_url: str = Field(default="redis://localhost:6379/0", validation_alias="REDIS_URL")

    # Per-call bound for delete / delete-by-pattern (seconds)
    cache_operation_timeout: float = Field(
        default=2.0, validation_alias="CACHE_OPERATION_TIMEOUT"
    )
    # SCAN batch hint used by pattern deletes
    cache_scan_count: int = Field(default=100, validation_alias="CACHE_SCAN_COUNT")

    # Hooks convert aware datetimes into this zone before taking the business date
    business_timezone: str = Field(default="UTC", validation_alias="BUSINESS_TIMEZONE")

    # Observability
    enable_metrics: bool = Field(default=True, validation_alias="ENABLE_METRICS")
    log_level: str = "INFO"
    log_json: bool = Field(default=True, validation_alias="LOG_JSON")


settings = Settings()
