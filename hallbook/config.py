"""Runtime settings for the hall booking service.

Every field can be overridden by an environment variable of the same name
(case-insensitive) or by a ``.env`` file in the working directory.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "Hall Booking"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False  # also exposes /docs and creates tables on startup
    api_prefix: str = "/api/v1"  # mount point of the auth, halls and bookings routers
    log_level: str = "INFO"

    # uvicorn, when started through ``python -m hallbook.main``
    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = 2  # ignored in debug, which runs a single reloading worker

    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "hallbook"
    postgres_password: str = Field(default="hallbook")
    postgres_db: str = "hallbook"
    db_pool_size: int = 10
    db_max_overflow: int = 5

    @computed_field
    @property
    def database_url(self) -> str:
        """asyncpg URL shared by the app engine and Alembic."""
        return (
            f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    # Sliding-window counters for the rate limiters
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: str | None = None
    redis_db: int = 0

    @computed_field
    @property
    def redis_url(self) -> str:
        auth = f":{self.redis_password}@" if self.redis_password else ""
        return f"redis://{auth}{self.redis_host}:{self.redis_port}/{self.redis_db}"

    # Must be overridden outside development
    jwt_secret_key: str = Field(default="hallbook-dev-secret")
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60
    refresh_token_expire_days: int = 7

    rate_limit_per_minute: int = 100  # per client address, across all routes
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    timezone: str = "UTC"  # "today" for the past-date guard is evaluated here
    pending_blocks_slot: bool = False  # True: pending bookings also block new requests

    @field_validator("timezone")
    @classmethod
    def known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone '{value}'")
        return value


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
