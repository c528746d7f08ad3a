"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Credentials come from DATABASE_URL (never hardcoded beyond the local default)
    - get_settings() is cached (lru_cache) — single instance per process
    - Every store deadline is a setting, never a request parameter

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults cover a local docker-compose Postgres, so the API and the seed
      CLI start without a .env file
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Portfolio CMS settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Service identity (health probes, OpenAPI, log records)
    service_name: str = "portfolio-cms-api"
    service_version: str = "1.0.0"

    # Store
    database_url: str = "postgresql+asyncpg://portfolio:portfolio@db:5432/portfolio"
    database_pool_size: int = 20
    database_max_overflow: int = 10
    database_pool_timeout_seconds: float = 30.0
    database_echo: bool = False

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted Postgres hands out postgresql:// URLs; the async engine needs asyncpg."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    # Commands exceeding this are reported as transient and rolled back
    store_timeout_seconds: float = 15.0
    # Catalog import runs many small transactions under one deadline
    import_timeout_seconds: float = 300.0

    # API
    cors_origins: list[str] = ["http://localhost:3000"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
