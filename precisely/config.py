"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Connection details come from environment variables or .env (never hardcoded credentials)
    - get_settings() is cached (lru_cache): single instance per process
    - Store timeouts are positive; create_id_retries is non-negative

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all non-secret settings: works out-of-the-box with docker-compose
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

SERVICE_NAME = "precisely-documents"
SERVICE_VERSION = "1.0.0"


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://precisely:precisely@db:5432/precisely"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted Postgres hands out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Store access
    store_connect_timeout_seconds: float = Field(10.0, gt=0)
    store_operation_timeout_seconds: float = Field(10.0, gt=0)
    create_id_retries: int = Field(3, ge=0)
    create_tables_on_startup: bool = True

    # API
    host: str = "localhost"
    port: int = 8080
    cors_origins: list[str] = ["http://localhost:8080"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
