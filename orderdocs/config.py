"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache) — single instance per process
    - Retry/visibility budgets are settings, not constants, so deployments on slow
      synced storage can widen them without a code change

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all non-secret settings: works out-of-the-box with docker-compose
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from orderdocs.core.backoff import BackoffPolicy


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://orderdocs:orderdocs@db:5432/orderdocs"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted Postgres provides postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Artifact storage
    pdf_base_path: str | None = None
    default_base_path: str = "pdfs"
    cloud_sync_markers: list[str] = [
        "OneDrive", "Dropbox", "Google Drive", "GoogleDrive",
        "iCloud", "CloudStorage", "Box Sync",
    ]

    # Identifiers
    identifier_prefix: str = "02"
    # Offset for deployments seeded with historical numbers; only used for new counter rows
    identifier_initial_value: int = 1

    # Allocation retry budget
    allocation_max_attempts: int = 20
    allocation_base_delay_ms: int = 50
    allocation_max_delay_ms: int = 1_000

    # Folder visibility polling
    local_verify_attempts: int = 3
    local_verify_base_delay_ms: int = 100
    cloud_verify_attempts: int = 8
    cloud_verify_base_delay_ms: int = 500
    cloud_verify_max_delay_ms: int = 5_000

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    def allocation_policy(self) -> BackoffPolicy:
        return BackoffPolicy(
            max_attempts=self.allocation_max_attempts,
            base_delay_ms=self.allocation_base_delay_ms,
            max_delay_ms=self.allocation_max_delay_ms,
            jitter=0.25,
        )

    def local_verify_policy(self) -> BackoffPolicy:
        return BackoffPolicy(
            max_attempts=self.local_verify_attempts,
            base_delay_ms=self.local_verify_base_delay_ms,
        )

    def cloud_verify_policy(self) -> BackoffPolicy:
        return BackoffPolicy(
            max_attempts=self.cloud_verify_attempts,
            base_delay_ms=self.cloud_verify_base_delay_ms,
            max_delay_ms=self.cloud_verify_max_delay_ms,
            exponential=True,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
