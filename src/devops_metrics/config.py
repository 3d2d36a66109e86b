"""Configuration settings for DevOps Metrics."""

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SyncConfig(BaseModel):
    """Configuration for the incremental sync engine.

    Controls feed paging, the retry policy wrapped around remote calls,
    request pacing, and commit batching.
    """

    page_size: int = Field(
        default=100,
        ge=1,
        le=100,
        description="Pull requests requested per page of the activity feed",
    )

    # Retry policy (fixed delay, no backoff)
    retry_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Total attempts per remote call before the error propagates",
    )
    retry_delay_ms: int = Field(
        default=1000,
        ge=0,
        description="Fixed delay between attempts in milliseconds",
    )

    # Pacing
    request_interval_ms: int = Field(
        default=100,
        ge=0,
        description="Minimum milliseconds between successive GitHub requests",
    )

    commit_batch_size: int = Field(
        default=25,
        ge=1,
        le=100,
        description="PRs to commit per batch (limits data loss on failure)",
    )


class LoggingConfig(BaseModel):
    """Configuration for logging behavior.

    Controls file logging, rotation, and output format.
    """

    log_file: str | None = Field(
        default=None,
        description="Optional path for file logging (enables rotation)",
    )
    rotation: str = Field(
        default="10 MB",
        description="When to rotate log file (e.g., '10 MB', '1 day')",
    )
    retention: str = Field(
        default="7 days",
        description="How long to keep rotated logs",
    )
    serialize: bool = Field(
        default=False,
        description="If True, output JSON format to file",
    )


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # --------------------------------------------------------------------------
    # Database
    # --------------------------------------------------------------------------
    database_url: str = Field(
        default="sqlite+aiosqlite:///./devops_metrics.db",
        description="Async SQLAlchemy database connection string",
    )

    # --------------------------------------------------------------------------
    # GitHub API
    # --------------------------------------------------------------------------
    github_token: str = Field(
        default="",
        description="GitHub personal access token",
    )
    default_repo_owner: str = Field(
        default="",
        description="Owner of the repository synced when none is given",
    )
    default_repo_name: str = Field(
        default="",
        description="Name of the repository synced when none is given",
    )

    # --------------------------------------------------------------------------
    # Application
    # --------------------------------------------------------------------------
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Application environment",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    # --------------------------------------------------------------------------
    # Sync Configuration
    # --------------------------------------------------------------------------
    sync: SyncConfig = Field(
        default_factory=SyncConfig,
        description="Sync engine configuration",
    )

    # --------------------------------------------------------------------------
    # Logging Configuration
    # --------------------------------------------------------------------------
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging configuration (file output, rotation)",
    )

    @property
    def default_repository(self) -> str | None:
        """The configured default repository as owner/name, if complete."""
        if not self.default_repo_owner or not self.default_repo_name:
            return None
        return f"{self.default_repo_owner}/{self.default_repo_name}"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
