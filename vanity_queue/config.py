"""
Application configuration using Pydantic Settings.
Loads configuration from environment variables with sensible defaults.
"""

import shlex
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 3000

    # Job Store
    jobs_dir: str = "/data/jobs"

    # Generator
    generator_command: str = "solana-vanity"
    max_suffix_length: int = 5
    timeout_ms: int = 120_000
    max_timeout_ms: int = 300_000

    # Scheduler
    max_concurrent: int = 1
    max_queue_depth: int = 100

    # Observability
    otel_service_name: str = "vanity-queue"
    otel_exporter_otlp_endpoint: str | None = None
    log_level: str = "INFO"
    log_format: str = "json"  # json or console

    @property
    def generator_argv(self) -> list[str]:
        """The generator command split into argv form."""
        return shlex.split(self.generator_command)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
