"""
Configuration management for tidyroot.

Uses pydantic-settings to load configuration from environment variables
and .env files.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.models.schemas import RunOptions


class Settings(BaseSettings):
    """Service settings loaded from environment."""

    # Watched directory
    watch_root: Path = Path(".")

    # Run loop Configuration
    eager_provision: bool = False
    debounce_interval_ms: int = Field(default=1500, gt=0)

    # Retry Configuration
    retry_base_delay_ms: int = Field(default=500, gt=0)
    retry_max_retries: int = Field(default=5, ge=0)

    # Logging Configuration
    log_file: str = "runtime.log"
    log_level: str = "INFO"

    # Entries owned by the service itself (never sorted)
    control_files: str = (
        "runtime.log,.env,service.js,tidyroot_service.py,"
        "app,domains,scripts,tests,pyproject.toml"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    def get_control_files(self) -> list[str]:
        """Parse control files into list, always including the log file."""
        names = [n.strip() for n in self.control_files.split(',') if n.strip()]
        if self.log_file not in names:
            names.append(self.log_file)
        return names

    def get_run_options(self, startup: bool = False) -> RunOptions:
        """Build run options for the sorting engine."""
        return RunOptions(
            eager_provision=self.eager_provision,
            debounce_interval_ms=self.debounce_interval_ms,
            startup=startup,
        )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
