"""Application configuration."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings

from trial_search.constants import (
    ASSETS_DIR,
    CLINICAL_TRIALS_BASE_URL,
    CLINICAL_TRIALS_MAX_RANK,
    CLINICAL_TRIALS_PAGE_SIZE,
    DEFAULT_HOST,
    DEFAULT_PORT,
    DEFAULT_TIMEOUT,
    TEMPLATES_DIR,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Server
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT

    # Upstream
    upstream_base_url: str = CLINICAL_TRIALS_BASE_URL
    upstream_timeout_seconds: float = DEFAULT_TIMEOUT
    page_size: int = CLINICAL_TRIALS_PAGE_SIZE
    max_rank: int = CLINICAL_TRIALS_MAX_RANK

    # Rendering
    templates_dir: Path = TEMPLATES_DIR
    assets_dir: Path = ASSETS_DIR

    # App Settings
    debug: bool = False
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        frozen = True


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
