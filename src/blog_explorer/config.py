"""Configuration management using pydantic-settings."""

from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ContentSource(str, Enum):
    """Where content records are read from."""

    file = "file"
    api = "api"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Content repository
    content_source: ContentSource = Field(
        default=ContentSource.file, description="Read content from a JSON export or the CMS API"
    )
    content_file: Path = Field(
        default=Path("./data/content.json"), description="JSON export with posts and categories"
    )
    content_api_url: str = Field(
        default="http://localhost:3000/api", description="CMS REST API base URL"
    )
    content_api_key: str = Field(default="", description="CMS API key (optional)")
    request_timeout: float = Field(default=30.0, description="HTTP timeout in seconds")
    max_retries: int = Field(default=3, description="Attempts for timed-out or failed requests")

    # Query limits per collection fetch
    posts_limit: int = Field(default=2000, description="Maximum posts fetched for the archive")
    categories_limit: int = Field(default=200, description="Maximum categories fetched")
    category_posts_limit: int = Field(
        default=50, description="Maximum posts fetched for a single category page"
    )

    # Paths
    data_dir: Path = Field(default=Path("./data"), description="Data directory path")

    @property
    def logs_dir(self) -> Path:
        """Path to log files directory."""
        return self.data_dir / "logs"

    @property
    def log_file(self) -> Path:
        """Path to the debug log file."""
        return self.logs_dir / "blog_explorer.log"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
