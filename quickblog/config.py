"""
Configuration and settings for the QuickBlog service.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    api_prefix: str = Field(default="/api")

    # Key-value store (Redis expected)
    redis_url: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("REDIS_URL", "redis_url")
    )

    # Development toggles
    use_in_memory_backends: bool = Field(
        default=False,
        validation_alias=AliasChoices(
            "QUICKBLOG_USE_IN_MEMORY_BACKENDS", "use_in_memory_backends"
        ),
    )

    # Shareable links are built as <public_base_url>/article/<slug>
    public_base_url: str = Field(
        default="http://localhost:3001",
        validation_alias=AliasChoices(
            "QUICKBLOG_PUBLIC_BASE_URL", "public_base_url"
        ),
    )
    # Link target for "Create Your Blog" on article pages
    site_url: str = Field(default="http://localhost:8000")
    cors_origins: list[str] = Field(
        default_factory=lambda: [
            "http://localhost:8000",
            "http://127.0.0.1:5501",
            "http://localhost:5501",
        ]
    )

    # Post limits, mirrored by the terminal client
    min_words: int = Field(default=100)
    max_words: int = Field(default=3000)
    max_tags: int = Field(default=4)

    bcrypt_rounds: int = Field(default=10)
    log_level: str = Field(default="INFO")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
