"""
Configuration and settings for the blog backend.
"""

from __future__ import annotations

from functools import lru_cache
from typing import List

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_prefix: str = Field(default="")

    # Document store (MongoDB expected)
    mongodb_url: str = Field(default="mongodb://127.0.0.1:27017")
    database_name: str = Field(default="Blog")
    users_collection: str = Field(default="users")
    blogs_collection: str = Field(default="blogs")
    server_selection_timeout_ms: int = Field(default=5000)

    # Development toggles
    use_in_memory_backends: bool = Field(
        default=False,
        validation_alias=AliasChoices(
            "use_in_memory_backends", "BLOG_USE_IN_MEMORY_BACKENDS"
        ),
    )

    # Auth
    bcrypt_rounds: int = Field(default=10, ge=4, le=31)

    # Return 409/401 for duplicate signup and bad credentials instead of
    # the legacy 201 responses.
    strict_status_codes: bool = Field(
        default=False,
        validation_alias=AliasChoices(
            "strict_status_codes", "BLOG_STRICT_STATUS_CODES"
        ),
    )

    # HTTP surface
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])
    static_dir: str = Field(default="public")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=5000)
    log_level: str = Field(default="INFO")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
