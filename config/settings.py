"""Application settings and configuration management."""
from __future__ import annotations

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or defaults."""

    DB_PATH: str = Field(default="data/interviews.db")
    TRANSCRIPT_DIR: str = Field(default="data/transcripts")

    DEFAULT_DURATION_MINUTES: int = Field(default=60, ge=1)
    SEED_DEMO_DATA: bool = True

    VOICE_SESSION_TTL_SECONDS: int = Field(default=4 * 60 * 60, ge=1)
    VOICE_SESSION_MAX: int = Field(default=1000, ge=1)
    TRANSCRIPT_ASYNC_WRITES: bool = True

    CORS_ORIGINS: List[str] = Field(default_factory=lambda: ["*"])

    model_config = SettingsConfigDict(env_file=".env", validate_assignment=True)


settings = Settings()
