from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseModel):
    """Application-specific configuration values."""

    name: str = "docsearch"
    env: str = "development"
    log_level: str = "INFO"
    # Transport settings for FastMCP: "stdio" (default), "http", or "sse"
    transport: Literal["stdio", "http", "sse"] = "stdio"
    host: str = "127.0.0.1"
    port: int = 8000


class BackendConfig(BaseModel):
    """Search backend configuration values."""

    # "ram" keeps every index in memory; "file" persists them under `path`
    storage: Literal["ram", "file"] = "ram"
    path: Optional[str] = None
    # Aliases are "<namespace>-<handle>", physical indexes "<namespace>-<handle>-v<n>"
    namespace: str = "development-documents"
    timeout: Optional[float] = None  # seconds; None disables the time limit


class RelevanceConfig(BaseModel):
    """Boosts and thresholds used when composing queries."""

    title_boost: float = 2.0
    description_boost: float = 1.0
    basename_boost: float = 0.5
    phrase_boost: float = 3.0
    exact_boost: float = 1.5
    min_should_match_ratio: float = Field(default=6 / 7, gt=0.0, le=1.0)
    default_size: int = Field(default=20, ge=1)
    max_size: int = Field(default=1000, ge=1)


class Settings(BaseSettings):
    """Top-level settings loaded from environment variables and .env only."""

    model_config = SettingsConfigDict(
        env_prefix="DOCSEARCH_",
        env_nested_delimiter="__",
        env_file=".env",
        extra="ignore",
    )

    app: AppConfig = AppConfig()
    backend: BackendConfig = BackendConfig()
    relevance: RelevanceConfig = RelevanceConfig()


def load_settings() -> Settings:
    """Load settings from environment variables and .env only."""
    return Settings()  # type: ignore[call-arg]
