"""
Unified configuration for the VEER services.

One settings object serves every entry point:
- System agent (local HTTP command dispatcher)
- Functions service (veer-chat, update-daily-data, table REST surface)
- CLI utilities

Values come from environment variables or a .env file. The original
deployment used unprefixed names (PORT, SYSTEM_AGENT_TOKEN, OPENAI_API_KEY,
...) so the same names are accepted here.

This module uses Pydantic Settings for type-safe configuration management.
"""
import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DB_PATH = "data/veer.db"
DEFAULT_LOCAL_STORE_PATH = "data/local_storage.json"


class Settings(BaseSettings):
    """Application settings for VEER.

    All configuration values can be set via environment variables or .env file.
    Defaults are provided for development convenience.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # ============================================================================
    # Storage
    # ============================================================================
    database_path: str = Field(
        default="",
        validate_default=True,
        validation_alias=AliasChoices("database_path", "veer_db_path"),
    )
    local_store_path: str = Field(
        default=DEFAULT_LOCAL_STORE_PATH,
        validation_alias=AliasChoices("local_store_path", "veer_local_store"),
    )

    # ============================================================================
    # Logging
    # ============================================================================
    log_level: str = "INFO"
    log_format: str = "json"

    # ============================================================================
    # System agent
    # ============================================================================
    agent_host: str = "127.0.0.1"
    agent_port: int = Field(default=4000, validation_alias=AliasChoices("agent_port", "veer_agent_port", "port"))
    system_agent_token: str = ""
    history_interval_seconds: float = 30.0
    history_max_points: int = 60

    # ============================================================================
    # Functions service
    # ============================================================================
    functions_host: str = "0.0.0.0"
    functions_port: int = 8000
    openai_api_key: Optional[str] = None
    lovable_api_key: Optional[str] = None
    weather_api_key: Optional[str] = None
    enws_api_key: Optional[str] = None
    news_api_key: Optional[str] = None
    upstream_timeout_seconds: float = 30.0

    # ============================================================================
    # Client side (CLI)
    # ============================================================================
    agent_url: str = "http://localhost:4000"
    functions_url: str = "http://localhost:8000"

    environment: str = "development"
    debug: bool = False

    @field_validator("database_path", mode="before")
    @classmethod
    def resolve_database_path(cls, v: Optional[str]) -> str:
        """
        Resolve database path.

        Resolution order:
        1. Explicit value (env var, .env or constructor); ":memory:" is kept as is
        2. Project-relative default path
        """
        if v == ":memory:":
            return v
        if v:
            return os.path.abspath(v)
        project_root = Path(__file__).resolve().parent.parent
        return str(project_root / DEFAULT_DB_PATH)

    @field_validator("system_agent_token", mode="before")
    @classmethod
    def strip_token(cls, v: Optional[str]) -> str:
        return (v or "").strip()


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance (singleton pattern)."""
    return Settings()


def ensure_database_directory(db_path: Optional[str] = None) -> None:
    """
    Ensure the database directory exists.

    Args:
        db_path: Path to the database file. If None, uses the configured path.
    """
    if db_path is None:
        db_path = get_settings().database_path
    if db_path == ":memory:":
        return
    db_dir = os.path.dirname(os.path.abspath(db_path))
    if db_dir:
        os.makedirs(db_dir, exist_ok=True)
