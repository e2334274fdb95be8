"""
MemoPad Backend — Application Configuration
============================================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading with validation on startup.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a default `settings` object.
Who:   Read by the application factory; tests build their own `Settings`.
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have sensible defaults for local development.
    Attributes are grouped by concern for readability.
    """

    # ── Database ──────────────────────────────────────────────────────────
    # What: Async SQLite connection string using the aiosqlite driver
    # Format: sqlite+aiosqlite:///<relative path> or sqlite+aiosqlite:////<absolute path>
    # Must point at a file; in-memory databases do not survive the pool.
    database_url: str = Field(
        default="sqlite+aiosqlite:///./db/memopad.db",
        description="Async SQLite connection URL",
    )

    # What: Connections held by the engine. One handle is shared by every request;
    # SQLite serializes writes on it anyway.
    db_pool_size: int = Field(default=1, ge=1, le=5)

    # What: Seconds a request waits for the shared connection before failing
    db_pool_timeout: int = Field(default=30, ge=1, le=300)

    # ── CORS ──────────────────────────────────────────────────────────────
    # What: Browser origins admitted by the origin policy gate
    # Format: Comma-separated, compared by exact string match
    cors_origins: str = Field(default="http://127.0.0.1:8080,http://localhost:3000")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list, dropping blanks."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=3000, ge=1024, le=65535)

    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Only file-backed SQLite databases are supported."""
        if not v.startswith("sqlite"):
            raise ValueError(f"Unsupported database_url '{v}'. Expected a sqlite+aiosqlite URL.")
        if ":memory:" in v:
            raise ValueError("In-memory SQLite is not supported; point database_url at a file.")
        return v

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


# Default instance used when the app factory is called without explicit settings
settings = Settings()
