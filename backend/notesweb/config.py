"""
Notes Web — Application Configuration
======================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or a .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by the app factory, the process entry point, and the tests.
When:  Loaded once at module import time.
"""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

PACKAGE_DIR = Path(__file__).resolve().parent


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Every value has a development default; nothing is required to boot
    the server locally against `./notes.db`.
    """

    # ── Database ──────────────────────────────────────────────────────────
    # Any async SQLAlchemy URL works; SQLite through aiosqlite is the default.
    # Format: sqlite+aiosqlite:///<path> or postgresql+asyncpg://user:pw@host/db
    database_url: str = Field(
        default="sqlite+aiosqlite:///./notes.db",
        description="Async SQLAlchemy connection URL for the note store",
    )

    # Run metadata.create_all at startup. This bootstraps the two tables;
    # there are no revisions or upgrade steps.
    create_schema: bool = Field(default=True)

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8080, ge=1, le=65535)

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

    # ── Presentation ──────────────────────────────────────────────────────
    templates_dir: str = Field(default=str(PACKAGE_DIR / "templates"))
    static_dir: str = Field(default=str(PACKAGE_DIR / "static"))

    # ── Tracing ───────────────────────────────────────────────────────────
    # Header read from the client and echoed back on every response
    request_id_header: str = Field(default="X-Request-Id")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # DATABASE_URL and database_url both work
    }


# Singleton instance — imported throughout the application
settings = Settings()
