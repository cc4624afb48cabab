"""
Album API: Application Configuration
=====================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by every module that needs configuration values.
When:  Loaded once at module import time; there is no hot reload.

Database connection:
    The service reads the same four variables as its predecessor
    (DB_HOST, DB_USER, DB_PASSWORD, DB_NAME) plus DB_PORT, and assembles an
    asyncpg URL from them. DATABASE_URL, when set, replaces the assembled URL
    entirely (tests point it at SQLite through aiosqlite).
"""

from typing import List, Optional
from urllib.parse import quote_plus

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have defaults suitable for local development.
    Attributes are grouped by concern.
    """

    # ── Database ──────────────────────────────────────────────────────────
    db_host: str = Field(default="localhost")
    db_port: int = Field(default=5432, ge=1, le=65535)
    db_user: str = Field(default="postgres")
    db_password: str = Field(default="")
    db_name: str = Field(default="recordings")

    # Full SQLAlchemy URL; overrides the individual db_* parts when present
    database_url: Optional[str] = Field(
        default=None,
        description="Async SQLAlchemy connection URL (postgresql+asyncpg://...)",
    )

    # Connection pool sizing (ignored for SQLite URLs)
    db_pool_size: int = Field(default=10, ge=1, le=100)
    db_max_overflow: int = Field(default=5, ge=0, le=50)
    db_pool_pre_ping: bool = Field(default=True)

    # ── Store ─────────────────────────────────────────────────────────────
    # Which AlbumStore backend the lifespan builds: "database" or "memory"
    album_store: str = Field(default="database")

    @field_validator("album_store")
    @classmethod
    def validate_album_store(cls, v: str) -> str:
        """Ensures the store backend is one we know how to build."""
        valid = {"database", "memory"}
        lower = v.lower()
        if lower not in valid:
            raise ValueError(f"Invalid album_store '{v}'. Must be one of: {valid}")
        return lower

    # ── Deadlines ─────────────────────────────────────────────────────────
    # Upper bound on a single store operation made on behalf of a request
    request_timeout: float = Field(default=15.0, gt=0)
    # Upper bound on the startup connectivity check
    connect_timeout: float = Field(default=5.0, gt=0)

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8080, ge=1, le=65535)

    # Comma-separated list of allowed origins
    cors_origins: str = Field(default="http://localhost:3000")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
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

    # When True, 500 responses carry the underlying error text in details.cause
    expose_error_details: bool = Field(default=False)

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }

    @property
    def sqlalchemy_url(self) -> str:
        """
        The URL handed to create_async_engine.

        DATABASE_URL wins when set; otherwise the URL is assembled from the
        db_* parts for the asyncpg driver.
        """
        if self.database_url:
            return self.database_url
        credentials = self.db_user
        if self.db_password:
            credentials = f"{self.db_user}:{quote_plus(self.db_password)}"
        return (
            f"postgresql+asyncpg://{credentials}@{self.db_host}:{self.db_port}/{self.db_name}"
        )


# Singleton instance, imported throughout the application
settings = Settings()
