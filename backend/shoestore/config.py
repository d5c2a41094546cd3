"""
Shoe Store Backend — Application Configuration
================================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by main.py, database.py and the route layer.
When:  Loaded once at module import time.
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have working defaults for a local MongoDB on the standard port.
    """

    # ── MongoDB ───────────────────────────────────────────────────────────
    # Format: mongodb://[user:password@]host[:port][/?options]
    mongodb_url: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection URI",
    )
    mongodb_database: str = Field(default="shoeStore")
    mongodb_collection: str = Field(default="shoes")

    # What: Upper bound on pooled connections the client keeps per server
    # Concurrent requests share the pool; the driver queues when it is exhausted
    mongodb_max_pool_size: int = Field(default=100, ge=1, le=1000)

    # What: How long the driver waits to find a usable server before failing a call
    mongodb_server_selection_timeout_ms: int = Field(default=30_000, ge=100)

    # What: Create the unique index on `id` during startup
    mongodb_create_indexes: bool = Field(default=True)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Format: Comma-separated URLs, or "*" for any origin
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=3000, ge=1, le=65535)

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

    # ── Error Mapping ─────────────────────────────────────────────────────
    # What: Status returned when a request body cannot be decoded into a shoe
    # 500 keeps existing clients working; 400 is the client-error status
    decode_error_status: int = Field(default=500)

    @field_validator("decode_error_status")
    @classmethod
    def validate_decode_error_status(cls, v: int) -> int:
        """Only the compatible (500) and corrected (400) statuses are accepted."""
        if v not in (400, 500):
            raise ValueError(f"Invalid decode_error_status '{v}'. Must be 400 or 500")
        return v

    # What: Report database failures on get/delete as "Shoe not found." (404)
    # When False they surface as 500 with the driver message
    backend_errors_as_not_found: bool = Field(default=True)

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # MONGODB_URL and mongodb_url both work
    }


# Singleton instance — the default for create_app()
settings = Settings()
