"""
DumbPad Backend — Application Configuration
=============================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or a .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by main.py; services receive the values they need explicitly.
When:  Loaded once at module import time; checked again during startup.
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have development defaults. With no DUMBPAD_PIN set the API
    is open; set a 4-10 digit PIN to enable the access gate.
    """

    # ── Access Control ────────────────────────────────────────────────────
    # Empty string disables protection. A value that is not 4-10 digits is
    # treated the same way and reported as a warning at startup.
    pin: str = Field(
        default="",
        validation_alias="DUMBPAD_PIN",
        description="Shared PIN required by gated endpoints",
    )

    # Failed verifications allowed before a client is locked out
    max_attempts: int = Field(default=5, ge=1, le=100)

    # How long a lockout lasts after the last failed attempt
    lockout_minutes: int = Field(default=15, ge=1, le=1440)

    # Seconds between background sweeps of expired lockout records
    lockout_sweep_interval: int = Field(default=60, ge=1, le=3600)

    # Use the first X-Forwarded-For address as the client identifier.
    # Only enable behind a reverse proxy that overwrites the header.
    trust_proxy: bool = Field(default=False)

    # ── Storage ───────────────────────────────────────────────────────────
    # Holds notepads.json plus one <id>.txt file per notepad
    data_dir: str = Field(default="./data")

    # ── Site ──────────────────────────────────────────────────────────────
    site_title: str = Field(default="DumbPad")
    base_url: str = Field(default="", description="Public URL; derived from port if empty")

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000, ge=1, le=65535)

    cors_origins: str = Field(default="*")

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

    @field_validator("pin")
    @classmethod
    def strip_pin(cls, v: str) -> str:
        """Environment files often carry trailing whitespace."""
        return v.strip()

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def lockout_seconds(self) -> float:
        return self.lockout_minutes * 60.0

    @property
    def public_base_url(self) -> str:
        return self.base_url or f"http://localhost:{self.port}"

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "populate_by_name": True,
        "extra": "ignore",
    }


# Singleton instance — imported by main.py for the default application
settings = Settings()
