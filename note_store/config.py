"""Store service configuration loaded from environment variables."""

from __future__ import annotations

from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }

    # Storage
    notes_file: Path = Path("notes.json")
    seed_sample_notes: bool = True

    # Server
    host: str = "0.0.0.0"
    port: int = 5000
    frontend_url: str = "http://localhost:3000"

    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Accept only standard logging level names."""
        upper = v.upper()
        if upper not in _LOG_LEVELS:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {sorted(_LOG_LEVELS)}")
        return upper


settings = Settings()
