# src/fuelify/config/settings.py
"""
Settings - Pydantic-based Configuration Management

Provides centralized configuration management using Pydantic Settings.
Values come from environment variables or a local .env file.

Files that USE this module:
- fuelify.app (loads settings for logging, store and server configuration)
- fuelify.adapters.persistence (build_store picks the backing from settings)
- fuelify.application.station_directory (optional stations file)

Files that this module USES:
- fuelify.shared.validators (validation functions for settings)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

from pathlib import Path  # Object-oriented filesystem paths
from typing import Optional  # Type hints for optional values

from pydantic import Field, field_validator  # Data validation and field configuration
from pydantic_settings import BaseSettings, SettingsConfigDict  # Settings management with Pydantic

from fuelify.shared.validators import validate_timezone  # Validate IANA zone names

STORE_BACKENDS = ("memory", "file", "sqlite")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # --- Ledger store ---
    store_backend: str = Field(default="sqlite", alias="STORE_BACKEND")
    ledger_file: Path = Field(default=Path("./data/price_ledger.json"), alias="LEDGER_FILE")
    ledger_db: Path = Field(default=Path("./data/price_ledger.db"), alias="LEDGER_DB")
    store_timeout_seconds: float = Field(default=5.0, alias="STORE_TIMEOUT_SECONDS", gt=0, le=60)

    # --- Ledger policy ---
    # Calendar day used to bucket writes; UTC unless a deployment opts into station-local days
    ledger_timezone: str = Field(default="UTC", alias="LEDGER_TIMEZONE")
    history_limit: int = Field(default=120, alias="HISTORY_LIMIT", ge=1, le=5000)
    series_limit: int = Field(default=30, alias="SERIES_LIMIT", ge=1, le=366)

    # --- Station directory ---
    stations_file: Optional[Path] = Field(default=None, alias="STATIONS_FILE")

    # --- HTTP server ---
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=5000, alias="PORT", ge=1, le=65535)

    # --- Logging ---
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_file: Optional[str] = Field(default=None, alias="LOG_FILE")
    log_dir: Optional[str] = Field(default=None, alias="LOG_DIR")
    log_stdout: bool = Field(default=True, alias="FUELIFY_LOG_STDOUT")
    log_max_bytes: int = Field(default=10 * 1024 * 1024, alias="LOG_MAX_BYTES")  # 10MB
    log_backup_count: int = Field(default=5, alias="LOG_BACKUP_COUNT")

    @property
    def store_path(self) -> Optional[Path]:
        """Path of the active store's backing file, None for the memory store."""
        if self.store_backend == "file":
            return self.ledger_file
        if self.store_backend == "sqlite":
            return self.ledger_db
        return None

    @field_validator("store_backend")
    @classmethod
    def validate_store_backend(cls, v: str) -> str:
        """Validate store backend name."""
        v = v.strip().lower()
        if v not in STORE_BACKENDS:
            raise ValueError(f"STORE_BACKEND must be one of: {', '.join(STORE_BACKENDS)}")
        return v

    @field_validator("ledger_timezone")
    @classmethod
    def validate_ledger_timezone(cls, v: str) -> str:
        """Validate ledger time zone."""
        if not validate_timezone(v):
            raise ValueError(f"Unknown LEDGER_TIMEZONE: {v}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level name."""
        v = v.strip().upper()
        if v not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError("LOG_LEVEL must be DEBUG, INFO, WARNING, ERROR or CRITICAL")
        return v


# Global settings instance
settings = Settings()
