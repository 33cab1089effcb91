"""
Configuration management for Clinic-Slots.

This module provides centralized configuration using Pydantic Settings
for environment-based configuration management.
"""

import json
import os
from pathlib import Path
from typing import List, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Persistence backend configuration settings."""

    model_config = SettingsConfigDict(env_prefix="DB_")

    backend: str = Field(default="memory", description="Repository backend (memory or mongo)")
    uri: str = Field(default="", description="MongoDB connection URI (mongo backend only)")
    db_name: str = Field(default="clinicslots", description="MongoDB database name")

    @field_validator("backend")
    @classmethod
    def validate_backend(cls, v: str) -> str:
        """Validate repository backend."""
        valid_backends = ["memory", "mongo"]
        if v.lower() not in valid_backends:
            raise ValueError(f"Database backend must be one of: {valid_backends}")
        return v.lower()

    @model_validator(mode="after")
    def validate_mongo_uri(self) -> "DatabaseSettings":
        """MongoDB URI is required (and must look like one) for the mongo backend."""
        if self.backend == "mongo":
            if not self.uri:
                raise ValueError("MongoDB URI is required. Please set DB_URI environment variable.")
            if not self.uri.startswith(("mongodb://", "mongodb+srv://")):
                raise ValueError("MongoDB URI must start with 'mongodb://' or 'mongodb+srv://'")
        return self


class BookingSettings(BaseSettings):
    """Booking core configuration settings."""

    model_config = SettingsConfigDict(env_prefix="BOOKING_")

    default_capacity: int = Field(default=10, description="Capacity of a schedule when none is given")
    lock_timeout_seconds: float = Field(
        default=5.0, description="Maximum wait for a per-schedule lock before answering Busy"
    )
    issuance_max_attempts: int = Field(
        default=8, description="Candidate identifiers tried before reporting an issuance conflict"
    )
    release_retry_enabled: bool = Field(
        default=True, description="Run the background worker that retries failed capacity releases"
    )
    release_retry_interval_seconds: int = Field(
        default=30, description="Seconds between pending-release retry passes"
    )

    @field_validator("default_capacity", "issuance_max_attempts")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Counts must be positive."""
        if v <= 0:
            raise ValueError("Value must be a positive integer")
        return v

    @field_validator("lock_timeout_seconds")
    @classmethod
    def validate_lock_timeout(cls, v: float) -> float:
        """Validate lock timeout."""
        if not 0.0 < v <= 60.0:
            raise ValueError("Lock timeout must be between 0 and 60 seconds")
        return v

    @field_validator("release_retry_interval_seconds")
    @classmethod
    def validate_retry_interval(cls, v: int) -> int:
        """Validate retry interval."""
        if v < 1:
            raise ValueError("Release retry interval must be at least 1 second")
        return v


class CORSSettings(BaseSettings):
    """CORS configuration settings."""

    model_config = SettingsConfigDict(env_prefix="CORS_")

    allowed_origins: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:8080"],
        description="Allowed CORS origins",
    )
    allowed_methods: List[str] = Field(
        default=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        description="Allowed HTTP methods",
    )
    allowed_headers: List[str] = Field(
        default=["*"], description="Allowed HTTP headers"
    )
    allow_credentials: bool = Field(
        default=True, description="Allow credentials in CORS"
    )

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def parse_allowed_origins(cls, v):
        """Parse allowed origins from string or list."""
        if isinstance(v, str):
            # Handle JSON-like string format
            if v.startswith("[") and v.endswith("]"):
                try:
                    return json.loads(v)
                except json.JSONDecodeError:
                    return [v.strip()]
            return [v.strip()]
        return v


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = Field(default="INFO", description="Logging level")
    format: str = Field(default="json", description="Log format (json or text)")

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate logging level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        if v.lower() not in ["json", "text"]:
            raise ValueError("Log format must be 'json' or 'text'")
        return v.lower()


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Application settings
    app_name: str = Field(default="Clinic-Slots", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    app_env: str = Field(default="development", description="Application environment")
    debug: bool = Field(default=False, description="Debug mode")
    port: int = Field(default=8000, description="Application port")
    host: str = Field(default="0.0.0.0", description="Application host")

    # Sub-settings
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    booking: BookingSettings = Field(default_factory=BookingSettings)
    cors: CORSSettings = Field(default_factory=CORSSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @field_validator("app_env")
    @classmethod
    def validate_app_env(cls, v: str) -> str:
        """Validate application environment."""
        valid_envs = ["development", "staging", "production", "testing"]
        if v.lower() not in valid_envs:
            raise ValueError(f"App environment must be one of: {valid_envs}")
        return v.lower()

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate port number."""
        if not 1 <= v <= 65535:
            raise ValueError("Port must be between 1 and 65535")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env == "production"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing mode."""
        return self.app_env == "testing"


# Global settings instance (loaded after attempting to read .env)
_settings: Optional[Settings] = None


def _load_env_file_if_available() -> None:
    """Best-effort load of .env by searching current and parent directories.

    This helps when the working directory isn't the project root and
    pydantic's env_file doesn't get resolved as expected.
    """
    from dotenv import load_dotenv

    cwd = Path(os.getcwd()).resolve()
    for parent in [cwd, *cwd.parents]:
        candidate = parent / ".env"
        if candidate.exists():
            # Do not override already-set environment variables
            load_dotenv(dotenv_path=str(candidate), override=False)
            break


def get_settings() -> Settings:
    """Get application settings instance (lazy-init with .env discovery)."""
    global _settings
    if _settings is None:
        _load_env_file_if_available()
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next get_settings() re-reads the environment."""
    global _settings
    _settings = None
