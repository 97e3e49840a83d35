"""
Configuration Settings

This module defines application configuration using Pydantic Settings.
All configuration is loaded from environment variables or .env file.

Design Decisions:
- Uses pydantic-settings for type-safe configuration
- Supports multiple environments (production, staging, dev)
- Defaults to SQLite (file-based) storage; the in-memory store can be
  selected with STORE_BACKEND=memory
"""

from __future__ import annotations

from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = ["EnvSettingsOptions", "StoreBackend", "Settings", "settings"]


class EnvSettingsOptions(Enum):
    """Environment options for deployment."""
    production = "production"
    staging = "staging"
    development = "dev"


class StoreBackend(Enum):
    """Available URL store implementations."""
    sql = "sql"
    memory = "memory"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables or .env file.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Project Configuration
    ENV_SETTING: EnvSettingsOptions = Field(
        default=EnvSettingsOptions.development,
        description="Environment setting (production, staging, dev)"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Root log level"
    )
    HOST: str = Field(default="127.0.0.1", description="Interface uvicorn binds to")
    PORT: int = Field(default=8000, description="Port uvicorn listens on")

    # Storage Configuration
    STORE_BACKEND: StoreBackend = Field(
        default=StoreBackend.sql,
        description="URL store implementation (sql or memory)"
    )
    # For SQLite: sqlite+aiosqlite:///./shortener.db (default)
    DATABASE_URL: str = Field(
        default="sqlite+aiosqlite:///./shortener.db",
        description="Database connection string used by the sql store"
    )

    # Token Configuration
    SHORT_TOKEN_LENGTH: int = Field(
        default=6,
        gt=0,
        description="Length of tokens produced by /shorten"
    )
    MIN_LONG_TOKEN_LENGTH: int = Field(
        default=42,
        gt=0,
        description="Minimum length of tokens produced by /lengthen"
    )
    LONG_TOKEN_SCALE_FACTOR: int = Field(
        default=2,
        gt=0,
        description="Long tokens are this many times the length of the destination URL"
    )
    MAX_CREATE_ATTEMPTS: int = Field(
        default=3,
        gt=0,
        description="Attempts at storing a link before a token collision becomes an error"
    )

    # Request Handling
    MAX_REQUEST_BODY_SIZE: int = Field(
        default=1_048_576,
        description="Maximum accepted JSON request body size in bytes"
    )
    REQUEST_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        description="Deadline applied to every service call made by an endpoint"
    )
    QR_CODE_API_URL: str = Field(
        default="https://api.qrserver.com/v1/create-qr-code/",
        description="QR code rendering service linked from API responses"
    )
    CORS_ALLOW_ORIGINS: list[str] = Field(
        default=["*"],
        description="Origins allowed by the CORS middleware"
    )

    # Rate Limiting (format: "count/period")
    RATE_LIMIT_ENABLED: bool = Field(default=True)
    RATE_LIMIT_SHORTEN: str = Field(default="10/minute")
    RATE_LIMIT_REDIRECT: str = Field(default="100/minute")
    RATE_LIMIT_VISITS: str = Field(default="30/minute")

    @property
    def is_production(self) -> bool:
        return self.ENV_SETTING is EnvSettingsOptions.production


settings = Settings()
