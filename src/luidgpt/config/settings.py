"""
Configuration settings for LuidGPT.

This module provides configuration management using Pydantic settings
with support for environment variables and .env files.
"""

from typing import Optional, Dict, Any
from pathlib import Path
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LuidSettings(BaseSettings):
    """
    Main configuration settings for LuidGPT.

    Settings are loaded from multiple sources in order of preference:
    1. Environment variables (prefixed with LUIDGPT_)
    2. Configuration files (.env)
    3. Default values
    """

    model_config = SettingsConfigDict(
        env_prefix="LUIDGPT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # API Configuration
    api_base_url: str = Field(
        default="http://localhost:3001/api",
        description="Base URL of the luidgpt-backend API"
    )

    luidhub_base_url: str = Field(
        default="http://localhost:4000",
        description="Base URL of the Luidhub credit service"
    )

    request_timeout: float = Field(
        default=30.0,
        description="Per-read request timeout in seconds",
        gt=0
    )

    resource_timeout: float = Field(
        default=60.0,
        description="Overall request timeout in seconds",
        gt=0
    )

    max_retries: int = Field(
        default=0,
        description="Extra attempts for GET requests that fail transiently",
        ge=0,
        le=10
    )

    # Credits and paging
    low_credits_threshold: int = Field(
        default=10,
        description="Balance below which credits are reported as low",
        ge=0
    )

    default_page_size: int = Field(
        default=20,
        description="Default page size for paginated listings",
        gt=0,
        le=100
    )

    # Generation polling
    poll_interval: float = Field(
        default=2.0,
        description="Seconds between generation status checks",
        gt=0
    )

    poll_timeout: float = Field(
        default=300.0,
        description="Seconds to wait for a generation to finish",
        gt=0
    )

    # Credential storage
    config_dir: Path = Field(
        default_factory=lambda: Path.home() / ".config" / "luidgpt",
        description="Configuration directory path"
    )

    keyring_service: str = Field(
        default="com.luidgpt",
        description="Service name used in the system keyring"
    )

    use_keyring: bool = Field(
        default=True,
        description="Store credentials in the system keyring when available"
    )

    # Logging Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )

    debug: bool = Field(
        default=False,
        description="Log at DEBUG level whatever log_level says"
    )

    @field_validator("api_base_url", "luidhub_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Validate and normalize a base URL."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Invalid base URL '{v}'. Must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level '{v}'. Valid levels: {', '.join(sorted(valid_levels))}")
        return v_upper

    @model_validator(mode="after")
    def validate_timeouts(self) -> "LuidSettings":
        """The overall timeout can never be shorter than a single read."""
        if self.resource_timeout < self.request_timeout:
            raise ValueError("resource_timeout must be greater than or equal to request_timeout")
        return self

    def ensure_directories(self) -> None:
        """Ensure the configuration directory exists."""
        self.config_dir.mkdir(parents=True, exist_ok=True)

    @property
    def credentials_file_path(self) -> Path:
        """Path to the fallback credentials file."""
        return self.config_dir / "credentials.json"

    def api_url(self, endpoint: str) -> str:
        """Get the full API URL for an endpoint."""
        clean_endpoint = endpoint if endpoint.startswith("/") else f"/{endpoint}"
        return f"{self.api_base_url}{clean_endpoint}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to a printable dictionary."""
        data = self.model_dump()
        data["config_dir"] = str(self.config_dir)
        return data


def get_settings(**overrides: Any) -> LuidSettings:
    """Get the current LuidGPT settings."""
    return LuidSettings(**overrides)
