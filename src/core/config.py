"""
Core configuration module for the API Tool Gateway.

This module provides centralized configuration management using Pydantic
Settings. All configuration is loaded from environment variables with the
TOOL_GATEWAY_ prefix.

Pattern: Pydantic BaseSettings, cached singleton accessor
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All fields use the TOOL_GATEWAY_ prefix for environment variables.
    Example: TOOL_GATEWAY_ADAPTER_TIMEOUT_SECONDS=10
    """

    # =========================================================================
    # Service Configuration
    # =========================================================================
    service_name: str = Field(
        default="api-tool-gateway",
        description="Name of the service for logging and identification",
    )
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Deployment environment",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level for structured logging",
    )
    cors_origins: str = Field(
        default="",
        description="Comma-separated list of allowed CORS origins",
    )

    # =========================================================================
    # Upstream API Configuration
    # =========================================================================
    api_base_url: str = Field(
        default="http://localhost:3030",
        description="Base URL used when a descriptor or form submission has none",
    )
    adapter_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        le=300.0,
        description="Timeout in seconds for a single upstream call",
    )
    dispatch_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        le=600.0,
        description="Deadline in seconds for a whole tool execution (retries included)",
    )
    http_max_connections: int = Field(
        default=100,
        ge=1,
        description="Maximum number of pooled upstream connections",
    )
    http_max_keepalive: int = Field(
        default=20,
        ge=0,
        description="Maximum number of keepalive upstream connections",
    )
    upstream_max_retries: int = Field(
        default=3,
        ge=0,
        le=10,
        description="Retries for idempotent upstream calls on transient failures",
    )
    upstream_retry_backoff_seconds: float = Field(
        default=1.0,
        ge=0,
        description="Base delay for exponential retry backoff",
    )

    # =========================================================================
    # Descriptor Store
    # =========================================================================
    descriptors_file: Optional[str] = Field(
        default=None,
        description="JSON file with API descriptors to register at startup",
    )

    model_config = {
        "env_prefix": "TOOL_GATEWAY_",
        "case_sensitive": False,
        "extra": "ignore",
    }

    # =========================================================================
    # Field Validators
    # =========================================================================
    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize the log level."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {v}")
        return level

    @field_validator("api_base_url")
    @classmethod
    def validate_api_base_url(cls, v: str) -> str:
        """Validate API base URL format."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("API base URL must start with http:// or https://")
        return v.rstrip("/")

    def get_cors_origins(self) -> list[str]:
        """
        Get CORS allowed origins.

        Development allows all origins; other environments use the
        configured comma-separated list (empty blocks cross-origin requests).
        """
        if self.environment == "development":
            return ["*"]
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Returns:
        Settings: The application settings instance.
    """
    return Settings()
