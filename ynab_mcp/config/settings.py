"""
Server Settings

Uses pydantic-settings for type-safe configuration from environment
variables prefixed with YNAB_MCP_.

DESIGN DECISION: Operational knobs (timeouts, TTL, logging) are kept
apart from credentials and budget aliases, which live in
ynab_mcp.config.profiles. Tuning the server never touches secrets.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerSettings(BaseSettings):
    """
    Operational settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="YNAB_MCP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    api_base_url: str = Field(
        default="https://api.ynab.com/v1",
        description="Base URL of the YNAB API"
    )
    request_timeout_seconds: float = Field(
        default=30.0,
        ge=1.0,
        le=300.0,
        description="Timeout for a single API request"
    )
    max_retries: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts per request on transport errors, 429 and 5xx"
    )
    cache_ttl_seconds: float = Field(
        default=300.0,
        ge=0.0,
        description="How long a resolution bucket stays fresh"
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level"
    )
    json_logs: bool = Field(
        default=True,
        description="Render logs as JSON (False for console output)"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


@lru_cache()
def get_settings() -> ServerSettings:
    """
    Get server settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return ServerSettings()
