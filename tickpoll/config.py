"""Configuration loading for tickpoll.

This module provides centralized configuration management:
- Load settings from environment variables and .env files
- Validate configuration using pydantic
- Turn settings into poller options
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from tickpoll.core.options import Option, set_interval
from tickpoll.core.poller import DEFAULT_INTERVAL_MS

SinkBackend = Literal["stdout", "jsonl", "webhook"]


class Settings(BaseSettings):
    """Application configuration loaded from environment.

    Uses pydantic-settings for environment variable handling with
    .env file support via python-dotenv.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Poll cycle configuration
    poll_interval_ms: int = Field(
        default=DEFAULT_INTERVAL_MS,
        description="Interval between poll cycles in milliseconds",
    )

    # Source configuration
    source_url: str = Field(
        default="",
        description="HTTP endpoint returning the JSON payload to poll",
    )
    source_api_key: str = Field(
        default="",
        description="Bearer token sent to the source endpoint",
    )
    source_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout for a single source request in seconds",
    )

    # Sink configuration
    sink_backends: list[SinkBackend] = Field(
        default_factory=lambda: ["stdout"],
        description="Sinks receiving each payload, in push order",
    )
    sink_jsonl_path: str = Field(
        default="./data/polls.jsonl",
        description="File the jsonl sink appends payloads to",
    )
    sink_webhook_url: str = Field(
        default="",
        description="URL the webhook sink posts payloads to",
    )
    sink_webhook_api_key: str = Field(
        default="",
        description="Bearer token sent to the webhook endpoint",
    )

    # Shutdown
    shutdown_grace_seconds: float = Field(
        default=5.0,
        description="Seconds to wait for in-flight cycles after stopping",
    )

    # Logging configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Log level",
    )
    log_format: Literal["json", "text"] = Field(
        default="text",
        description="Log format",
    )

    # Run mode
    run_mode: Literal["daemon", "once"] = Field(
        default="daemon",
        description="Run mode",
    )

    # Development
    debug: bool = Field(
        default=False,
        description="Enable debug mode with verbose output",
    )

    @field_validator("poll_interval_ms")
    @classmethod
    def validate_poll_interval(cls, v: int) -> int:
        """Ensure poll interval is positive."""
        if v <= 0:
            raise ValueError("poll_interval_ms must be positive")
        return v

    @field_validator("source_timeout_seconds")
    @classmethod
    def validate_source_timeout(cls, v: float) -> float:
        """Ensure source timeout is positive."""
        if v <= 0:
            raise ValueError("source_timeout_seconds must be positive")
        return v

    @field_validator("shutdown_grace_seconds")
    @classmethod
    def validate_shutdown_grace(cls, v: float) -> float:
        """Ensure shutdown grace period is non-negative."""
        if v < 0:
            raise ValueError("shutdown_grace_seconds must be non-negative")
        return v

    @field_validator("sink_backends")
    @classmethod
    def validate_sink_backends(cls, v: list[str]) -> list[str]:
        """Reject duplicate sinks."""
        if len(set(v)) != len(v):
            raise ValueError("sink_backends must not contain duplicates")
        return v


def load_settings(env_file: str | None = None) -> Settings:
    """Load application settings from environment.

    Args:
        env_file: Optional path to .env file. If not provided,
                 uses the default .env in the current directory.

    Returns:
        Validated Settings instance.

    Raises:
        ValidationError: If settings validation fails.
    """
    if env_file:
        return Settings(_env_file=env_file)  # type: ignore[call-arg]
    return Settings()


def options_from_settings(settings: Settings) -> list[Option]:
    """Translate settings into the poller options they imply."""
    return [set_interval(settings.poll_interval_ms)]


__all__ = ["Settings", "load_settings", "options_from_settings"]
