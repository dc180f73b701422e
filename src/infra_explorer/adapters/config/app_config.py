"""12-factor configuration adapter using environment variables."""

import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_URL = "https://www.trassenfinder.de/api/web/infrastrukturen"


class AppConfig(BaseSettings):
    """Application configuration following 12-factor principles.

    Every setting can be provided as ``INFRA_EXPLORER_<NAME>`` in the
    environment or a ``.env`` file; command line flags take precedence.
    """

    model_config = SettingsConfigDict(
        env_prefix="INFRA_EXPLORER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Infrastructure API configuration
    api_url: str = Field(
        default=DEFAULT_API_URL,
        description="Base URL of the infrastructure API",
    )
    stations_path: str = Field(
        default="betriebsstellen",
        description="Path below the base URL returning the station records",
    )
    segments_path: str = Field(
        default="streckensegmente",
        description="Path below the base URL returning the segment records",
    )
    api_timeout_seconds: float = Field(
        default=10.0, description="Timeout for a single API request in seconds"
    )
    log_requests: bool = Field(
        default=False, description="Log every outgoing API request at INFO level"
    )

    # Event loop configuration
    poll_interval_seconds: float = Field(
        default=0.25,
        description="Upper bound on how long the event loop waits for input or fetch results",
    )

    # Logging configuration
    log_level: str = Field(default="WARNING", description="Log level name, e.g. 'INFO'")
    log_file: str | None = Field(
        default=None,
        description="Write log records to this file instead of stderr",
    )

    @field_validator("api_url")
    @classmethod
    def validate_api_url(cls, v: str) -> str:
        """Validate the API URL uses http(s) and drop trailing slashes."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("api_url must start with 'http://' or 'https://'")
        return v.rstrip("/")

    @field_validator("stations_path", "segments_path")
    @classmethod
    def validate_path(cls, v: str) -> str:
        """Validate resource paths are non-empty and strip surrounding slashes."""
        path = v.strip("/")
        if not path:
            raise ValueError("resource paths must not be empty")
        return path

    @field_validator("api_timeout_seconds", "poll_interval_seconds")
    @classmethod
    def validate_positive(cls, v: float) -> float:
        """Validate durations are positive."""
        if v <= 0:
            raise ValueError("durations must be greater than zero")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate the log level is one of the standard level names."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError("log_level must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL")
        return level

    @property
    def numeric_log_level(self) -> int:
        return logging.getLevelName(self.log_level)

    @classmethod
    def for_testing(cls, **overrides: object) -> "AppConfig":
        """Create a configuration that does not read any ``.env`` file."""
        return cls(_env_file=None, **overrides)  # type: ignore[call-arg]
