"""Configuration management using pydantic-settings."""
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Parameter cache settings loaded from SSM_CACHE_* environment variables."""

    # Cache behaviour
    # Zero or negative means entries cached with the default never expire
    default_ttl_seconds: float = 300.0
    # Background sweep of expired entries; unset leaves reclamation to reads
    cleanup_interval_seconds: Optional[float] = None

    # AWS connection
    aws_region: Optional[str] = None
    aws_profile: Optional[str] = None
    endpoint_url: Optional[str] = None  # e.g. LocalStack

    # Throttling back-off in the SSM source
    max_retry_attempts: int = 3

    # Logging
    log_level: str = "INFO"

    class Config:
        env_prefix = "SSM_CACHE_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @field_validator("max_retry_attempts")
    @classmethod
    def _at_least_one_attempt(cls, value: int) -> int:
        if value < 1:
            raise ValueError("max_retry_attempts must be at least 1")
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()


def get_settings() -> Settings:
    """Load settings from the environment and .env file."""
    return Settings()
