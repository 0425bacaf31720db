"""
Configuration settings for Retry Audit.

All settings are loaded from environment variables with sensible defaults.
Use .env file for local development. List settings are given as JSON arrays,
e.g. RETRY_RETRYABLE_EXCEPTIONS='["builtins.ConnectionError", "TimeoutError"]'.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Application ===
    APP_NAME: str = "Retry Audit"
    APP_VERSION: str = "0.1.0"
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"

    # === Retry Limit ===
    RETRY_MAX_ATTEMPTS: int = 3

    # === Backoff ===
    RETRY_INITIAL_INTERVAL_MS: int = 100
    RETRY_MULTIPLIER: float = 2.0  # Exponential backoff multiplier
    RETRY_MAX_INTERVAL_MS: int = 10000

    # === Exception Classification ===
    RETRY_RETRYABLE_EXCEPTIONS: list[str] = []  # e.g., ["builtins.ConnectionError"]
    RETRY_NON_RETRYABLE_EXCEPTIONS: list[str] = []  # e.g., ["builtins.ValueError"]
    RETRY_ALLOW_IMPORT: bool = True  # Resolve names outside the registry via import


# Global settings instance
settings = Settings()
