"""
Configuration management for the orderflow service.

Loads and validates environment variables for the application.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables or a local .env file.
    """

    # Service Configuration
    APP_NAME: str = "Orderflow Service"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Database Configuration
    DATABASE_URL: str = "sqlite:///./orderflow.db"
    DATABASE_ECHO: bool = False
    QUERY_LOG_THRESHOLD_MS: int = 100

    # Pagination
    DEFAULT_LINES_PER_PAGE: int = 10

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


# Global settings instance
settings = Settings()
