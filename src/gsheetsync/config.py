"""Library configuration using pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from GSHEETSYNC_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="GSHEETSYNC_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # OAuth2 bearer token (used by the CLI when --token is not given)
    access_token: str = ""

    # API endpoints
    sheets_api_base: str = "https://sheets.googleapis.com/v4/spreadsheets"
    drive_api_base: str = "https://www.googleapis.com/drive/v3"

    # Request timeout in seconds
    timeout: int = 60

    log_level: str = "WARNING"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
