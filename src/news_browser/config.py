"""Configuration helpers for the news browser."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="NEWS_BROWSER_", env_file=".env", env_file_encoding="utf-8"
    )

    news_api_key: str | None = Field(None, alias="NEWS_API_KEY")
    news_api_base_url: str = Field(
        "https://newsapi.org/v2",
        alias="NEWS_API_BASE_URL",
        description="Provider root; endpoint names are appended to it.",
    )
    country: str = Field("us", description="Country filter for the headlines endpoint.")
    page_size: int = Field(12, ge=1, le=100, description="Articles requested per page.")
    default_category: str = Field(
        "general", description="Category loaded when a session starts."
    )
    request_timeout: float = Field(
        15.0, description="Seconds before an upstream request is abandoned."
    )
    scroll_tolerance: int = Field(
        5,
        description="Pixels from the document bottom that still count as reaching it.",
    )
    scroll_debounce_seconds: float = Field(
        1.0,
        description=(
            "Minimum interval between scroll-triggered page loads; 0 disables it."
        ),
    )


def get_settings() -> Settings:
    """Return a settings instance read from the current environment."""
    return Settings()
