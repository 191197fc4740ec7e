"""Application configuration."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    # Application
    PROJECT_NAME: str = "newsgate"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    LOG_LEVEL: str = "INFO"

    # Listener
    LISTEN_HOST: str = ""
    LISTEN_PORT: int = Field(default=7300, ge=1, le=65535)

    # Feeds
    FEED_URL_FILE: str = "rssfeed.url"
    HTTP_TIMEOUT_SEC: float = Field(default=10.0, gt=0)
    MAX_HEADLINES: int = Field(default=18, ge=1)  # fits 24x80 with header/footer
    BODY_SNIPPET_BYTES: int = Field(default=1024, ge=0)
    FETCHER_USER_AGENT: str = "Mozilla/5.0 (compatible; newsgate/0.1)"


settings = Settings()
