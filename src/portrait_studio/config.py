"""Application configuration."""

import os
from pathlib import Path

from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from portrait_studio.domain.errors import ConfigurationMissingError

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    telegram_bot_token: str
    admin_id: str
    wavespeed_api_key: str | None = None
    wavespeed_base_url: str = "https://api.wavespeed.ai/api/v3"
    daily_limit: int = 27
    image_source_provider: str = "apify"
    apify_token: str | None = None
    apify_actor: str = "apify/instagram-scraper"
    base_url: str = ""
    data_dir: Path = Path("data")
    generation_timeout_seconds: float = 120.0
    host: str = "0.0.0.0"  # noqa: S104
    port: int = 3000
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def webhook_url(self) -> str | None:
        """Return the public webhook URL, if a base URL is configured."""
        if not self.base_url:
            return None
        return f"{self.base_url.rstrip('/')}/telegram/webhook"


def load_settings() -> Settings:
    """Load settings, failing loudly when required values are absent."""
    try:
        return Settings()
    except ValidationError as exc:
        missing = [
            ".".join(str(part) for part in error["loc"])
            for error in exc.errors()
            if error["type"] == "missing"
        ]
        if missing:
            raise ConfigurationMissingError(
                f"Missing required configuration: {', '.join(missing).upper()}"
            ) from exc
        raise
