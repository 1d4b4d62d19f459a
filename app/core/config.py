"""Environment-driven configuration objects for the bot."""
from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from app.core.exceptions import ConfigurationException
from app.domain.value_objects import Language


def _str_to_bool(value: str | None) -> bool:
    if value is None:
        return False
    return value.strip().lower() in {"true", "1", "yes", "y"}


@dataclass(slots=True)
class ApiConfig:
    base_url: str
    timeout: float


@dataclass(slots=True)
class Settings:
    bot_token: str
    api: ApiConfig
    redis_url: str | None
    default_language: str
    debug: bool
    sentry_dsn: str | None = None
    environment: str = "production"


def load_settings() -> Settings:
    """Load environment variables once and expose typed settings."""
    load_dotenv()

    token = os.getenv("TELEGRAM_BOT_TOKEN")
    if not token:
        raise ConfigurationException("TELEGRAM_BOT_TOKEN environment variable is not set")

    base_url = os.getenv("KANTIN_API_URL", "http://localhost:8000").rstrip("/")
    try:
        timeout = float(os.getenv("API_TIMEOUT", "15"))
    except ValueError as e:
        raise ConfigurationException(f"API_TIMEOUT must be a number: {e}") from e

    language = os.getenv("DEFAULT_LANGUAGE", Language.INDONESIAN.value).strip().lower()
    if language not in {choice.value for choice in Language}:
        language = Language.INDONESIAN.value

    return Settings(
        bot_token=token,
        api=ApiConfig(base_url=base_url, timeout=timeout),
        redis_url=os.getenv("REDIS_URL") or None,
        default_language=language,
        debug=_str_to_bool(os.getenv("DEBUG")),
        sentry_dsn=os.getenv("SENTRY_DSN") or None,
        environment=os.getenv("ENVIRONMENT", "production"),
    )
