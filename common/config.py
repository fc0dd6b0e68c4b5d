# common/config.py

from __future__ import annotations

import os
from typing import List, Optional

from pydantic import BaseModel


def _get_env(name: str) -> Optional[str]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def _get_bool(name: str, default: bool) -> bool:
    value = _get_env(name)
    if value is None:
        return default
    return value.lower() in ("1", "true", "yes", "on")


def _get_float(name: str, default: float) -> float:
    value = _get_env(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


class Settings(BaseModel):
    """
    Réglages lus dans l'environnement (Render / .env local).
    Les clés API sont optionnelles : sans clé, chaque route sert ses données simulées.
    """

    groq_api_key: Optional[str] = None
    groq_base_url: str = "https://api.groq.com/openai/v1"
    groq_model: str = "llama3-8b-8192"

    alphavantage_api_key: Optional[str] = None
    alphavantage_base_url: str = "https://www.alphavantage.co/query"

    # Deadline sur chaque appel sortant (secondes)
    http_timeout_seconds: float = 5.0

    dashboard_feed_enabled: bool = True
    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        origins = _get_env("CORS_ORIGINS")
        return cls(
            groq_api_key=_get_env("GROQCLOUD_API_KEY"),
            groq_base_url=_get_env("GROQ_BASE_URL") or cls.model_fields["groq_base_url"].default,
            groq_model=_get_env("GROQ_MODEL") or cls.model_fields["groq_model"].default,
            alphavantage_api_key=_get_env("ALPHAVANTAGE_API_KEY"),
            alphavantage_base_url=(
                _get_env("ALPHAVANTAGE_BASE_URL")
                or cls.model_fields["alphavantage_base_url"].default
            ),
            http_timeout_seconds=_get_float("HTTP_TIMEOUT_SECONDS", 5.0),
            dashboard_feed_enabled=_get_bool("DASHBOARD_FEED_ENABLED", True),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()] if origins else ["*"],
            log_level=(_get_env("LOG_LEVEL") or "INFO").upper(),
        )


def get_settings() -> Settings:
    # Pas de cache : l'environnement est relu à chaque requête
    return Settings.from_env()
