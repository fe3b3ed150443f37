"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    api_token: str
    vision_api_key: str
    vision_base_url: str = "https://ai.gateway.lovable.dev/v1"
    vision_model: str = "google/gemini-2.5-flash"
    vision_temperature: float = 0.3
    vision_timeout_seconds: float = 60.0
    default_timezone: str = "UTC"
    history_days: int = 30
    history_page_days: int = 7
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
