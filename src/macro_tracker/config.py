"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    estimation_api_key: str
    estimation_api_url: str = (
        "https://flow-api.mira.network/v1/flows/flows/cosmic-labs/food-tracker"
    )
    estimation_api_version: str = "1.0.1"
    estimation_timeout_seconds: float = 60.0
    debug_estimation: bool = False
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
