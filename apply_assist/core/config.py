"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Gemini (OpenAI-compatible endpoint)
    gemini_api_key: str = ""
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta/openai/"
    gemini_model: str = "gemini-2.0-flash"
    llm_timeout_seconds: float = 20.0
    llm_temperature: float = 0.2

    # MongoDB (scraped jobs used for matching)
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "naukri_apply_assist"
    jobs_collection: str = "jobs"

    # Interaction logs (one JSON file per chatbot request)
    interaction_log_dir: str = "logs"

    # App
    app_name: str = "Apply Assist Backend"
    log_level: str = "INFO"
    cors_allow_origins: str = "*"  # comma-separated
    debug: bool = False

    @property
    def cors_origins(self) -> List[str]:
        """Parsed CORS origins; empty config means allow all."""
        origins = [o.strip() for o in self.cors_allow_origins.split(",") if o.strip()]
        return origins or ["*"]

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
