"""Application configuration loaded from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "temple-crowd"
    debug: bool = False
    log_level: str = "INFO"

    # Wait-time estimation
    default_lanes: int = 2

    # Dashboard push / temple search
    dashboard_interval_seconds: float = 10.0
    temple_search_limit: int = 8

    # Storage backend: "memory" or "postgrest"
    store_backend: str = "memory"
    postgrest_url: str = ""
    postgrest_api_key: str = ""
    postgrest_timeout_seconds: float = 5.0

    # Assistant (Gemini)
    assistant_name: str = "ॐ ChatBot"
    gemini_model: str = "gemini-2.0-flash"
    gemini_temperature: float = 0.2
    gemini_max_output_tokens: int = 1024

    model_config = {"env_prefix": "TEMPLE_"}


settings = Settings()
