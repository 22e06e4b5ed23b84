"""
Chess Journal - Configuration

Every knob comes from the environment (or a local ``.env``). Tests build
``Settings`` directly and hand it to ``create_app``.
"""

from functools import lru_cache
from typing import Literal, Optional

from fastapi import Request
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_ASYNC_POSTGRES = "postgresql+asyncpg://"


class Settings(BaseSettings):
    """Journal settings. Env var names are the upper-cased field names."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # ─── Storage ───
    database_url: str = "postgresql+asyncpg://localhost:5432/chess_journal"

    # ─── Login ───
    site_password: str = ""  # empty: journal is open, no login required
    session_secret: str = "dev-secret-change-me"
    session_max_age_days: int = 30

    # ─── Import ───
    player_name: Optional[str] = None  # matched against White/Black headers

    # ─── Pattern insights ───
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    openai_base_url: str = "https://api.openai.com/v1"
    insight_sample_size: int = 50

    # ─── Service ───
    cors_origins: str = "http://localhost:3000"
    env: Literal["development", "production", "test"] = "development"
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()

    @field_validator("insight_sample_size", "session_max_age_days")
    @classmethod
    def _positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("must be at least 1")
        return value

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def database_url_async(self) -> str:
        """DATABASE_URL with bare postgres schemes pointed at asyncpg; others unchanged."""
        url = self.database_url or ""
        for scheme in ("postgres://", "postgresql://"):
            if url.startswith(scheme):
                return _ASYNC_POSTGRES + url[len(scheme):]
        return url

    @property
    def is_production(self) -> bool:
        return self.env == "production"


@lru_cache()
def get_settings() -> Settings:
    return Settings()


def app_settings(request: Request) -> Settings:
    """FastAPI dependency – the Settings the running app was built with."""
    return request.app.state.settings
