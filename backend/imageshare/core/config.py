"""Application configuration and settings management."""
from functools import lru_cache
from pathlib import Path
from typing import Annotated, List

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Global application settings loaded from environment variables or .env."""

    model_config = SettingsConfigDict(
        env_file=(Path(__file__).resolve().parent.parent / ".." / ".env"),
        env_file_encoding="utf-8",
        env_prefix="IMAGESHARE_",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = "ImageShare"
    secret_key: str = "change-me"
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite+aiosqlite:///./imageshare.db"

    # Session
    access_token_expire_minutes: int = 60 * 24 * 7
    session_cookie_name: str = "token"
    session_cookie_secure: bool = True
    allowed_origins: Annotated[List[str], NoDecode] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    # CSRF (double-submit cookie)
    csrf_enabled: bool = True
    csrf_cookie_name: str = "XSRF-TOKEN"
    csrf_header_name: str = "XSRF-Token"

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: List[str] | str) -> List[str]:
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    @property
    def session_max_age(self) -> int:
        return self.access_token_expire_minutes * 60


@lru_cache
def get_settings() -> Settings:
    """Return memoized settings instance."""

    return Settings()
