from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.utils.timezone_utils import validate_timezone


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file."""

    # Telegram front-end (not needed by the store itself)
    BOT_TOKEN: str | None = None
    OWNER_CHAT_ID: int | None = None

    # Persistence
    STORAGE_BACKEND: Literal["json", "sql"] = "json"
    DATA_FILE: Path = Path("data") / "habits.json"
    DATABASE_URL: str = "sqlite:///data/habits.db"
    STORAGE_KEY: str = Field(default="habits", min_length=1)

    # Others
    DEFAULT_TIMEZONE: str = "UTC"
    LOG_LEVEL: str = "INFO"

    @field_validator("DEFAULT_TIMEZONE")
    @classmethod
    def _known_timezone(cls, v: str) -> str:
        if not validate_timezone(v):
            raise ValueError(f"unknown timezone {v!r}, use an IANA name or UTC+3 / UTC-5:30")
        return v

    model_config = SettingsConfigDict(
        env_file=Path(__file__).parent.parent / ".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


settings = Settings()
