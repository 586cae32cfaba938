"""
Application configuration from environment variables.
Module constants are read once at import; `Settings` bundles them so the app
factory receives configuration explicitly instead of reading globals.
"""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _parse_csv(value: str | None) -> List[str]:
    """Parse a comma-separated env value into a list of trimmed, non-empty strings."""
    if not value or not value.strip():
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def _parse_bool(value: str | None, default: bool = False) -> bool:
    if value is None or not value.strip():
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# Database (SQLite file by default, any async SQLAlchemy URL works)
DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./themes_database.sqlite")
DB_CREATE_TABLES: bool = _parse_bool(os.getenv("DB_CREATE_TABLES"), default=True)
SQL_ECHO: bool = _parse_bool(os.getenv("SQL_ECHO"))

# HTTP API: single static bearer secret shared with the moderation frontend
THEMES_API_SECRET: str = os.getenv("THEMES_API_SECRET", "")
THEMES_UPLOAD_DIR: str = os.getenv("THEMES_UPLOAD_DIR", "cache")
THEMES_PAGE_LIMIT: int = int(os.getenv("THEMES_PAGE_LIMIT", "50"))
THEMES_MAX_PAGE_LIMIT: int = int(os.getenv("THEMES_MAX_PAGE_LIMIT", "200"))
CORS_ORIGINS: List[str] = _parse_csv(os.getenv("CORS_ORIGINS", "*"))

# Discord (optional): channel where theme submissions are announced
DISCORD_BOT_TOKEN: str = os.getenv("DISCORD_BOT_TOKEN", "")
DISCORD_CHANNEL_ID: str = os.getenv("DISCORD_CHANNEL_ID", "")
DISCORD_API_BASE: str = os.getenv("DISCORD_API_BASE", "https://discord.com/api/v10")


@dataclass(frozen=True)
class Settings:
    """Runtime configuration handed to `create_app`."""

    database_url: str = DATABASE_URL
    api_secret: str = THEMES_API_SECRET
    upload_dir: Path = Path(THEMES_UPLOAD_DIR)
    page_limit: int = THEMES_PAGE_LIMIT
    max_page_limit: int = THEMES_MAX_PAGE_LIMIT
    create_tables: bool = DB_CREATE_TABLES
    sql_echo: bool = SQL_ECHO
    cors_origins: List[str] = field(default_factory=lambda: list(CORS_ORIGINS))
    discord_bot_token: str = DISCORD_BOT_TOKEN
    discord_channel_id: str = DISCORD_CHANNEL_ID
    discord_api_base: str = DISCORD_API_BASE

    @classmethod
    def from_env(cls) -> "Settings":
        return cls()

    @property
    def discord_enabled(self) -> bool:
        return bool(self.discord_bot_token and self.discord_channel_id)
