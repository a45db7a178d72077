"""
Configuration and settings for the guild site backend.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

BOT_TOKEN_PREFIX = "Bot "

DEFAULT_GUILD_ID = "1336782145833668729"
DEFAULT_OWNER_ID = "433262414759198720"
DEFAULT_SCHEDULE_URL = (
    "https://cdn.discordapp.com/attachments/1338254150479118347/"
    "1439859590152978443/3_am_17.png?ex=6921fbfd&is=6920aa7d"
    "&hm=926ad591d323ccc29cd9f7dc2e256de99d8f5dcc292aa3a883f565455844c977&"
)


def sanitize_bot_token(raw: Optional[str]) -> str:
    """
    Return the raw bot token from a value that may carry a "Bot " prefix.

    Operators sometimes paste the full header value into the environment, so
    "Bot abc" and "abc" both normalize to "abc".
    """
    token = (raw or "").strip()
    if token.startswith(BOT_TOKEN_PREFIX):
        token = token[len(BOT_TOKEN_PREFIX):].strip()
    return token


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    api_prefix: str = Field(default="/api")
    service_name: str = Field(default="Urnisa Bot Server")
    port: int = Field(default=3001, alias="PORT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Discord REST
    discord_bot_token: str = Field(default="", alias="DISCORD_BOT_TOKEN")
    discord_api_base: str = Field(
        default="https://discord.com/api/v10", alias="DISCORD_API_BASE"
    )
    discord_timeout_seconds: float = Field(
        default=10.0, alias="DISCORD_TIMEOUT_SECONDS"
    )
    guild_id: str = Field(default=DEFAULT_GUILD_ID, alias="GUILD_ID")
    owner_id: str = Field(default=DEFAULT_OWNER_ID, alias="OWNER_ID")

    # Admin
    admin_password: str = Field(default="admin", alias="ADMIN_PASSWORD")

    # Settings store (any SQLAlchemy URL)
    database_url: Optional[str] = Field(default=None, alias="DATABASE_URL")
    default_schedule_url: str = Field(
        default=DEFAULT_SCHEDULE_URL, alias="DEFAULT_SCHEDULE_URL"
    )

    # Development toggles
    use_in_memory_backends: bool = Field(
        default=False, alias="GUILDSITE_USE_IN_MEMORY_BACKENDS"
    )

    # Comma-separated, e.g. "*" or "https://a.example,https://b.example".
    cors_origins: str = Field(default="*", alias="CORS_ORIGINS")

    @field_validator("discord_bot_token", mode="before")
    @classmethod
    def _strip_bot_prefix(cls, value: Optional[str]) -> str:
        return sanitize_bot_token(value)

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
