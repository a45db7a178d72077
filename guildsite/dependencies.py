"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from fastapi import Depends, Header, Request

from guildsite.auth import AdminGate
from guildsite.config import get_settings
from guildsite.discord_client import DiscordClient
from guildsite.errors import Unauthorized, ValidationFailure
from guildsite.store import InMemorySettingsStore, SettingsStore, SqlSettingsStore

logger = logging.getLogger(__name__)

_settings_store: SettingsStore | None = None
_discord_client: DiscordClient | None = None
_admin_gate: AdminGate | None = None


def get_settings_store() -> SettingsStore:
    """
    Return a singleton settings store so in-memory values survive across requests.
    """
    global _settings_store
    if _settings_store:
        return _settings_store

    settings = get_settings()
    if settings.use_in_memory_backends or not settings.database_url:
        if not settings.use_in_memory_backends:
            logger.warning("DATABASE_URL not set; settings will not persist!")
        _settings_store = InMemorySettingsStore()
    else:
        _settings_store = SqlSettingsStore(settings.database_url)
    return _settings_store


def get_discord_client() -> DiscordClient:
    global _discord_client
    if _discord_client:
        return _discord_client

    settings = get_settings()
    _discord_client = DiscordClient(
        settings.discord_bot_token,
        api_base=settings.discord_api_base,
        timeout=settings.discord_timeout_seconds,
    )
    return _discord_client


def get_admin_gate() -> AdminGate:
    global _admin_gate
    if _admin_gate:
        return _admin_gate
    _admin_gate = AdminGate(get_settings().admin_password)
    return _admin_gate


def require_admin(
    authorization: Optional[str] = Header(default=None),
    gate: AdminGate = Depends(get_admin_gate),
) -> None:
    """Reject the request unless the Authorization header holds the admin secret."""
    if not gate.authorize(authorization):
        raise Unauthorized()


async def read_json_body(request: Request) -> Any:
    """
    Decode the request body as JSON, or None when it is empty.

    Admin routes take this instead of a body model so that require_admin,
    listed in the route's dependencies, runs before any body is decoded.
    """
    raw = await request.body()
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError as exc:
        raise ValidationFailure("Invalid request body") from exc
