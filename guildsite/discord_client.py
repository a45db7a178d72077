"""
Minimal Discord REST client for the two reads the site needs.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from guildsite.config import sanitize_bot_token
from guildsite.errors import (
    ConfigurationMissing,
    UpstreamError,
    UpstreamForbidden,
    UpstreamUnauthorized,
    UpstreamUnavailable,
)

logger = logging.getLogger(__name__)

DISCORD_API_BASE = "https://discord.com/api/v10"
MESSAGE_LIMIT = 20
REQUEST_TIMEOUT = 10  # seconds


class DiscordClient:
    """
    Single-attempt Discord REST reads authenticated with a bot token.

    Errors are raised immediately; nothing is retried.
    """

    def __init__(
        self,
        token: Optional[str],
        *,
        api_base: str = DISCORD_API_BASE,
        timeout: float = REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.token = sanitize_bot_token(token)
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def configured(self) -> bool:
        return bool(self.token)

    def fetch_owner_member(self, guild_id: str, user_id: str) -> dict:
        return self._get(f"/guilds/{guild_id}/members/{user_id}", expect=dict)

    def fetch_recent_messages(
        self, channel_id: str, limit: int = MESSAGE_LIMIT
    ) -> list[dict]:
        """Return up to ``limit`` messages, newest first as Discord delivers them."""
        return self._get(
            f"/channels/{channel_id}/messages", params={"limit": limit}, expect=list
        )

    def _get(
        self, path: str, params: Optional[dict] = None, expect: type = object
    ) -> Any:
        if not self.configured:
            raise ConfigurationMissing()

        url = f"{self.api_base}{path}"
        try:
            response = self.session.get(
                url,
                headers={"Authorization": f"Bot {self.token}"},
                params=params,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise UpstreamUnavailable(f"Request to {path} failed: {exc}") from exc

        status = response.status_code
        if status >= 400:
            body = response.text
            if status == 401:
                raise UpstreamUnauthorized(
                    "Discord rejected the bot token", status_code=status, body=body
                )
            if status == 403:
                raise UpstreamForbidden(
                    f"Bot lacks access to {path}", status_code=status, body=body
                )
            if status >= 500:
                raise UpstreamUnavailable(
                    f"Discord returned {status}", status_code=status, body=body
                )
            raise UpstreamError(
                f"Discord returned {status}", status_code=status, body=body
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamUnavailable(
                f"Discord returned an undecodable body for {path}",
                status_code=status,
                body=response.text,
            ) from exc
        if not isinstance(payload, expect):
            raise UpstreamUnavailable(
                f"Discord returned an unexpected payload for {path}",
                status_code=status,
                body=response.text,
            )
        return payload
