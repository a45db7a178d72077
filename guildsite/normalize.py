"""
Reshape Discord member and message payloads into what the frontend renders.

Everything here is a pure function over the decoded JSON: inputs are never
mutated, only projected into new dicts.
"""

from __future__ import annotations

import re
from typing import Iterable, Optional

CDN_BASE = "https://cdn.discordapp.com"
AVATAR_SIZE = 256
OWNER_STATUS = "offline"

_LEADING_INT = re.compile(r"^\s*(\d+)")
_SNOWFLAKE = re.compile(r"^[0-9]+\Z")


def _parse_leading_int(value: Optional[str]) -> int:
    # Discriminators like "0042" or "12abc" parse to their leading digits.
    match = _LEADING_INT.match(value or "")
    return int(match.group(1)) if match else 0


def default_avatar_index(
    user_id: Optional[str], discriminator: Optional[str]
) -> int:
    """
    Index of the embed default avatar for a user with no avatar of their own.

    Users migrated to unique usernames have discriminator "0" and are bucketed
    by snowflake (6 avatars); legacy users are bucketed by discriminator
    (5 avatars). A missing or malformed ID falls back to index 0.
    """
    if discriminator == "0":
        if not _SNOWFLAKE.match(str(user_id or "")):
            return 0
        return (int(user_id) >> 22) % 6
    return _parse_leading_int(discriminator) % 5


def resolve_avatar_url(guild_id: str, member: dict) -> str:
    user = member.get("user") or {}
    user_id = user.get("id")

    if member.get("avatar"):
        return (
            f"{CDN_BASE}/guilds/{guild_id}/users/{user_id}/avatars/"
            f"{member['avatar']}.png?size={AVATAR_SIZE}"
        )
    if user.get("avatar"):
        return f"{CDN_BASE}/avatars/{user_id}/{user['avatar']}.png?size={AVATAR_SIZE}"

    index = default_avatar_index(user_id, user.get("discriminator"))
    return f"{CDN_BASE}/embed/avatars/{index}.png"


def normalize_owner(guild_id: str, member: dict) -> dict:
    user = member.get("user") or {}
    return {
        "id": user.get("id"),
        "username": user.get("username"),
        "global_name": user.get("global_name"),
        "discriminator": user.get("discriminator"),
        "nick": member.get("nick"),
        "avatar_url": resolve_avatar_url(guild_id, member),
        # Presence needs a gateway connection, so it is never reported.
        "status": OWNER_STATUS,
    }


def _normalize_author(author: Optional[dict]) -> dict:
    author = author or {}
    return {
        "id": author.get("id"),
        "username": author.get("username"),
        "global_name": author.get("global_name"),
        "avatar": author.get("avatar"),
        "discriminator": author.get("discriminator"),
    }


def _normalize_member(member: Optional[dict]) -> Optional[dict]:
    if not member:
        return None
    return {"nick": member.get("nick"), "avatar": member.get("avatar")}


def _normalize_reaction(reaction: dict) -> dict:
    return {
        "emoji": reaction.get("emoji"),
        "count": reaction.get("count"),
        "me": reaction.get("me"),
    }


def _normalize_reference(referenced: Optional[dict]) -> Optional[dict]:
    # One level only: the replied-to message's own reply is dropped.
    if not referenced:
        return None
    return {
        "id": referenced.get("id"),
        "author": _normalize_author(referenced.get("author")),
        "content": referenced.get("content"),
        "mentions": list(referenced.get("mentions") or []),
    }


def normalize_message(message: dict) -> dict:
    return {
        "id": message.get("id"),
        "content": message.get("content"),
        "timestamp": message.get("timestamp"),
        "author": _normalize_author(message.get("author")),
        "member": _normalize_member(message.get("member")),
        "attachments": list(message.get("attachments") or []),
        "sticker_items": list(message.get("sticker_items") or []),
        "mentions": list(message.get("mentions") or []),
        "reactions": [
            _normalize_reaction(r) for r in message.get("reactions") or []
        ],
        "referenced_message": _normalize_reference(message.get("referenced_message")),
    }


def normalize_messages(messages: Iterable[dict]) -> list[dict]:
    """Normalize newest-first upstream messages into oldest-first display order."""
    normalized = [normalize_message(message) for message in messages]
    normalized.reverse()
    return normalized
