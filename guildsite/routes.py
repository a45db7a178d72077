"""
HTTP routes for the guild site API.
"""

from __future__ import annotations

import logging
import re
from typing import Any, TypeVar

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ValidationError

from guildsite.auth import AdminGate
from guildsite.config import Settings, get_settings
from guildsite.dependencies import (
    get_admin_gate,
    get_discord_client,
    get_settings_store,
    read_json_body,
    require_admin,
)
from guildsite.discord_client import MESSAGE_LIMIT, DiscordClient
from guildsite.errors import (
    ApiError,
    StoreUnavailable,
    Unauthorized,
    UpstreamError,
    ValidationFailure,
)
from guildsite.normalize import normalize_messages, normalize_owner
from guildsite.schemas import (
    MessageResponse,
    OwnerResponse,
    ProfileResponse,
    ProfileUpdateRequest,
    ScheduleResponse,
    ScheduleUpdateRequest,
    ScheduleUpdateResponse,
    SuccessResponse,
    VerifyRequest,
)
from guildsite.store import (
    PROFILE_ABOUT_KEY,
    PROFILE_CREDITS_KEY,
    SCHEDULE_URL_KEY,
    SettingsStore,
)

logger = logging.getLogger(__name__)

router = APIRouter()

PROFILE_KEYS = {
    "about": PROFILE_ABOUT_KEY,
    "credits": PROFILE_CREDITS_KEY,
}

_SNOWFLAKE = re.compile(r"^[0-9]+\Z")

ModelT = TypeVar("ModelT", bound=BaseModel)


def _parse_body(model: type[ModelT], body: Any) -> ModelT:
    if body is None:
        return model()
    try:
        return model.model_validate(body)
    except ValidationError as exc:
        raise ValidationFailure("Invalid request body") from exc


def _log_upstream_failure(context: str, exc: UpstreamError) -> None:
    if exc.status_code is not None:
        logger.error(
            "Discord API error (%s): %s %s", context, exc.status_code, exc.body
        )
    else:
        logger.error("Server error (%s): %s", context, exc)


# --- Discord ---


@router.get("/owner", response_model=OwnerResponse)
def get_owner(
    settings: Settings = Depends(get_settings),
    client: DiscordClient = Depends(get_discord_client),
):
    if not client.configured:
        logger.error("Attempted to fetch owner data, but no token is configured.")
    try:
        member = client.fetch_owner_member(settings.guild_id, settings.owner_id)
    except UpstreamError as exc:
        _log_upstream_failure("owner", exc)
        raise ApiError("Failed to fetch Discord data") from exc
    return normalize_owner(settings.guild_id, member)


@router.get("/messages", response_model=list[MessageResponse])
def get_messages(
    channel_id: str | None = Query(None, alias="channelId"),
    client: DiscordClient = Depends(get_discord_client),
):
    if not channel_id:
        raise ValidationFailure("Missing channelId parameter")
    if not _SNOWFLAKE.match(channel_id):
        # Only a bare ID may reach the upstream path.
        raise ValidationFailure("Invalid channelId parameter")
    try:
        messages = client.fetch_recent_messages(channel_id, limit=MESSAGE_LIMIT)
    except UpstreamError as exc:
        _log_upstream_failure("messages", exc)
        raise ApiError("Failed to fetch messages") from exc
    return normalize_messages(messages)


# --- Schedule ---


@router.get("/schedule", response_model=ScheduleResponse)
def get_schedule(
    settings: Settings = Depends(get_settings),
    store: SettingsStore = Depends(get_settings_store),
):
    try:
        url = store.get(SCHEDULE_URL_KEY)
    except StoreUnavailable:
        # Keep the site working on the default image.
        logger.exception("Database error (get schedule)")
        url = None
    return ScheduleResponse(url=url or settings.default_schedule_url)


@router.post(
    "/schedule",
    response_model=ScheduleUpdateResponse,
    dependencies=[Depends(require_admin)],
)
def update_schedule(
    body: Any = Depends(read_json_body),
    store: SettingsStore = Depends(get_settings_store),
):
    url = _parse_body(ScheduleUpdateRequest, body).url
    if not url:
        raise ValidationFailure("Missing URL")
    try:
        store.upsert(SCHEDULE_URL_KEY, url)
    except StoreUnavailable as exc:
        logger.exception("Database error (update schedule)")
        raise StoreUnavailable("Failed to update database.") from exc
    logger.info("Schedule updated in DB to: %s", url)
    return ScheduleUpdateResponse(success=True, url=url)


# --- Admin ---


@router.post("/verify", response_model=SuccessResponse)
def verify_password(
    payload: VerifyRequest | None = None,
    gate: AdminGate = Depends(get_admin_gate),
):
    if not gate.authorize(payload.password if payload else None):
        raise Unauthorized()
    return SuccessResponse(success=True)


# --- Profile ---


@router.get("/profile", response_model=ProfileResponse)
def get_profile(store: SettingsStore = Depends(get_settings_store)):
    try:
        about = store.get(PROFILE_ABOUT_KEY)
        credits = store.get(PROFILE_CREDITS_KEY)
    except StoreUnavailable:
        logger.exception("Database error (get profile)")
        about = credits = None
    return ProfileResponse(
        about=about if about is not None else [],
        credits=credits if credits is not None else [],
    )


@router.post(
    "/profile",
    response_model=SuccessResponse,
    dependencies=[Depends(require_admin)],
)
def update_profile(
    body: Any = Depends(read_json_body),
    store: SettingsStore = Depends(get_settings_store),
):
    payload = _parse_body(ProfileUpdateRequest, body)
    key = PROFILE_KEYS.get(payload.type)
    if key is None:
        raise ValidationFailure("Invalid profile type")
    if payload.data is None:
        raise ValidationFailure("Missing data")
    try:
        store.upsert(key, payload.data)
    except StoreUnavailable as exc:
        logger.exception("Database error (update profile %s)", payload.type)
        raise StoreUnavailable("Failed to update database.") from exc
    logger.info("Profile %s updated in DB", payload.type)
    return SuccessResponse(success=True)
