"""
Pydantic schemas for the guild site API.
"""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel


class OwnerResponse(BaseModel):
    id: Optional[str] = None
    username: Optional[str] = None
    global_name: Optional[str] = None
    discriminator: Optional[str] = None
    nick: Optional[str] = None
    avatar_url: str
    status: Literal["offline"] = "offline"


class MessageAuthor(BaseModel):
    id: Optional[str] = None
    username: Optional[str] = None
    global_name: Optional[str] = None
    avatar: Optional[str] = None
    discriminator: Optional[str] = None


class MessageMember(BaseModel):
    nick: Optional[str] = None
    avatar: Optional[str] = None


class MessageReaction(BaseModel):
    emoji: Optional[dict] = None
    count: Optional[int] = None
    me: Optional[bool] = None


class ReferencedMessage(BaseModel):
    id: Optional[str] = None
    author: MessageAuthor
    content: Optional[str] = None
    mentions: list[dict] = []


class MessageResponse(BaseModel):
    id: Optional[str] = None
    content: Optional[str] = None
    timestamp: Optional[str] = None
    author: MessageAuthor
    member: Optional[MessageMember] = None
    attachments: list[dict] = []
    sticker_items: list[dict] = []
    mentions: list[dict] = []
    reactions: list[MessageReaction] = []
    referenced_message: Optional[ReferencedMessage] = None


class ScheduleResponse(BaseModel):
    url: str


# Request bodies keep every field optional so missing values reach the
# handler and are rejected with a 400 after the admin check.
class ScheduleUpdateRequest(BaseModel):
    url: Optional[str] = None


class ScheduleUpdateResponse(BaseModel):
    success: bool
    url: str


class VerifyRequest(BaseModel):
    password: Optional[str] = None


class SuccessResponse(BaseModel):
    success: bool


class ProfileResponse(BaseModel):
    about: Any = []
    credits: Any = []


class ProfileUpdateRequest(BaseModel):
    type: Optional[str] = None
    data: Any = None
