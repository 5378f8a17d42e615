"""
Pydantic schemas for the chat API.

Request fields are optional at the schema level: missing values are
reported by the handlers as ``{"error": ...}`` validation errors rather
than FastAPI's default 422 payload.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


# ═══════════════════════════════════════════════════════════════════════════════
# Requests
# ═══════════════════════════════════════════════════════════════════════════════


class SignupRequest(BaseModel):
    username: str = ""
    password: str = ""
    avatar: Optional[str] = ""


class LoginRequest(BaseModel):
    username: str = ""
    password: str = ""


class ProfileUpdate(BaseModel):
    avatar: Optional[str] = ""


class MessageCreate(BaseModel):
    room: Optional[str] = None
    text: Optional[str] = None


# ═══════════════════════════════════════════════════════════════════════════════
# Responses
# ═══════════════════════════════════════════════════════════════════════════════


class UserPublic(BaseModel):
    id: str
    username: str
    avatar: str = ""


class AuthResponse(BaseModel):
    token: str
    user: UserPublic


class MessageOut(BaseModel):
    id: str
    room: str
    authorId: str
    text: str
    createdAt: str


class RoomMessage(BaseModel):
    """A message as shown in a room feed, with its author's display fields."""

    id: str
    room: str
    text: str
    createdAt: str
    username: str
    avatar: str = ""

