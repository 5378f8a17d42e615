"""
REST API routes — profile and room messages.

Every route here sits behind ``get_current_identity``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import db_session, get_current_identity, get_settings
from auth.tokens import TokenClaims
from config.settings import Settings
from database.messages import DEFAULT_ROOM, insert_message, recent_messages
from database.users import get_user_by_id, update_avatar
from utils.errors import Unauthorized, ValidationError
from utils.schemas import MessageCreate, MessageOut, ProfileUpdate, RoomMessage, UserPublic

logger = logging.getLogger(__name__)

router = APIRouter()


# ── Profile ────────────────────────────────────────────────────────────


@router.get("/me", response_model=UserPublic)
async def get_self(
    identity: TokenClaims = Depends(get_current_identity),
    session: AsyncSession = Depends(db_session),
) -> Dict[str, Any]:
    """Current profile, read from the store rather than the token."""
    user = await get_user_by_id(session, identity.id)
    if user is None:
        raise Unauthorized()
    return user.to_public()


@router.put("/me", response_model=UserPublic)
async def update_self(
    req: Optional[ProfileUpdate] = None,
    identity: TokenClaims = Depends(get_current_identity),
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    """Overwrite the caller's avatar."""
    avatar = (req.avatar if req else None) or ""
    if settings.avatar_max_length and len(avatar) > settings.avatar_max_length:
        raise ValidationError("avatar too long")

    user = await update_avatar(session, identity.id, avatar)
    if user is None:
        raise Unauthorized()
    await session.commit()
    return user.to_public()


# ── Messages ───────────────────────────────────────────────────────────


@router.post("/messages", response_model=MessageOut)
async def post_message(
    req: Optional[MessageCreate] = None,
    identity: TokenClaims = Depends(get_current_identity),
    session: AsyncSession = Depends(db_session),
) -> Dict[str, Any]:
    """Post ``text`` to ``room`` (default ``global``) as the caller."""
    req = req or MessageCreate()
    if not req.text:
        raise ValidationError("text required")

    message = await insert_message(
        session, identity.id, req.text, room=req.room or DEFAULT_ROOM,
    )
    await session.commit()
    logger.debug("Message %s posted to %s by %s", message.id, message.room, identity.username)
    return message.to_dict()


@router.get("/messages", response_model=List[RoomMessage])
async def list_messages(
    room: str = Query(DEFAULT_ROOM),
    identity: TokenClaims = Depends(get_current_identity),
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(get_settings),
) -> List[Dict[str, Any]]:
    """Most recent messages of ``room``, oldest first."""
    return await recent_messages(
        session, room or DEFAULT_ROOM, limit=settings.message_window,
    )
