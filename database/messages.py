"""
Message store — room-scoped chat messages.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import Message, User, as_utc, to_uuid

DEFAULT_ROOM = "global"
DEFAULT_WINDOW = 50


async def insert_message(
    session: AsyncSession,
    author_id: str | uuid.UUID,
    text: str,
    room: str = DEFAULT_ROOM,
    created_at: Optional[datetime] = None,
) -> Message:
    """
    Insert a message.

    ``created_at`` is left to the database clock unless given explicitly
    (backfills, tests); the stamped value is read back after the flush.
    """
    message = Message(
        id=uuid.uuid4(),
        room=room,
        user_id=to_uuid(author_id),
        text=text,
    )
    if created_at is not None:
        message.created_at = created_at
    session.add(message)
    await session.flush()
    if created_at is None:
        await session.refresh(message, ["created_at"])
    return message


async def recent_messages(
    session: AsyncSession,
    room: str = DEFAULT_ROOM,
    limit: int = DEFAULT_WINDOW,
) -> List[Dict[str, Any]]:
    """
    Return the ``limit`` most recent messages of ``room``, oldest first.

    The query has to order newest-first so the LIMIT keeps the latest
    rows; the window is then reversed into chronological order.
    """
    result = await session.execute(
        select(
            Message.id,
            Message.room,
            Message.text,
            Message.created_at,
            User.username,
            User.avatar,
        )
        .join(User, User.id == Message.user_id)
        .where(Message.room == room)
        .order_by(Message.created_at.desc())
        .limit(limit)
    )
    rows = list(result.all())
    rows.reverse()
    return [
        {
            "id": str(row.id),
            "room": row.room,
            "text": row.text,
            "createdAt": as_utc(row.created_at).isoformat(),
            "username": row.username,
            "avatar": row.avatar or "",
        }
        for row in rows
    ]
