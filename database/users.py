"""
Credential store — persistence for ``User`` rows.

Username uniqueness is left entirely to the database constraint;
:func:`create_user` lets ``IntegrityError`` propagate so the caller can
report it without a racy check-then-insert.
"""

from __future__ import annotations

import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import User, to_uuid


async def create_user(
    session: AsyncSession,
    username: str,
    password_hash: str,
    avatar: str = "",
) -> User:
    """Insert a new user and flush so constraint violations surface here."""
    user = User(
        id=uuid.uuid4(),
        username=username,
        password=password_hash,
        avatar=avatar,
    )
    session.add(user)
    await session.flush()
    return user


async def get_user_by_username(session: AsyncSession, username: str) -> Optional[User]:
    result = await session.execute(select(User).where(User.username == username))
    return result.scalar_one_or_none()


async def get_user_by_id(session: AsyncSession, user_id: str | uuid.UUID) -> Optional[User]:
    try:
        uid = to_uuid(user_id)
    except ValueError:
        return None
    return await session.get(User, uid)


async def update_avatar(
    session: AsyncSession,
    user_id: str | uuid.UUID,
    avatar: str,
) -> Optional[User]:
    """Overwrite the avatar of ``user_id``; returns ``None`` if the user is gone."""
    user = await get_user_by_id(session, user_id)
    if user is None:
        return None
    user.avatar = avatar
    await session.flush()
    return user
