"""
Credential flow — signup and login.

Both operations return ``{"token": ..., "user": {id, username, avatar}}``.
Password hashing runs in a worker thread so the slow bcrypt rounds never
stall the event loop.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from auth.password import DEFAULT_ROUNDS, hash_password, verify_password
from auth.tokens import TokenService
from database.users import create_user, get_user_by_username
from utils.errors import (
    InvalidCredentials,
    PersistenceError,
    UsernameTaken,
    ValidationError,
)

logger = logging.getLogger(__name__)


def _diagnostic(exc: SQLAlchemyError) -> str:
    detail = str(getattr(exc, "orig", None) or exc).strip()
    return detail.splitlines()[0] if detail else "signup failed"


async def signup(
    session: AsyncSession,
    tokens: TokenService,
    username: str,
    password: str,
    avatar: str = "",
    rounds: int = DEFAULT_ROUNDS,
) -> Dict[str, Any]:
    """Register a new user and issue their first token."""
    if not username or not password:
        raise ValidationError("username and password required")

    password_hash = await asyncio.to_thread(hash_password, password, rounds)
    try:
        user = await create_user(session, username, password_hash, avatar or "")
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise UsernameTaken()
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.exception("Signup failed for %s", username)
        raise PersistenceError(_diagnostic(exc)) from exc

    logger.info("Registered user %s (%s)", user.username, user.id)
    return {
        "token": tokens.issue(str(user.id), user.username),
        "user": user.to_public(),
    }


async def login(
    session: AsyncSession,
    tokens: TokenService,
    username: str,
    password: str,
    dummy_hash: str,
) -> Dict[str, Any]:
    """
    Login with username + password.

    ``dummy_hash`` is checked when the username is unknown so both failure
    paths cost the same bcrypt work.
    """
    user = await get_user_by_username(session, username or "")
    stored_hash = user.password if user is not None else dummy_hash
    ok = await asyncio.to_thread(verify_password, password or "", stored_hash)
    if user is None or not ok:
        raise InvalidCredentials()

    logger.info("Login: %s (%s)", user.username, user.id)
    return {
        "token": tokens.issue(str(user.id), user.username),
        "user": user.to_public(),
    }
