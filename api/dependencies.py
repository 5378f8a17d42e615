"""
FastAPI dependencies (shared across routes).
"""

from __future__ import annotations

import logging
from typing import AsyncGenerator

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from auth.tokens import TokenClaims, TokenService
from config.settings import Settings
from database.session import get_db_session
from utils.errors import TokenError, Unauthorized

logger = logging.getLogger(__name__)

_BEARER_PREFIX = "Bearer "


async def db_session(session: AsyncSession = Depends(get_db_session)) -> AsyncGenerator[AsyncSession, None]:
    """Re-export so routes import from a single place."""
    yield session


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_service(request: Request) -> TokenService:
    return request.app.state.tokens


def get_dummy_hash(request: Request) -> str:
    return request.app.state.dummy_hash


def bearer_token(authorization: str) -> str:
    """Token part of a ``Bearer`` header; any other scheme yields ``""``."""
    if not authorization.startswith(_BEARER_PREFIX):
        return ""
    return authorization[len(_BEARER_PREFIX):].strip()


async def get_current_identity(
    authorization: str = Header("", alias="Authorization"),
    tokens: TokenService = Depends(get_token_service),
) -> TokenClaims:
    """
    Extract and verify the Bearer token from the Authorization header.
    Returns the authenticated identity; never consults the database.
    """
    try:
        return tokens.verify(bearer_token(authorization))
    except TokenError as exc:
        logger.debug("Rejected token: %s", exc.message)
        raise Unauthorized() from exc
