"""
Auth API routes — signup, login.

Route prefix: /api
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import db_session, get_dummy_hash, get_settings, get_token_service
from auth import service
from auth.tokens import TokenService
from config.settings import Settings
from utils.schemas import AuthResponse, LoginRequest, SignupRequest

router = APIRouter(tags=["auth"])


@router.post("/signup", response_model=AuthResponse)
async def signup(
    req: Optional[SignupRequest] = None,
    session: AsyncSession = Depends(db_session),
    tokens: TokenService = Depends(get_token_service),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    """Register a new user."""
    req = req or SignupRequest()
    return await service.signup(
        session,
        tokens,
        req.username,
        req.password,
        avatar=req.avatar or "",
        rounds=settings.bcrypt_rounds,
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    req: Optional[LoginRequest] = None,
    session: AsyncSession = Depends(db_session),
    tokens: TokenService = Depends(get_token_service),
    dummy_hash: str = Depends(get_dummy_hash),
) -> Dict[str, Any]:
    """Login with username + password."""
    req = req or LoginRequest()
    return await service.login(session, tokens, req.username, req.password, dummy_hash)
