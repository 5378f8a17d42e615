"""
Async SQLAlchemy engine and session plumbing.

The engine and session factory are built once by the application factory
and kept on ``app.state``; request handlers receive a fresh session per
request through :func:`get_db_session`.
"""

from __future__ import annotations

import logging
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from config.settings import Settings
from database.models import Base

logger = logging.getLogger(__name__)


def build_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine for ``settings.database_url``."""
    url = make_url(settings.database_url)
    kwargs = {"echo": False}
    if url.get_backend_name() == "postgresql":
        kwargs.update(pool_size=10, max_overflow=20, pool_recycle=3600)
        if settings.database_ssl:
            kwargs["connect_args"] = {"ssl": "require"}
    return create_async_engine(url, **kwargs)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def ensure_schema(engine: AsyncEngine) -> None:
    """Create the ``users`` and ``messages`` tables if they are missing."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("DB schema ready")


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Dependency function — use in FastAPI `Depends(get_db_session)`."""
    async with request.app.state.session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
