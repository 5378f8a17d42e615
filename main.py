"""
Chat backend — application entry point.
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from api.middleware import register_middleware
from api.routes import router as api_router
from auth.routes import router as auth_router
from auth.password import hash_password
from auth.tokens import TokenService
from config.settings import Settings
from database.session import build_engine, build_session_factory, ensure_schema
from utils.errors import register_exception_handlers

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
        stream=sys.stdout,
    )
    for _noisy in ("sqlalchemy.engine", "asyncio"):
        logging.getLogger(_noisy).setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # A schema failure propagates and aborts startup; there is no degraded mode.
    await ensure_schema(app.state.engine)
    logger.info("Application ready to accept requests.")
    yield
    await app.state.engine.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings()
    configure_logging(settings)

    app = FastAPI(
        title="Chat API",
        version="1.0.0",
        description="Accounts, bearer tokens and room-scoped messages.",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.tokens = TokenService(settings.jwt_secret, settings.jwt_expiry_seconds)
    # Checked for unknown usernames at login; same cost as real hashes.
    app.state.dummy_hash = hash_password("not-a-real-password", settings.bcrypt_rounds)
    app.state.engine = build_engine(settings)
    app.state.session_factory = build_session_factory(app.state.engine)

    register_middleware(app, settings)
    register_exception_handlers(app)

    @app.get("/", response_class=PlainTextResponse)
    async def root() -> str:
        return "API up"

    # Routes
    app.include_router(auth_router, prefix="/api")
    app.include_router(api_router, prefix="/api")

    return app


if __name__ == "__main__":
    _settings = Settings()
    uvicorn.run(
        create_app(_settings),
        host=_settings.host,
        port=_settings.port,
        log_level="debug" if _settings.debug else "info",
    )
