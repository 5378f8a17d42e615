"""
Domain errors and their mapping onto HTTP responses.

Handlers and services raise a ``ChatError`` subclass; the exception
handlers installed by :func:`register_exception_handlers` translate each
kind into a ``{"error": message}`` body using the fixed ``ERROR_STATUS``
table.  Store failures that escape a handler are logged in full and
answered with a reduced-detail 500.
"""

from __future__ import annotations

import logging
from typing import Dict, Type

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class ChatError(Exception):
    """Base class for every error reported back to a client."""

    default_message = "request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ChatError):
    default_message = "invalid request"


class UsernameTaken(ChatError):
    default_message = "username exists"


class InvalidCredentials(ChatError):
    default_message = "invalid credentials"


class Unauthorized(ChatError):
    default_message = "unauthorized"


class PersistenceError(ChatError):
    default_message = "internal server error"


class TokenError(ChatError):
    """Raised by the token service; the auth guard folds it into ``Unauthorized``."""

    default_message = "invalid token"


class InvalidToken(TokenError):
    pass


class ExpiredToken(TokenError):
    default_message = "token expired"


ERROR_STATUS: Dict[Type[ChatError], int] = {
    ValidationError: 400,
    UsernameTaken: 400,
    InvalidCredentials: 400,
    Unauthorized: 401,
    TokenError: 401,
    PersistenceError: 500,
}


def status_for(exc: ChatError) -> int:
    """Look up the HTTP status for ``exc``, walking its class hierarchy."""
    for cls in type(exc).__mro__:
        if cls in ERROR_STATUS:
            return ERROR_STATUS[cls]
    return 500


def error_body(message: str) -> Dict[str, str]:
    return {"error": message}


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the error → response translation to ``app``."""

    @app.exception_handler(ChatError)
    async def handle_chat_error(request: Request, exc: ChatError) -> JSONResponse:
        return JSONResponse(status_code=status_for(exc), content=error_body(exc.message))

    @app.exception_handler(RequestValidationError)
    async def handle_bad_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.debug("Rejected request body on %s: %s", request.url.path, exc.errors())
        return JSONResponse(status_code=400, content=error_body("invalid request body"))

    @app.exception_handler(SQLAlchemyError)
    async def handle_store_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.exception(
            "Store failure on %s %s", request.method, request.url.path, exc_info=exc,
        )
        return JSONResponse(status_code=500, content=error_body("internal server error"))
